# src/prima_fpa/infrastructure/observability/metrics.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""FP&A observability helpers and Prometheus metrics.

This module centralizes the Prometheus collectors exposed by the analytics
service.

Exports
-------
Core collectors (names are part of the public contract and must remain stable):

* ``prima_fpa_usecase_latency_seconds`` (Histogram, label ``usecase``)
* ``prima_fpa_facts_imported_total`` (Counter, label ``layout``)
* ``prima_fpa_import_errors_total`` (Counter, label ``reason``)

Helpers:

* :func:`observe_usecase` - context manager timing one use-case execution.

Design
------
All collectors are created against the *current* default registry
(:data:`prometheus_client.REGISTRY`). If a collector with the same name
already exists in the active registry, the existing instance is reused
instead of registering a duplicate, so module re-imports in tests are safe.
"""

from __future__ import annotations

from collections.abc import Generator, Sequence
from contextlib import contextmanager, suppress
from dataclasses import dataclass, field
from time import perf_counter

import prometheus_client as prom
from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry


def _get_or_create_histogram(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Histogram:
    """Return a histogram bound to the current default registry.

    1. Reuse an existing :class:`Histogram` registered under ``name``.
    2. Otherwise register a new one on the same registry.
    3. If a concurrent registration raised ``Duplicated timeseries``, look
       the collector up again and reuse it.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    existing = mapping.get(name)
    if isinstance(existing, Histogram):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Histogram(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            mapping = getattr(registry, "_names_to_collectors", {})
            again = mapping.get(name)
            if isinstance(again, Histogram):
                return again
        raise


def _get_or_create_counter(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Counter:
    """Return a counter bound to the current default registry.

    Mirrors :func:`_get_or_create_histogram` for :class:`Counter` collectors.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    # Counters register under the name without the ``_total`` suffix.
    existing = mapping.get(name) or mapping.get(name.removesuffix("_total"))
    if isinstance(existing, Counter):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Counter(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            mapping = getattr(registry, "_names_to_collectors", {})
            again = mapping.get(name) or mapping.get(name.removesuffix("_total"))
            if isinstance(again, Counter):
                return again
        raise


# ---------------------------------------------------------------------------
# Core metrics
# ---------------------------------------------------------------------------

usecase_latency_seconds: Histogram = _get_or_create_histogram(
    "prima_fpa_usecase_latency_seconds",
    "Latency of FP&A use-case executions (seconds).",
    labelnames=("usecase", "outcome"),
)

facts_imported_total: Counter = _get_or_create_counter(
    "prima_fpa_facts_imported_total",
    "Fact records imported from uploaded files, by detected layout.",
    labelnames=("layout",),
)

import_errors_total: Counter = _get_or_create_counter(
    "prima_fpa_import_errors_total",
    "Rejected fact imports, by machine-readable reason.",
    labelnames=("reason",),
)


# ---------------------------------------------------------------------------
# Observation context manager used by use cases
# ---------------------------------------------------------------------------


@dataclass
class UsecaseObservation:
    """State captured while observing one use-case execution.

    Attributes:
        usecase: Use-case label (e.g. ``"get_kpi_summary"``).
        start: Monotonic start time in seconds.
        outcome: ``"success"`` or ``"error"``.
    """

    usecase: str
    start: float = field(default_factory=perf_counter)
    outcome: str = "success"


@contextmanager
def observe_usecase(usecase: str) -> Generator[UsecaseObservation, None, None]:
    """Record a latency sample for one use-case execution.

    The sample is labelled ``outcome="error"`` when the body raises; the
    exception is re-raised unchanged.

    Args:
        usecase: Use-case label.

    Yields:
        The mutable :class:`UsecaseObservation`.
    """
    obs = UsecaseObservation(usecase=usecase)
    try:
        yield obs
    except Exception:
        obs.outcome = "error"
        raise
    finally:
        elapsed = perf_counter() - obs.start
        with suppress(Exception):
            usecase_latency_seconds.labels(usecase=obs.usecase, outcome=obs.outcome).observe(elapsed)


def record_facts_imported(layout: str, count: int) -> None:
    """Increment the imported-facts counter for ``layout``."""
    if count > 0:
        facts_imported_total.labels(layout=layout).inc(count)


def record_import_error(reason: str) -> None:
    """Increment the import-error counter for ``reason``."""
    import_errors_total.labels(reason=reason).inc()


__all__ = [
    "UsecaseObservation",
    "facts_imported_total",
    "import_errors_total",
    "observe_usecase",
    "record_facts_imported",
    "record_import_error",
    "usecase_latency_seconds",
]
