# src/prima_fpa/adapters/repositories/in_memory_fact_repository.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
InMemoryFactRepository: process-local fact store.

Purpose:
    Hold fact records for the lifetime of the application instance. Facts
    arrive through JSON payloads, file imports, or a seed file at startup,
    and are served to use cases as filtered snapshots.

Layer: adapters / repositories

Notes:
    * Constructed explicitly by the application bootstrap and stored on
      ``app.state``; there is no module-level instance.
    * Mutations are serialized with an :class:`asyncio.Lock`. Readers get a
      list copy so the engine never sees a collection that changes under it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence

from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.services.aggregation_engine import filter_facts


class InMemoryFactRepository:
    """List-backed implementation of the fact repository port."""

    def __init__(self, facts: Iterable[FactRecord] | None = None) -> None:
        """Initialize the repository.

        Args:
            facts: Optional initial facts, stored in iteration order.
        """
        self._facts: list[FactRecord] = list(facts or ())
        self._lock = asyncio.Lock()

    async def list_facts(self, flt: FactFilter | None = None) -> list[FactRecord]:
        """Return a snapshot of facts matching ``flt``."""
        async with self._lock:
            snapshot = list(self._facts)
        return filter_facts(snapshot, flt)

    async def add_facts(self, facts: Sequence[FactRecord]) -> int:
        """Append ``facts`` and return the number stored."""
        async with self._lock:
            self._facts.extend(facts)
        return len(facts)

    async def clear(self) -> int:
        """Remove all facts and return the number removed."""
        async with self._lock:
            removed = len(self._facts)
            self._facts.clear()
        return removed

    async def count(self) -> int:
        """Return the number of stored facts."""
        async with self._lock:
            return len(self._facts)
