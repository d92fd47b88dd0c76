# src/prima_fpa/domain/interfaces/repositories/fact_repository.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Fact repository interface.

Purpose:
    Define the storage port through which use cases read and append fact
    records. The aggregation engine never talks to storage itself; use cases
    fetch a filtered snapshot and hand it to the engine wholesale.

Layer:
    domain/interfaces/repositories

Notes:
    Implementations are constructed explicitly at application startup and
    injected into use cases. They must return facts in insertion order so
    first-seen ordering in KPI rollups is stable.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.entities.fact_record import FactRecord


class FactRepository(Protocol):
    """Protocol for repositories holding fact records."""

    async def list_facts(self, flt: FactFilter | None = None) -> list[FactRecord]:
        """Return facts matching ``flt`` in insertion order.

        Args:
            flt:
                Optional filter. ``None`` or an empty filter returns every
                stored fact.

        Raises:
            InvalidPeriodError: If a period bound on ``flt`` is malformed.
        """

    async def add_facts(self, facts: Sequence[FactRecord]) -> int:
        """Append facts and return how many were stored.

        Duplicate tuples are stored as-is; aggregations sum them.
        """

    async def clear(self) -> int:
        """Remove every fact and return how many were removed."""

    async def count(self) -> int:
        """Return the number of stored facts."""
