# src/prima_fpa/domain/entities/fact_record.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Fact Record Entity

Purpose:
    Immutable atomic unit of financial data: one value for one measure, in
    one scenario, for one reporting period, tagged with optional dimension
    keys (business unit, market, product, channel, department).

Layer: domain/entities

Notes:
    - Recognised period keys are stored in canonical form (``2024-1`` becomes
      ``2024-01``, ``2024-q4`` becomes ``2024-Q4``); other keys are kept as given.
    - Within one (period, dimensions, measure, scenario) tuple at most one
      value is expected. The engine does not deduplicate; duplicates are
      summed by every aggregation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from prima_fpa.domain.enums.fpa import Dimension, Scenario
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.services.periods import try_parse_period

from .base import BaseEntity

MISSING_DIMENSION_KEY = "N/A"


@dataclass(frozen=True, slots=True)
class FactRecord(BaseEntity):
    """Single financial fact.

    Args:
        period: Opaque reporting-interval key (``YYYY-MM`` or ``YYYY-Qn``).
        measure: Financial metric.
        scenario: Provenance tag (actual, budget, forecast).
        value: Signed amount in the record's native unit.
        business_unit: Optional business unit key.
        market: Optional market key.
        product: Optional product key.
        channel: Optional channel key.
        department: Optional department key.

    Raises:
        ValueError: If the period is blank or the value is not a finite number.
    """

    period: str
    measure: Measure
    scenario: Scenario
    value: float
    business_unit: str | None = None
    market: str | None = None
    product: str | None = None
    channel: str | None = None
    department: str | None = None

    def __post_init__(self) -> None:
        if not self.period or not self.period.strip():
            raise ValueError("period must be a non-empty string")
        parsed = try_parse_period(self.period)
        if parsed is not None:
            object.__setattr__(self, "period", parsed.key)
        if isinstance(self.value, bool) or not isinstance(self.value, int | float):
            raise ValueError("value must be numeric")
        if not math.isfinite(self.value):
            raise ValueError("value must be finite")
        object.__setattr__(self, "value", float(self.value))

    def dimension_key(self, dimension: Dimension) -> str:
        """Return the grouping key for ``dimension``.

        Missing or blank dimension values resolve to ``"N/A"``.
        """
        raw: str | None = getattr(self, dimension.value)
        if raw is None or raw == "":
            return MISSING_DIMENSION_KEY
        return raw


__all__ = ["FactRecord", "MISSING_DIMENSION_KEY"]
