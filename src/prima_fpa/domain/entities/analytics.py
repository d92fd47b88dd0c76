# src/prima_fpa/domain/entities/analytics.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Analytics result entities.

Purpose:
    Immutable, derived (never stored) results produced by the aggregation and
    forecast engine: scenario totals, variances, KPI records, variance-table
    rows, and scenario adjustments.

Layer: domain/entities
"""

from __future__ import annotations

from dataclasses import dataclass

from prima_fpa.domain.enums.fpa import Favorability, Scenario, Trend
from prima_fpa.domain.enums.measure import Measure

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class ScenarioTotals(BaseEntity):
    """Per-scenario sums for one aggregation bucket.

    Scenarios never observed in the bucket stay at ``0.0``.
    """

    actual: float = 0.0
    budget: float = 0.0
    forecast: float = 0.0

    def for_scenario(self, scenario: Scenario) -> float:
        """Return the total for ``scenario``."""
        if scenario is Scenario.ACTUAL:
            return self.actual
        if scenario is Scenario.BUDGET:
            return self.budget
        return self.forecast


@dataclass(frozen=True, slots=True)
class Variance(BaseEntity):
    """Absolute and fractional variance between two values.

    Attributes:
        absolute_variance: ``actual - budget``.
        percent_variance: ``absolute_variance / budget`` as a fraction
            (0.05 means 5%), or ``0.0`` when the budget is zero.
    """

    absolute_variance: float
    percent_variance: float


@dataclass(frozen=True, slots=True)
class VarianceResult(BaseEntity):
    """Variance of an actual against a budget, with its favorability."""

    actual: float
    budget: float
    absolute_variance: float
    percent_variance: float
    favorability: Favorability


@dataclass(frozen=True, slots=True)
class KpiRecord(BaseEntity):
    """KPI rollup for one measure.

    Attributes:
        name: Measure the KPI summarizes.
        actual: Sum of ACTUAL values.
        budget: Sum of BUDGET values.
        variance: ``actual - budget``.
        percent_variance: Fractional variance (0 when budget is zero).
        trend: ``UP``/``DOWN`` by sign of variance, ``FLAT`` only when exactly 0.
        favorability: Classification using the measure's polarity.
    """

    name: Measure
    actual: float
    budget: float
    variance: float
    percent_variance: float
    trend: Trend
    favorability: Favorability


@dataclass(frozen=True, slots=True)
class VarianceRow(BaseEntity):
    """One row of a variance table (dimension value x measure)."""

    entity: str
    dimension_value: str
    measure: Measure
    actual: float
    comparison: float
    comparison_scenario: Scenario
    absolute_variance: float
    percent_variance: float
    favorability: Favorability


@dataclass(frozen=True, slots=True)
class ScenarioAdjustment(BaseEntity):
    """Base and adjusted totals for one measure under a what-if scenario."""

    measure: Measure
    base_value: float
    adjusted_value: float

    @property
    def delta(self) -> float:
        """Return ``adjusted_value - base_value``."""
        return self.adjusted_value - self.base_value


__all__ = [
    "KpiRecord",
    "ScenarioAdjustment",
    "ScenarioTotals",
    "Variance",
    "VarianceResult",
    "VarianceRow",
]
