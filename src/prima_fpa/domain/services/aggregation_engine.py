# src/prima_fpa/domain/services/aggregation_engine.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Dimensional aggregation and KPI rollups over fact collections.

Purpose:
    Roll flat collections of :class:`FactRecord` up into per-bucket scenario
    totals, per-measure KPI records, variance tables, and chronological
    measure series.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No HTTP concerns.
        * No persistence.
    - Every aggregation iterates its input once and accumulates values per
      bucket; totals are computed with :func:`math.fsum`, which is exactly
      rounded and therefore independent of input order.
    - Duplicate facts for the same tuple are summed, never deduplicated.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from prima_fpa.domain.entities.analytics import (
    KpiRecord,
    ScenarioTotals,
    VarianceRow,
)
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.enums.fpa import Dimension, Scenario
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.services.periods import (
    parse_period,
    quarter_months,
    sort_periods,
    try_parse_period,
)
from prima_fpa.domain.services.variance_engine import (
    FAVORABILITY_EPSILON,
    calculate_variance,
    classify_favorability,
    trend_of,
)


@dataclass(slots=True)
class _ScenarioAccumulator:
    """Mutable per-bucket collector; converted to :class:`ScenarioTotals` at the end."""

    actual: list[float]
    budget: list[float]
    forecast: list[float]

    @classmethod
    def empty(cls) -> _ScenarioAccumulator:
        return cls(actual=[], budget=[], forecast=[])

    def add(self, scenario: Scenario, value: float) -> None:
        if scenario is Scenario.ACTUAL:
            self.actual.append(value)
        elif scenario is Scenario.BUDGET:
            self.budget.append(value)
        else:
            self.forecast.append(value)

    def totals(self) -> ScenarioTotals:
        return ScenarioTotals(
            actual=math.fsum(self.actual),
            budget=math.fsum(self.budget),
            forecast=math.fsum(self.forecast),
        )


# --------------------------------------------------------------------------- #
# Filtering                                                                   #
# --------------------------------------------------------------------------- #


def _period_in_range(period: str, flt: FactFilter) -> bool:
    if flt.period_from is None and flt.period_to is None:
        return True
    parsed = try_parse_period(period)
    if parsed is None:
        # Unknown keys can only be compared lexically.
        if flt.period_from is not None and period < flt.period_from:
            return False
        return not (flt.period_to is not None and period > flt.period_to)
    position = parsed.sort_position()[:2]
    if flt.period_from is not None:
        lower = parse_period(flt.period_from)
        start = (lower.year, lower.quarter * 3 - 2) if lower.quarter else lower.sort_position()[:2]
        if position < start:
            return False
    if flt.period_to is not None:
        upper = parse_period(flt.period_to)
        if position > upper.sort_position()[:2]:
            return False
    return True


def matches_filter(fact: FactRecord, flt: FactFilter) -> bool:
    """Return True when ``fact`` satisfies every criterion of ``flt``."""
    if flt.business_units and fact.business_unit not in flt.business_units:
        return False
    if flt.markets and fact.market not in flt.markets:
        return False
    if flt.products and fact.product not in flt.products:
        return False
    if flt.channels and fact.channel not in flt.channels:
        return False
    if flt.departments and fact.department not in flt.departments:
        return False
    return _period_in_range(fact.period, flt)


def filter_facts(facts: Iterable[FactRecord], flt: FactFilter | None) -> list[FactRecord]:
    """Return the facts selected by ``flt`` (all facts when ``flt`` is None or empty).

    Raises:
        InvalidPeriodError: If a period bound on ``flt`` is not a valid key.
    """
    if flt is None or flt.is_empty:
        return list(facts)
    return [fact for fact in facts if matches_filter(fact, flt)]


# --------------------------------------------------------------------------- #
# Aggregations                                                                #
# --------------------------------------------------------------------------- #


def aggregate_by_dimension(
    facts: Iterable[FactRecord],
    dimension: Dimension,
) -> dict[str, ScenarioTotals]:
    """Sum facts per distinct value of ``dimension`` and per scenario.

    Args:
        facts: Fact records to aggregate.
        dimension: Grouping key. Facts missing the key bucket under ``"N/A"``.

    Returns:
        Mapping from bucket key to :class:`ScenarioTotals`, in first-seen
        order. Scenarios never observed in a bucket are ``0.0``.
    """
    buckets: dict[str, _ScenarioAccumulator] = {}
    for fact in facts:
        key = fact.dimension_key(dimension)
        acc = buckets.get(key)
        if acc is None:
            acc = buckets[key] = _ScenarioAccumulator.empty()
        acc.add(fact.scenario, fact.value)
    return {key: acc.totals() for key, acc in buckets.items()}


def totals_by_measure(facts: Iterable[FactRecord]) -> dict[Measure, ScenarioTotals]:
    """Sum facts per measure and per scenario, in first-seen measure order."""
    buckets: dict[Measure, _ScenarioAccumulator] = {}
    for fact in facts:
        acc = buckets.get(fact.measure)
        if acc is None:
            acc = buckets[fact.measure] = _ScenarioAccumulator.empty()
        acc.add(fact.scenario, fact.value)
    return {measure: acc.totals() for measure, acc in buckets.items()}


def calculate_kpis(
    facts: Iterable[FactRecord],
    *,
    epsilon: float = FAVORABILITY_EPSILON,
) -> list[KpiRecord]:
    """Return one KPI record per measure present in ``facts``.

    Only ACTUAL and BUDGET values contribute; FORECAST values are ignored.

    Args:
        facts: Fact records.
        epsilon: Neutral band for favorability on the fractional variance.

    Returns:
        KPI records in first-seen measure order.
    """
    kpis: list[KpiRecord] = []
    for measure, totals in totals_by_measure(facts).items():
        variance = calculate_variance(totals.actual, totals.budget)
        kpis.append(
            KpiRecord(
                name=measure,
                actual=totals.actual,
                budget=totals.budget,
                variance=variance.absolute_variance,
                percent_variance=variance.percent_variance,
                trend=trend_of(variance.absolute_variance),
                favorability=classify_favorability(
                    variance.percent_variance,
                    measure.is_revenue_type,
                    epsilon=epsilon,
                ),
            )
        )
    return kpis


def aggregate_quarter(
    facts: Iterable[FactRecord],
    year: int,
    quarter: int,
) -> ScenarioTotals:
    """Sum facts whose period falls in the given quarter.

    Both the monthly keys of the quarter (e.g. ``2024-10..2024-12`` for Q4)
    and the quarterly key itself (``2024-Q4``) are included.

    Raises:
        InvalidPeriodError: If ``quarter`` is outside 1..4.
    """
    keys = set(quarter_months(year, quarter))
    keys.add(f"{year}-Q{quarter}")
    acc = _ScenarioAccumulator.empty()
    for fact in facts:
        if fact.period in keys:
            acc.add(fact.scenario, fact.value)
    return acc.totals()


def build_variance_table(
    facts: Iterable[FactRecord],
    dimension: Dimension,
    comparison: Scenario = Scenario.BUDGET,
    *,
    epsilon: float = FAVORABILITY_EPSILON,
) -> list[VarianceRow]:
    """Compare ACTUAL against ``comparison`` per (dimension value, measure).

    Args:
        facts: Fact records.
        dimension: Row grouping dimension.
        comparison: ``BUDGET`` or ``FORECAST``. ``ACTUAL`` compares actuals
            with themselves and yields zero variances.
        epsilon: Neutral band for favorability on the fractional variance.

    Returns:
        Rows sorted by absolute variance magnitude, largest first. Ties keep
        first-seen order.
    """
    buckets: dict[tuple[str, Measure], _ScenarioAccumulator] = {}
    for fact in facts:
        key = (fact.dimension_key(dimension), fact.measure)
        acc = buckets.get(key)
        if acc is None:
            acc = buckets[key] = _ScenarioAccumulator.empty()
        acc.add(fact.scenario, fact.value)

    rows: list[VarianceRow] = []
    for (dimension_value, measure), acc in buckets.items():
        totals = acc.totals()
        base = totals.actual
        other = totals.for_scenario(comparison)
        variance = calculate_variance(base, other)
        rows.append(
            VarianceRow(
                entity=f"{dimension_value} - {measure.value}",
                dimension_value=dimension_value,
                measure=measure,
                actual=base,
                comparison=other,
                comparison_scenario=comparison,
                absolute_variance=variance.absolute_variance,
                percent_variance=variance.percent_variance,
                favorability=classify_favorability(
                    variance.percent_variance,
                    measure.is_revenue_type,
                    epsilon=epsilon,
                ),
            )
        )
    rows.sort(key=lambda row: abs(row.absolute_variance), reverse=True)
    return rows


def build_measure_series(
    facts: Iterable[FactRecord],
    measure: Measure,
    scenario: Scenario = Scenario.ACTUAL,
) -> tuple[list[str], list[float]]:
    """Return chronological per-period sums for one measure and scenario.

    Returns:
        ``(periods, values)`` where ``periods`` is sorted chronologically and
        ``values[i]`` is the total for ``periods[i]``.
    """
    buckets: dict[str, list[float]] = {}
    for fact in facts:
        if fact.measure is measure and fact.scenario is scenario:
            buckets.setdefault(fact.period, []).append(fact.value)
    periods = sort_periods(buckets)
    return periods, [math.fsum(buckets[period]) for period in periods]


__all__ = [
    "aggregate_by_dimension",
    "aggregate_quarter",
    "build_measure_series",
    "build_variance_table",
    "calculate_kpis",
    "filter_facts",
    "matches_filter",
    "totals_by_measure",
]
