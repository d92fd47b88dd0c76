# tests/unit/domain/services/test_aggregation_engine.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for dimensional aggregation, KPI rollups and variance tables."""

from __future__ import annotations

import random

import pytest

from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.enums.fpa import Dimension, Favorability, Scenario, Trend
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.exceptions.fpa import InvalidPeriodError
from prima_fpa.domain.services.aggregation_engine import (
    aggregate_by_dimension,
    aggregate_quarter,
    build_measure_series,
    build_variance_table,
    calculate_kpis,
    filter_facts,
    totals_by_measure,
)


def test_aggregate_by_business_unit(sample_facts: list[FactRecord]) -> None:
    buckets = aggregate_by_dimension(sample_facts, Dimension.BUSINESS_UNIT)

    assert list(buckets) == ["Motor", "Home"]
    assert buckets["Motor"].actual == 140.0
    assert buckets["Motor"].budget == 140.0
    assert buckets["Home"].actual == 2800.0
    assert buckets["Home"].budget == 1000.0
    assert buckets["Home"].forecast == 0.0


def test_missing_dimension_buckets_under_na(sample_facts: list[FactRecord]) -> None:
    buckets = aggregate_by_dimension(sample_facts, Dimension.PRODUCT)

    assert list(buckets) == ["N/A"]
    assert buckets["N/A"].actual == 2940.0
    assert buckets["N/A"].budget == 1140.0


def test_bucket_totals_sum_to_grand_total(sample_facts: list[FactRecord]) -> None:
    grand_actual = sum(f.value for f in sample_facts if f.scenario is Scenario.ACTUAL)

    for dimension in Dimension:
        buckets = aggregate_by_dimension(sample_facts, dimension)
        assert sum(t.actual for t in buckets.values()) == pytest.approx(grand_actual)


def test_aggregation_is_order_independent(sample_facts: list[FactRecord]) -> None:
    facts = sample_facts + [
        FactRecord("2024-04", Measure.GWP, Scenario.ACTUAL, 0.1, business_unit="Home"),
        FactRecord("2024-05", Measure.GWP, Scenario.ACTUAL, 0.2, business_unit="Home"),
        FactRecord("2024-06", Measure.GWP, Scenario.ACTUAL, 0.3, business_unit="Home"),
    ]
    shuffled = list(facts)
    random.Random(7).shuffle(shuffled)

    forward = aggregate_by_dimension(facts, Dimension.BUSINESS_UNIT)
    mixed = aggregate_by_dimension(shuffled, Dimension.BUSINESS_UNIT)

    assert {k: v.actual for k, v in forward.items()} == {k: v.actual for k, v in mixed.items()}


def test_duplicate_facts_are_summed() -> None:
    fact = FactRecord("2024-01", Measure.REVENUE, Scenario.ACTUAL, 10.0, market="IT")

    totals = totals_by_measure([fact, fact])

    assert totals[Measure.REVENUE].actual == 20.0


def test_calculate_kpis(sample_facts: list[FactRecord]) -> None:
    kpis = {kpi.name: kpi for kpi in calculate_kpis(sample_facts)}

    assert list(kpis) == [Measure.REVENUE, Measure.OPEX, Measure.GWP, Measure.CLAIMS]

    revenue = kpis[Measure.REVENUE]
    assert revenue.variance == 10.0
    assert revenue.percent_variance == pytest.approx(10.0 / 90.0)
    assert revenue.trend is Trend.UP
    assert revenue.favorability is Favorability.FAVORABLE

    opex = kpis[Measure.OPEX]
    assert opex.trend is Trend.DOWN
    assert opex.favorability is Favorability.FAVORABLE

    claims = kpis[Measure.CLAIMS]
    assert claims.budget == 0.0
    assert claims.percent_variance == 0.0
    assert claims.favorability is Favorability.NEUTRAL
    assert claims.trend is Trend.UP


def test_kpis_ignore_forecast_values() -> None:
    facts = [
        FactRecord("2024-01", Measure.GWP, Scenario.ACTUAL, 100.0),
        FactRecord("2024-01", Measure.GWP, Scenario.BUDGET, 100.0),
        FactRecord("2024-01", Measure.GWP, Scenario.FORECAST, 999.0),
    ]

    (kpi,) = calculate_kpis(facts)

    assert kpi.variance == 0.0
    assert kpi.trend is Trend.FLAT
    assert kpi.favorability is Favorability.NEUTRAL


def test_kpis_of_empty_collection() -> None:
    assert calculate_kpis([]) == []


def test_aggregate_quarter_includes_months_and_quarter_key(
    sample_facts: list[FactRecord],
) -> None:
    facts = sample_facts + [FactRecord("2024-Q1", Measure.GWP, Scenario.ACTUAL, 60.0)]

    totals = aggregate_quarter(facts, 2024, 1)

    assert totals.actual == 3000.0
    assert totals.budget == 1140.0
    assert aggregate_quarter(facts, 2024, 2).actual == 0.0


def test_non_canonical_period_keys_aggregate_with_canonical_ones() -> None:
    facts = [
        FactRecord("2024-01", Measure.GWP, Scenario.ACTUAL, 10.0),
        FactRecord("2024-1", Measure.GWP, Scenario.ACTUAL, 5.0),
        FactRecord("2024-q4", Measure.GWP, Scenario.ACTUAL, 7.0),
    ]

    assert aggregate_quarter(facts, 2024, 1).actual == 15.0
    assert aggregate_quarter(facts, 2024, 4).actual == 7.0
    assert build_measure_series(facts, Measure.GWP) == (["2024-01", "2024-Q4"], [15.0, 7.0])


def test_aggregate_quarter_rejects_bad_quarter(sample_facts: list[FactRecord]) -> None:
    with pytest.raises(InvalidPeriodError):
        aggregate_quarter(sample_facts, 2024, 5)


def test_variance_table_sorted_by_magnitude(sample_facts: list[FactRecord]) -> None:
    rows = build_variance_table(sample_facts, Dimension.BUSINESS_UNIT)

    assert [row.entity for row in rows] == [
        "Home - GWP",
        "Home - Claims",
        "Motor - Revenue",
        "Motor - Opex",
    ]
    magnitudes = [abs(row.absolute_variance) for row in rows]
    assert magnitudes == sorted(magnitudes, reverse=True)

    opex = rows[-1]
    assert opex.comparison_scenario is Scenario.BUDGET
    assert opex.absolute_variance == -10.0
    assert opex.favorability is Favorability.FAVORABLE


def test_variance_table_against_forecast() -> None:
    facts = [
        FactRecord("2024-01", Measure.REVENUE, Scenario.ACTUAL, 90.0, market="IT"),
        FactRecord("2024-01", Measure.REVENUE, Scenario.FORECAST, 100.0, market="IT"),
    ]

    (row,) = build_variance_table(facts, Dimension.MARKET, Scenario.FORECAST)

    assert row.comparison == 100.0
    assert row.percent_variance == pytest.approx(-0.1)
    assert row.favorability is Favorability.UNFAVORABLE


def test_measure_series_is_chronological(sample_facts: list[FactRecord]) -> None:
    facts = list(reversed(sample_facts))

    periods, values = build_measure_series(facts, Measure.GWP)

    assert periods == ["2024-02", "2024-03"]
    assert values == [1000.0, 1200.0]
    assert build_measure_series(facts, Measure.GWP, Scenario.BUDGET) == (["2024-02"], [1000.0])


def test_filter_by_period_range(sample_facts: list[FactRecord]) -> None:
    selected = filter_facts(sample_facts, FactFilter(period_from="2024-02"))
    assert {f.period for f in selected} == {"2024-02", "2024-03"}

    selected = filter_facts(sample_facts, FactFilter(period_to="2024-01"))
    assert len(selected) == 4


def test_filter_quarter_bounds_cover_whole_quarter(sample_facts: list[FactRecord]) -> None:
    selected = filter_facts(sample_facts, FactFilter(period_from="2024-Q1", period_to="2024-Q1"))

    assert len(selected) == len(sample_facts)


def test_filter_by_dimensions(sample_facts: list[FactRecord]) -> None:
    selected = filter_facts(sample_facts, FactFilter(business_units=frozenset({"Motor"})))
    assert {f.business_unit for f in selected} == {"Motor"}

    selected = filter_facts(sample_facts, FactFilter(departments=frozenset({"ops"})))
    assert [f.measure for f in selected] == [Measure.OPEX, Measure.OPEX]


def test_empty_filter_returns_everything(sample_facts: list[FactRecord]) -> None:
    assert filter_facts(sample_facts, None) == sample_facts
    assert filter_facts(sample_facts, FactFilter()) == sample_facts


def test_filter_rejects_invalid_bound(sample_facts: list[FactRecord]) -> None:
    with pytest.raises(InvalidPeriodError):
        filter_facts(sample_facts, FactFilter(period_from="not-a-period"))
