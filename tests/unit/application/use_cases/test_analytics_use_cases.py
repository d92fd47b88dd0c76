# tests/unit/application/use_cases/test_analytics_use_cases.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for the analytics use cases over an in-memory repository."""

from __future__ import annotations

import logging

import pytest

from prima_fpa.adapters.repositories.in_memory_fact_repository import InMemoryFactRepository
from prima_fpa.application.use_cases.analytics.evaluate_ratios import EvaluateRatios
from prima_fpa.application.use_cases.analytics.forecast_measure import ForecastMeasure
from prima_fpa.application.use_cases.analytics.get_dimension_rollup import GetDimensionRollup
from prima_fpa.application.use_cases.analytics.get_kpi_summary import GetKpiSummary
from prima_fpa.application.use_cases.analytics.get_variance_table import GetVarianceTable
from prima_fpa.application.use_cases.analytics.simulate_scenario import SimulateScenario
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.enums.fpa import Dimension, ForecastMethod, Scenario, ScenarioLever
from prima_fpa.domain.enums.measure import DisplayFormat, Measure
from prima_fpa.domain.exceptions.fpa import InvalidPeriodError


@pytest.mark.anyio
async def test_kpi_summary(repository: InMemoryFactRepository) -> None:
    dto = await GetKpiSummary(repository).execute()

    assert dto.fact_count == 8
    assert [k.name for k in dto.items] == [
        Measure.REVENUE,
        Measure.OPEX,
        Measure.GWP,
        Measure.CLAIMS,
    ]
    assert dto.items[2].display_format is DisplayFormat.CURRENCY


@pytest.mark.anyio
async def test_kpi_summary_with_filter(repository: InMemoryFactRepository) -> None:
    dto = await GetKpiSummary(repository).execute(FactFilter(markets=frozenset({"IT"})))

    assert dto.fact_count == 4
    assert [k.name for k in dto.items] == [Measure.REVENUE, Measure.OPEX]


@pytest.mark.anyio
async def test_kpi_summary_rejects_bad_period(repository: InMemoryFactRepository) -> None:
    with pytest.raises(InvalidPeriodError):
        await GetKpiSummary(repository).execute(FactFilter(period_from="2024-99"))


@pytest.mark.anyio
async def test_rollup_by_period_is_chronological(sample_facts: list[FactRecord]) -> None:
    repo = InMemoryFactRepository(reversed(sample_facts))

    dto = await GetDimensionRollup(repo).execute(Dimension.PERIOD)

    assert [b.key for b in dto.buckets] == ["2024-01", "2024-02", "2024-03"]
    assert dto.buckets[0].actual == 140.0


@pytest.mark.anyio
async def test_rollup_by_business_unit(repository: InMemoryFactRepository) -> None:
    dto = await GetDimensionRollup(repository).execute(Dimension.BUSINESS_UNIT)

    assert [(b.key, b.actual, b.budget) for b in dto.buckets] == [
        ("Motor", 140.0, 140.0),
        ("Home", 2800.0, 1000.0),
    ]


@pytest.mark.anyio
async def test_variance_table_limit(repository: InMemoryFactRepository) -> None:
    dto = await GetVarianceTable(repository).execute(Dimension.BUSINESS_UNIT, limit=2)

    assert dto.comparison is Scenario.BUDGET
    assert [r.entity for r in dto.rows] == ["Home - GWP", "Home - Claims"]


@pytest.mark.anyio
async def test_forecast_labels_following_periods(repository: InMemoryFactRepository) -> None:
    dto = await ForecastMeasure(repository).execute(
        Measure.GWP, ForecastMethod.MOVING_AVERAGE, 2
    )

    assert [(p.period, p.value) for p in dto.history] == [("2024-02", 1000.0), ("2024-03", 1200.0)]
    assert [(p.period, p.value) for p in dto.forecast] == [("2024-04", 1100.0), ("2024-05", 1100.0)]
    assert dto.horizon == 2


@pytest.mark.anyio
async def test_forecast_uses_default_horizon(repository: InMemoryFactRepository) -> None:
    dto = await ForecastMeasure(repository, default_horizon=4).execute(
        Measure.GWP, ForecastMethod.CAGR
    )

    assert dto.horizon == 4
    assert dto.forecast[-1].period == "2024-07"


@pytest.mark.anyio
async def test_forecast_caps_horizon(
    repository: InMemoryFactRepository, caplog: pytest.LogCaptureFixture
) -> None:
    uc = ForecastMeasure(repository, max_horizon=3)

    with caplog.at_level(logging.WARNING):
        dto = await uc.execute(Measure.GWP, ForecastMethod.YOY_GROWTH, 10)

    assert dto.horizon == 3
    assert any(r.getMessage() == "analytics.forecast.horizon_adjusted" for r in caplog.records)


@pytest.mark.anyio
async def test_forecast_negative_horizon_and_missing_measure(
    repository: InMemoryFactRepository,
) -> None:
    uc = ForecastMeasure(repository)

    negative = await uc.execute(Measure.GWP, ForecastMethod.MOVING_AVERAGE, -1)
    missing = await uc.execute(Measure.NEP, ForecastMethod.MOVING_AVERAGE, 3)

    assert negative.forecast == []
    assert len(negative.history) == 2
    assert missing.history == []
    assert missing.forecast == []


@pytest.mark.anyio
async def test_simulate_scenario(repository: InMemoryFactRepository) -> None:
    dto = await SimulateScenario(repository).execute({"priceChange": 10, "opexChange": -10})

    adjusted = {a.measure: a.adjusted_value for a in dto.adjustments}
    assert adjusted[Measure.REVENUE] == pytest.approx(110.0)
    assert adjusted[Measure.OPEX] == pytest.approx(36.0)
    assert adjusted[Measure.GWP] == 2200.0
    assert dto.changes == {ScenarioLever.PRICE_CHANGE: 10.0, ScenarioLever.OPEX_CHANGE: -10.0}


@pytest.mark.anyio
async def test_simulate_scenario_over_budget(repository: InMemoryFactRepository) -> None:
    dto = await SimulateScenario(repository).execute(
        {ScenarioLever.PRICE_CHANGE: 10.0}, Scenario.BUDGET
    )

    revenue = next(a for a in dto.adjustments if a.measure is Measure.REVENUE)
    assert revenue.base_value == 90.0
    assert revenue.delta == pytest.approx(9.0)


@pytest.mark.anyio
async def test_evaluate_ratios(repository: InMemoryFactRepository) -> None:
    dto = await EvaluateRatios(repository).execute()

    ratios = {r.code: r for r in dto.ratios}
    assert list(ratios) == [
        "combined_ratio",
        "loss_ratio",
        "expense_ratio",
        "gross_margin",
        "ebitda_margin",
    ]
    assert ratios["combined_ratio"].value == pytest.approx(640 / 2200 * 100)
    assert ratios["loss_ratio"].value == pytest.approx(600 / 2200 * 100)
    assert ratios["gross_margin"].value is None
    assert ratios["gross_margin"].failure_reason == "MISSING_INPUT"
    assert ratios["gross_margin"].details == {"input": "COGS"}


@pytest.mark.anyio
async def test_evaluate_ratios_subset_and_unknown(repository: InMemoryFactRepository) -> None:
    dto = await EvaluateRatios(repository).execute(
        codes=["loss_ratio", "bogus"], scenario=Scenario.BUDGET
    )

    loss, bogus = dto.ratios
    assert loss.value == 0.0
    assert bogus.category == "unknown"
    assert bogus.failure_reason == "INVALID_FORMULA"
