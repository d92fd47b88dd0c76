# src/prima_fpa/adapters/routers/analytics_router.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Analytics Router.

Summary:
    Read-side FP&A endpoints under ``/v1/analytics``: KPI cards, dimension
    rollups, variance tables, forecasts, ratios, and the what-if scenario
    simulator. Every endpoint accepts the shared fact filter query params
    (``period_from``, ``period_to`` and repeatable ``business_unit``,
    ``market``, ``product``, ``channel``, ``department``).

Layer:
    adapters/routers
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request, Response, status

from prima_fpa.adapters.presenters.fpa_presenter import FpaPresenter
from prima_fpa.adapters.routers.base_router import BaseRouter
from prima_fpa.adapters.schemas.http.envelopes import SuccessEnvelope
from prima_fpa.adapters.schemas.http.fpa_schemas import (
    DimensionRollupHTTP,
    ForecastHTTP,
    KpiSummaryHTTP,
    RatioEvaluationHTTP,
    ScenarioRequest,
    ScenarioSimulationHTTP,
    VarianceTableHTTP,
)
from prima_fpa.application.use_cases.analytics.evaluate_ratios import EvaluateRatios
from prima_fpa.application.use_cases.analytics.forecast_measure import ForecastMeasure
from prima_fpa.application.use_cases.analytics.get_dimension_rollup import GetDimensionRollup
from prima_fpa.application.use_cases.analytics.get_kpi_summary import GetKpiSummary
from prima_fpa.application.use_cases.analytics.get_variance_table import GetVarianceTable
from prima_fpa.application.use_cases.analytics.simulate_scenario import SimulateScenario
from prima_fpa.dependencies.fpa import (
    get_dimension_rollup_uc,
    get_evaluate_ratios_uc,
    get_fact_filter,
    get_forecast_measure_uc,
    get_kpi_summary_uc,
    get_presenter,
    get_simulate_scenario_uc,
    get_variance_table_uc,
)
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import Dimension, ForecastMethod, Scenario
from prima_fpa.domain.enums.measure import Measure

router = BaseRouter(version="v1", resource="analytics", tags=["Analytics"])

FilterDep = Annotated[FactFilter, Depends(get_fact_filter)]
PresenterDep = Annotated[FpaPresenter, Depends(get_presenter)]


@router.get(
    "/kpis",
    response_model=SuccessEnvelope[KpiSummaryHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="KPI cards (actual vs budget per measure)",
)
async def get_kpis(
    request: Request,
    response: Response,
    flt: FilterDep,
    uc: Annotated[GetKpiSummary, Depends(get_kpi_summary_uc)],
    presenter: PresenterDep,
) -> SuccessEnvelope[KpiSummaryHTTP]:
    dto = await uc.execute(flt)
    return BaseRouter.send(response, presenter.present_kpis(dto, trace_id=BaseRouter.trace_id(request)))


@router.get(
    "/rollup",
    response_model=SuccessEnvelope[DimensionRollupHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Scenario totals per dimension value",
)
async def get_rollup(
    request: Request,
    response: Response,
    flt: FilterDep,
    uc: Annotated[GetDimensionRollup, Depends(get_dimension_rollup_uc)],
    presenter: PresenterDep,
    dimension: Annotated[Dimension, Query(description="Grouping dimension.")] = Dimension.BUSINESS_UNIT,
) -> SuccessEnvelope[DimensionRollupHTTP]:
    dto = await uc.execute(dimension, flt)
    return BaseRouter.send(response, presenter.present_rollup(dto, trace_id=BaseRouter.trace_id(request)))


@router.get(
    "/variance",
    response_model=SuccessEnvelope[VarianceTableHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Variance table ranked by absolute variance",
)
async def get_variance(
    request: Request,
    response: Response,
    flt: FilterDep,
    uc: Annotated[GetVarianceTable, Depends(get_variance_table_uc)],
    presenter: PresenterDep,
    dimension: Annotated[Dimension, Query(description="Row grouping dimension.")] = Dimension.BUSINESS_UNIT,
    comparison: Annotated[
        Scenario, Query(description="Scenario actuals are compared against.")
    ] = Scenario.BUDGET,
    limit: Annotated[int | None, Query(ge=1, le=1000, description="Maximum rows returned.")] = None,
) -> SuccessEnvelope[VarianceTableHTTP]:
    dto = await uc.execute(dimension, comparison, flt, limit=limit)
    return BaseRouter.send(response, presenter.present_variance(dto, trace_id=BaseRouter.trace_id(request)))


@router.get(
    "/forecast",
    response_model=SuccessEnvelope[ForecastHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Project a measure forward",
)
async def get_forecast(
    request: Request,
    response: Response,
    flt: FilterDep,
    uc: Annotated[ForecastMeasure, Depends(get_forecast_measure_uc)],
    presenter: PresenterDep,
    measure: Annotated[Measure, Query(description="Measure to project.", examples=["GWP"])],
    method: Annotated[ForecastMethod, Query(description="Extrapolation method.")] = ForecastMethod.MOVING_AVERAGE,
    horizon: Annotated[
        int | None, Query(ge=0, description="Periods to project (capped by FORECAST_MAX_HORIZON).")
    ] = None,
    scenario: Annotated[Scenario, Query(description="Scenario providing the history.")] = Scenario.ACTUAL,
) -> SuccessEnvelope[ForecastHTTP]:
    dto = await uc.execute(measure, method, horizon, flt, scenario=scenario)
    return BaseRouter.send(response, presenter.present_forecast(dto, trace_id=BaseRouter.trace_id(request)))


@router.post(
    "/scenario",
    response_model=SuccessEnvelope[ScenarioSimulationHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="What-if simulation over measure totals",
)
async def post_scenario(
    request: Request,
    response: Response,
    payload: ScenarioRequest,
    flt: FilterDep,
    uc: Annotated[SimulateScenario, Depends(get_simulate_scenario_uc)],
    presenter: PresenterDep,
) -> SuccessEnvelope[ScenarioSimulationHTTP]:
    dto = await uc.execute(payload.changes, payload.scenario, flt)
    return BaseRouter.send(response, presenter.present_scenario(dto, trace_id=BaseRouter.trace_id(request)))


@router.get(
    "/ratios",
    response_model=SuccessEnvelope[RatioEvaluationHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Evaluate financial ratios",
)
async def get_ratios(
    request: Request,
    response: Response,
    flt: FilterDep,
    uc: Annotated[EvaluateRatios, Depends(get_evaluate_ratios_uc)],
    presenter: PresenterDep,
    code: Annotated[
        list[str] | None, Query(description="Ratio codes to evaluate (default: all).")
    ] = None,
    scenario: Annotated[Scenario, Query(description="Scenario providing the inputs.")] = Scenario.ACTUAL,
) -> SuccessEnvelope[RatioEvaluationHTTP]:
    dto = await uc.execute(flt, code, scenario=scenario)
    return BaseRouter.send(response, presenter.present_ratios(dto, trace_id=BaseRouter.trace_id(request)))
