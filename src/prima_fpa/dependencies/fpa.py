# src/prima_fpa/dependencies/fpa.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Dependency wiring for FP&A analytics (repository, parser, use cases).

Overview:
    FastAPI dependency providers that build use cases from the explicitly
    constructed fact repository and parser stored on ``app.state`` by
    :func:`prima_fpa.main.create_app`.

Layer:
    dependencies

Design:
    * No module-level singletons: every provider resolves shared objects from
      the running application, so each app (and each test) owns its store.
    * Tests override :func:`get_fact_repository` or :func:`get_app_settings`
      through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query, Request

from prima_fpa.adapters.presenters.fpa_presenter import FpaPresenter
from prima_fpa.application.interfaces.fact_file_parser_port import FactFileParserPort
from prima_fpa.application.use_cases.analytics.evaluate_ratios import EvaluateRatios
from prima_fpa.application.use_cases.analytics.forecast_measure import ForecastMeasure
from prima_fpa.application.use_cases.analytics.get_dimension_rollup import GetDimensionRollup
from prima_fpa.application.use_cases.analytics.get_kpi_summary import GetKpiSummary
from prima_fpa.application.use_cases.analytics.get_variance_table import GetVarianceTable
from prima_fpa.application.use_cases.analytics.simulate_scenario import SimulateScenario
from prima_fpa.application.use_cases.imports.import_fact_file import ImportFactFile
from prima_fpa.config.settings import Settings, get_settings
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.periods import parse_period


def get_app_settings(request: Request) -> Settings:
    """Return the settings bound to the app, falling back to the global cache."""
    settings: Settings | None = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_fact_repository(request: Request) -> FactRepository:
    """Return the fact repository created at application startup."""
    repository: FactRepository = request.app.state.fact_repository
    return repository


def get_fact_parser(request: Request) -> FactFileParserPort:
    """Return the fact file parser created at application startup."""
    parser: FactFileParserPort = request.app.state.fact_parser
    return parser


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
RepositoryDep = Annotated[FactRepository, Depends(get_fact_repository)]


def get_fact_filter(
    period_from: Annotated[
        str | None, Query(description="Inclusive lower period bound.", examples=["2024-01"])
    ] = None,
    period_to: Annotated[
        str | None, Query(description="Inclusive upper period bound.", examples=["2024-Q4"])
    ] = None,
    business_unit: Annotated[list[str] | None, Query()] = None,
    market: Annotated[list[str] | None, Query()] = None,
    product: Annotated[list[str] | None, Query()] = None,
    channel: Annotated[list[str] | None, Query()] = None,
    department: Annotated[list[str] | None, Query()] = None,
) -> FactFilter:
    """Build a :class:`FactFilter` from query parameters.

    Raises:
        InvalidPeriodError: A period bound is not ``YYYY-MM`` or ``YYYY-Qn``.
    """
    lower = parse_period(period_from).key if period_from else None
    upper = parse_period(period_to).key if period_to else None
    return FactFilter(
        period_from=lower,
        period_to=upper,
        business_units=frozenset(business_unit or ()),
        markets=frozenset(market or ()),
        products=frozenset(product or ()),
        channels=frozenset(channel or ()),
        departments=frozenset(department or ()),
    )


def get_presenter(settings: SettingsDep) -> FpaPresenter:
    return FpaPresenter(currency=settings.default_currency, epsilon=settings.favorability_epsilon)


def get_kpi_summary_uc(repository: RepositoryDep, settings: SettingsDep) -> GetKpiSummary:
    return GetKpiSummary(repository, epsilon=settings.favorability_epsilon)


def get_dimension_rollup_uc(repository: RepositoryDep) -> GetDimensionRollup:
    return GetDimensionRollup(repository)


def get_variance_table_uc(repository: RepositoryDep, settings: SettingsDep) -> GetVarianceTable:
    return GetVarianceTable(repository, epsilon=settings.favorability_epsilon)


def get_forecast_measure_uc(repository: RepositoryDep, settings: SettingsDep) -> ForecastMeasure:
    return ForecastMeasure(
        repository,
        default_horizon=settings.forecast_default_horizon,
        max_horizon=settings.forecast_max_horizon,
    )


def get_simulate_scenario_uc(repository: RepositoryDep) -> SimulateScenario:
    return SimulateScenario(repository)


def get_evaluate_ratios_uc(repository: RepositoryDep) -> EvaluateRatios:
    return EvaluateRatios(repository)


def get_import_fact_file_uc(
    repository: RepositoryDep,
    parser: Annotated[FactFileParserPort, Depends(get_fact_parser)],
    settings: SettingsDep,
) -> ImportFactFile:
    return ImportFactFile(repository, parser, max_bytes=settings.import_max_bytes)


__all__ = [
    "RepositoryDep",
    "SettingsDep",
    "get_app_settings",
    "get_dimension_rollup_uc",
    "get_evaluate_ratios_uc",
    "get_fact_filter",
    "get_fact_parser",
    "get_fact_repository",
    "get_forecast_measure_uc",
    "get_import_fact_file_uc",
    "get_kpi_summary_uc",
    "get_presenter",
    "get_simulate_scenario_uc",
    "get_variance_table_uc",
]
