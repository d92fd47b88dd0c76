# src/prima_fpa/tasks/cli.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Prima FP&A CLI: run the analytics engine over a local fact file.

Commands:
    kpis FILE        KPI cards (actual vs budget per measure).
    rollup FILE      Scenario totals per dimension value.
    variance FILE    Variance table ranked by absolute variance.
    forecast FILE    Project one measure forward.
    scenario FILE    What-if simulation (``--change priceChange=5``).
    ratios FILE      Insurance and profitability ratios.

FILE is a CSV or XLSX in the ledger, GWP or cost layout.

Environment:
    DEFAULT_CURRENCY, FAVORABILITY_EPSILON, FORECAST_DEFAULT_HORIZON and
    FORECAST_MAX_HORIZON are read through the application settings.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any

import typer

from prima_fpa.adapters.mappers.fact_file_parser import PandasFactFileParser
from prima_fpa.adapters.presenters.fpa_presenter import FpaPresenter
from prima_fpa.adapters.repositories.in_memory_fact_repository import InMemoryFactRepository
from prima_fpa.application.use_cases.analytics.evaluate_ratios import EvaluateRatios
from prima_fpa.application.use_cases.analytics.forecast_measure import ForecastMeasure
from prima_fpa.application.use_cases.analytics.get_dimension_rollup import GetDimensionRollup
from prima_fpa.application.use_cases.analytics.get_kpi_summary import GetKpiSummary
from prima_fpa.application.use_cases.analytics.get_variance_table import GetVarianceTable
from prima_fpa.application.use_cases.analytics.simulate_scenario import SimulateScenario
from prima_fpa.config.settings import Settings, get_settings
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import Dimension, ForecastMethod, Scenario, ScenarioLever
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.exceptions.base import DomainError
from prima_fpa.domain.services.periods import parse_period
from prima_fpa.domain.services.scenario_engine import normalize_changes
from prima_fpa.infrastructure.logging.logger import configure_root_logging, get_json_logger

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)

FILE_ARGUMENT = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="CSV or XLSX fact file.")


def _run[T](coro: Coroutine[Any, Any, T]) -> T:
    try:
        return asyncio.run(coro)
    except DomainError as exc:
        log.error("cli.domain_error", extra={"code": exc.code, "details": exc.details})
        typer.echo(f"error: {exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc


def _load(path: Path) -> InMemoryFactRepository:
    try:
        parsed = PandasFactFileParser().parse_path(path)
    except DomainError as exc:
        typer.echo(f"error: {exc.code}: {exc.message}", err=True)
        raise typer.Exit(code=1) from exc
    log.info(
        "cli.facts_loaded",
        extra={"path": str(path), "layout": parsed.layout.value, "facts": len(parsed.facts)},
    )
    return InMemoryFactRepository(parsed.facts)


def _filter(period_from: str | None, period_to: str | None, markets: list[str] | None) -> FactFilter:
    try:
        lower = parse_period(period_from).key if period_from else None
        upper = parse_period(period_to).key if period_to else None
    except DomainError as exc:
        raise typer.BadParameter(exc.message) from exc
    return FactFilter(period_from=lower, period_to=upper, markets=frozenset(markets or ()))


def _settings() -> Settings:
    try:
        return get_settings()
    except RuntimeError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=2) from exc


def _presenter(settings: Settings, currency: str | None) -> FpaPresenter:
    return FpaPresenter(
        currency=(currency or settings.default_currency).upper(),
        epsilon=settings.favorability_epsilon,
    )


def parse_change(raw: str) -> tuple[ScenarioLever, float]:
    """Parse ``lever=percent`` (e.g. ``priceChange=5``) into a lever and value.

    Raises:
        typer.BadParameter: Malformed pair, unknown lever or non-numeric value.
    """
    name, sep, value = raw.partition("=")
    if not sep:
        raise typer.BadParameter(f"expected LEVER=PERCENT, got {raw!r}")
    try:
        pct = float(value)
    except ValueError as exc:
        raise typer.BadParameter(f"percentage for {name!r} is not a number: {value!r}") from exc
    levers = normalize_changes({name.strip(): pct})
    if not levers:
        known = ", ".join(lever.value for lever in ScenarioLever)
        raise typer.BadParameter(f"unknown lever {name!r}; expected one of: {known}")
    return next(iter(levers.items()))


PERIOD_FROM = typer.Option(None, "--period-from", help="Inclusive lower period bound (YYYY-MM or YYYY-Qn).")
PERIOD_TO = typer.Option(None, "--period-to", help="Inclusive upper period bound.")
MARKET = typer.Option(None, "--market", help="Restrict to a market (repeatable).")
CURRENCY = typer.Option(None, "--currency", help="ISO currency code for display (default: DEFAULT_CURRENCY).")


@app.command("kpis")
def kpis(
    file: Path = FILE_ARGUMENT,  # noqa: B008
    period_from: str | None = PERIOD_FROM,  # noqa: B008
    period_to: str | None = PERIOD_TO,  # noqa: B008
    market: list[str] | None = MARKET,  # noqa: B008
    currency: str | None = CURRENCY,  # noqa: B008
) -> None:
    """Print one KPI card per measure."""
    settings = _settings()
    presenter = _presenter(settings, currency)
    uc = GetKpiSummary(_load(file), epsilon=settings.favorability_epsilon)
    summary = presenter.to_kpi_summary(_run(uc.execute(_filter(period_from, period_to, market))))

    typer.echo(f"{summary.fact_count} facts")
    for card in summary.items:
        typer.echo(
            f"{card.name:<12} actual {card.actual_display:>16}  budget {card.budget_display:>16}  "
            f"var {card.variance_display:>16} ({card.percent_variance_display}) {card.icon} {card.favorability}"
        )


@app.command("rollup")
def rollup(
    file: Path = FILE_ARGUMENT,  # noqa: B008
    dimension: Dimension = typer.Option(Dimension.BUSINESS_UNIT, "--dimension", help="Grouping dimension."),  # noqa: B008
    period_from: str | None = PERIOD_FROM,  # noqa: B008
    period_to: str | None = PERIOD_TO,  # noqa: B008
    market: list[str] | None = MARKET,  # noqa: B008
) -> None:
    """Print ACTUAL / BUDGET / FORECAST totals per dimension value."""
    presenter = _presenter(_settings(), None)
    uc = GetDimensionRollup(_load(file))
    result = presenter.to_rollup(_run(uc.execute(dimension, _filter(period_from, period_to, market))))

    typer.echo(f"{'key':<20} {'actual':>16} {'budget':>16} {'forecast':>16}")
    for bucket in result.buckets:
        typer.echo(f"{bucket.key:<20} {bucket.actual:>16,.0f} {bucket.budget:>16,.0f} {bucket.forecast:>16,.0f}")


@app.command("variance")
def variance(
    file: Path = FILE_ARGUMENT,  # noqa: B008
    dimension: Dimension = typer.Option(Dimension.BUSINESS_UNIT, "--dimension", help="Row grouping dimension."),  # noqa: B008
    comparison: Scenario = typer.Option(Scenario.BUDGET, "--comparison", help="Scenario to compare against."),  # noqa: B008
    limit: int | None = typer.Option(None, "--limit", min=1, help="Maximum rows."),  # noqa: B008
    period_from: str | None = PERIOD_FROM,  # noqa: B008
    period_to: str | None = PERIOD_TO,  # noqa: B008
    currency: str | None = CURRENCY,  # noqa: B008
) -> None:
    """Print the variance table, largest absolute variance first."""
    settings = _settings()
    presenter = _presenter(settings, currency)
    uc = GetVarianceTable(_load(file), epsilon=settings.favorability_epsilon)
    table = presenter.to_variance_table(
        _run(uc.execute(dimension, comparison, _filter(period_from, period_to, None), limit=limit))
    )

    for row in table.rows:
        typer.echo(
            f"{row.entity:<32} {row.actual_display:>16} vs {row.comparison_display:>16}  "
            f"{row.variance_display:>16} ({row.percent_variance_display}) {row.icon} {row.favorability}"
        )


@app.command("forecast")
def forecast(
    file: Path = FILE_ARGUMENT,  # noqa: B008
    measure: Measure = typer.Option(..., "--measure", help="Measure to project."),  # noqa: B008
    method: ForecastMethod = typer.Option(ForecastMethod.MOVING_AVERAGE, "--method", help="Extrapolation method."),  # noqa: B008
    horizon: int | None = typer.Option(None, "--horizon", min=0, help="Periods to project."),  # noqa: B008
    scenario: Scenario = typer.Option(Scenario.ACTUAL, "--scenario", help="Scenario providing history."),  # noqa: B008
    market: list[str] | None = MARKET,  # noqa: B008
    currency: str | None = CURRENCY,  # noqa: B008
) -> None:
    """Print the history and projection of one measure."""
    settings = _settings()
    presenter = _presenter(settings, currency)
    uc = ForecastMeasure(
        _load(file),
        default_horizon=settings.forecast_default_horizon,
        max_horizon=settings.forecast_max_horizon,
    )
    result = presenter.to_forecast(
        _run(uc.execute(measure, method, horizon, _filter(None, None, market), scenario=scenario))
    )

    for point in result.history:
        typer.echo(f"{point.period:<8} {point.display:>16}")
    typer.echo(f"-- {result.method} forecast ({result.horizon} periods)")
    for point in result.forecast:
        typer.echo(f"{point.period:<8} {point.display:>16}")


@app.command("scenario")
def scenario(
    file: Path = FILE_ARGUMENT,  # noqa: B008
    change: list[str] = typer.Option([], "--change", help="LEVER=PERCENT, e.g. priceChange=5 (repeatable)."),  # noqa: B008
    base: Scenario = typer.Option(Scenario.ACTUAL, "--base", help="Scenario whose totals are adjusted."),  # noqa: B008
    currency: str | None = CURRENCY,  # noqa: B008
) -> None:
    """Print base and adjusted totals per measure for the given levers."""
    changes = dict(parse_change(raw) for raw in change)
    presenter = _presenter(_settings(), currency)
    uc = SimulateScenario(_load(file))
    result = presenter.to_scenario(_run(uc.execute(changes, base)))

    for adj in result.adjustments:
        typer.echo(
            f"{adj.measure:<12} {adj.base_display:>16} -> {adj.adjusted_display:>16}  ({adj.delta_display})"
        )


@app.command("ratios")
def ratios(
    file: Path = FILE_ARGUMENT,  # noqa: B008
    code: list[str] | None = typer.Option(None, "--code", help="Ratio code (repeatable; default all)."),  # noqa: B008
    base: Scenario = typer.Option(Scenario.ACTUAL, "--base", help="Scenario providing inputs."),  # noqa: B008
) -> None:
    """Print combined, loss and expense ratios plus margins."""
    presenter = _presenter(_settings(), None)
    uc = EvaluateRatios(_load(file))
    result = presenter.to_ratios(_run(uc.execute(None, code or None, scenario=base)))

    for ratio in result.ratios:
        shown = ratio.display if ratio.display is not None else f"n/a ({ratio.failure_reason})"
        typer.echo(f"{ratio.name:<20} {shown:>12}  {ratio.formula}")


if __name__ == "__main__":
    app()
