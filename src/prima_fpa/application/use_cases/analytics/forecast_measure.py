# src/prima_fpa/application/use_cases/analytics/forecast_measure.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Forecast Measure

Purpose:
    Build the chronological history of one measure from the filtered fact
    set and project it forward with the requested method. Projected values
    are labelled with the periods that follow the last historical period.

Layer: application/use_cases

Notes:
    - Horizons above ``max_horizon`` are capped; negative horizons yield an
      empty projection.
    - Non-finite projected values (zero or negative bases) are passed
      through unchanged.
"""

from __future__ import annotations

import logging

from prima_fpa.application.schemas.dto.fpa import ForecastDTO, SeriesPointDTO
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import ForecastMethod, Scenario
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.aggregation_engine import build_measure_series
from prima_fpa.domain.services.forecast_engine import DEFAULT_HORIZON, generate_forecast
from prima_fpa.domain.services.periods import next_periods
from prima_fpa.infrastructure.observability.metrics import observe_usecase

logger = logging.getLogger(__name__)


class ForecastMeasure:
    """Use case to forecast one measure.

    Args:
        repository: Fact repository.
        default_horizon: Horizon used when the caller passes none.
        max_horizon: Upper bound on the horizon.
    """

    def __init__(
        self,
        repository: FactRepository,
        *,
        default_horizon: int = DEFAULT_HORIZON,
        max_horizon: int = 60,
    ) -> None:
        self._repository = repository
        self._default_horizon = default_horizon
        self._max_horizon = max_horizon

    async def execute(
        self,
        measure: Measure,
        method: ForecastMethod,
        horizon: int | None = None,
        flt: FactFilter | None = None,
        *,
        scenario: Scenario = Scenario.ACTUAL,
    ) -> ForecastDTO:
        """Return the history and projection of ``measure``."""
        requested = self._default_horizon if horizon is None else horizon
        effective = max(0, min(requested, self._max_horizon))
        if effective != requested:
            logger.warning(
                "analytics.forecast.horizon_adjusted",
                extra={"requested": requested, "effective": effective},
            )

        with observe_usecase("forecast_measure"):
            facts = await self._repository.list_facts(flt)
            periods, values = build_measure_series(facts, measure, scenario)
            projected = generate_forecast(values, method, effective)

        labels = next_periods(periods[-1], len(projected)) if periods else []
        logger.info(
            "analytics.forecast.success",
            extra={
                "measure": measure.value,
                "method": method.value,
                "history_points": len(values),
                "horizon": len(projected),
            },
        )
        return ForecastDTO(
            measure=measure,
            scenario=scenario,
            method=method,
            horizon=len(projected),
            history=[SeriesPointDTO(period=p, value=v) for p, v in zip(periods, values, strict=True)],
            forecast=[SeriesPointDTO(period=p, value=v) for p, v in zip(labels, projected, strict=True)],
        )
