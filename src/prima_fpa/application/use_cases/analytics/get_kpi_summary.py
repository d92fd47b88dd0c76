# src/prima_fpa/application/use_cases/analytics/get_kpi_summary.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Get KPI Summary

Purpose:
    Roll the filtered fact set up by measure and return one KPI record per
    measure (actual, budget, variance, trend, favorability) for dashboard
    cards.

Layer: application/use_cases
"""

from __future__ import annotations

import logging

from prima_fpa.application.schemas.dto.fpa import KpiDTO, KpiSummaryDTO
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.aggregation_engine import calculate_kpis
from prima_fpa.domain.services.variance_engine import FAVORABILITY_EPSILON
from prima_fpa.infrastructure.observability.metrics import observe_usecase

logger = logging.getLogger(__name__)


class GetKpiSummary:
    """Use case to compute KPI records for the filtered fact set.

    Args:
        repository: Fact repository.
        epsilon: Neutral band on the fractional variance.
    """

    def __init__(self, repository: FactRepository, *, epsilon: float = FAVORABILITY_EPSILON) -> None:
        self._repository = repository
        self._epsilon = epsilon

    async def execute(self, flt: FactFilter | None = None) -> KpiSummaryDTO:
        """Return KPI records in first-seen measure order.

        Raises:
            InvalidPeriodError: If a period bound on ``flt`` is malformed.
        """
        with observe_usecase("get_kpi_summary"):
            facts = await self._repository.list_facts(flt)
            kpis = calculate_kpis(facts, epsilon=self._epsilon)

        logger.info(
            "analytics.kpis.success",
            extra={"facts": len(facts), "measures": len(kpis)},
        )
        return KpiSummaryDTO(
            items=[
                KpiDTO(
                    name=k.name,
                    actual=k.actual,
                    budget=k.budget,
                    variance=k.variance,
                    percent_variance=k.percent_variance,
                    trend=k.trend,
                    favorability=k.favorability,
                    display_format=k.name.display_format,
                )
                for k in kpis
            ],
            fact_count=len(facts),
        )
