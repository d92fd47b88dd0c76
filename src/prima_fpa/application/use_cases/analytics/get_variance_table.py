# src/prima_fpa/application/use_cases/analytics/get_variance_table.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Variance Table

Purpose:
    Compare ACTUAL totals against BUDGET (or FORECAST) per dimension value
    and measure, ranked by the size of the absolute variance.

Layer: application/use_cases
"""

from __future__ import annotations

import logging

from prima_fpa.application.schemas.dto.fpa import VarianceRowDTO, VarianceTableDTO
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import Dimension, Scenario
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.aggregation_engine import build_variance_table
from prima_fpa.domain.services.variance_engine import FAVORABILITY_EPSILON
from prima_fpa.infrastructure.observability.metrics import observe_usecase

logger = logging.getLogger(__name__)


class GetVarianceTable:
    """Use case to build a ranked variance table.

    Args:
        repository: Fact repository.
        epsilon: Neutral band on the fractional variance.
    """

    def __init__(self, repository: FactRepository, *, epsilon: float = FAVORABILITY_EPSILON) -> None:
        self._repository = repository
        self._epsilon = epsilon

    async def execute(
        self,
        dimension: Dimension,
        comparison: Scenario = Scenario.BUDGET,
        flt: FactFilter | None = None,
        *,
        limit: int | None = None,
    ) -> VarianceTableDTO:
        """Return variance rows, largest absolute variance first.

        Args:
            dimension: Row grouping dimension.
            comparison: Scenario actuals are compared against.
            flt: Optional fact filter.
            limit: Optional maximum number of rows.
        """
        with observe_usecase("get_variance_table"):
            facts = await self._repository.list_facts(flt)
            rows = build_variance_table(facts, dimension, comparison, epsilon=self._epsilon)

        if limit is not None:
            rows = rows[:limit]
        logger.info(
            "analytics.variance.success",
            extra={
                "dimension": dimension.value,
                "comparison": comparison.value,
                "facts": len(facts),
                "rows": len(rows),
            },
        )
        return VarianceTableDTO(
            dimension=dimension,
            comparison=comparison,
            rows=[
                VarianceRowDTO(
                    entity=r.entity,
                    dimension_value=r.dimension_value,
                    measure=r.measure,
                    actual=r.actual,
                    comparison=r.comparison,
                    absolute_variance=r.absolute_variance,
                    percent_variance=r.percent_variance,
                    favorability=r.favorability,
                )
                for r in rows
            ],
        )
