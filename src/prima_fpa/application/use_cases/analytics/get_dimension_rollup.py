# src/prima_fpa/application/use_cases/analytics/get_dimension_rollup.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Get Dimension Rollup

Purpose:
    Sum the filtered fact set per value of one dimension (business unit,
    market, product, channel, department or period) and per scenario.

Layer: application/use_cases

Notes:
    Period rollups are returned chronologically; other dimensions keep the
    first-seen order of their values.
"""

from __future__ import annotations

import logging

from prima_fpa.application.schemas.dto.fpa import DimensionRollupDTO, RollupBucketDTO
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import Dimension
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.aggregation_engine import aggregate_by_dimension
from prima_fpa.domain.services.periods import sort_periods
from prima_fpa.infrastructure.observability.metrics import observe_usecase

logger = logging.getLogger(__name__)


class GetDimensionRollup:
    """Use case to aggregate facts by one dimension.

    Args:
        repository: Fact repository.
    """

    def __init__(self, repository: FactRepository) -> None:
        self._repository = repository

    async def execute(
        self,
        dimension: Dimension,
        flt: FactFilter | None = None,
    ) -> DimensionRollupDTO:
        """Return scenario totals per dimension value."""
        with observe_usecase("get_dimension_rollup"):
            facts = await self._repository.list_facts(flt)
            buckets = aggregate_by_dimension(facts, dimension)

        keys = sort_periods(buckets) if dimension is Dimension.PERIOD else list(buckets)
        logger.info(
            "analytics.rollup.success",
            extra={"dimension": dimension.value, "facts": len(facts), "buckets": len(keys)},
        )
        return DimensionRollupDTO(
            dimension=dimension,
            buckets=[
                RollupBucketDTO(
                    key=key,
                    actual=buckets[key].actual,
                    budget=buckets[key].budget,
                    forecast=buckets[key].forecast,
                )
                for key in keys
            ],
        )
