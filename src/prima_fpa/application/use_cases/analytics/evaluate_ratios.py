# src/prima_fpa/application/use_cases/analytics/evaluate_ratios.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Evaluate Ratios

Purpose:
    Evaluate the financial ratio catalog (combined, loss and expense ratios,
    margins) over the measure totals of one scenario. Ratios that cannot be
    computed are returned with a failure reason rather than dropped.

Layer: application/use_cases
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from prima_fpa.application.schemas.dto.fpa import RatioEvaluationDTO, RatioValueDTO
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import Scenario
from prima_fpa.domain.enums.measure import DisplayFormat
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.aggregation_engine import totals_by_measure
from prima_fpa.domain.services.ratio_engine import (
    DEFAULT_RATIOS,
    RatioDefinition,
    evaluate_ratios,
    measure_inputs,
    ratio_catalog,
)
from prima_fpa.infrastructure.observability.metrics import observe_usecase

logger = logging.getLogger(__name__)


class EvaluateRatios:
    """Use case to evaluate financial ratios.

    Args:
        repository: Fact repository.
        definitions: Ratio catalog. Defaults to the built-in catalog.
    """

    def __init__(
        self,
        repository: FactRepository,
        definitions: Sequence[RatioDefinition] = DEFAULT_RATIOS,
    ) -> None:
        self._repository = repository
        self._catalog = ratio_catalog(definitions)

    async def execute(
        self,
        flt: FactFilter | None = None,
        codes: Iterable[str] | None = None,
        *,
        scenario: Scenario = Scenario.ACTUAL,
    ) -> RatioEvaluationDTO:
        """Return evaluated ratios in catalog (or requested) order."""
        wanted = list(self._catalog) if codes is None else list(dict.fromkeys(codes))
        with observe_usecase("evaluate_ratios"):
            facts = await self._repository.list_facts(flt)
            inputs = measure_inputs(
                {m: totals.for_scenario(scenario) for m, totals in totals_by_measure(facts).items()}
            )
            result = evaluate_ratios(inputs, self._catalog.values(), wanted)

        failures = {f.code: f for f in result.failures}
        ratios: list[RatioValueDTO] = []
        for code in wanted:
            definition = self._catalog.get(code)
            failure = failures.get(code)
            ratios.append(
                RatioValueDTO(
                    code=code,
                    name=definition.name if definition else code,
                    category=definition.category.value if definition else "unknown",
                    formula=definition.formula if definition else "",
                    display_format=definition.display_format if definition else DisplayFormat.NUMBER,
                    value=result.values.get(code),
                    failure_reason=failure.reason.value if failure else None,
                    details=dict(failure.details) if failure else None,
                )
            )

        logger.info(
            "analytics.ratios.success",
            extra={
                "scenario": scenario.value,
                "evaluated": len(result.values),
                "failed": len(result.failures),
            },
        )
        return RatioEvaluationDTO(scenario=scenario, ratios=ratios)
