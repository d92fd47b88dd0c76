# src/prima_fpa/application/use_cases/analytics/simulate_scenario.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Simulate Scenario

Purpose:
    Apply what-if percentage levers (price, volume, conversion, retention,
    opex, loss ratio) to the measure totals of one scenario and report the
    base value, adjusted value and delta per measure.

Layer: application/use_cases
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from prima_fpa.application.schemas.dto.fpa import ScenarioAdjustmentDTO, ScenarioSimulationDTO
from prima_fpa.domain.entities.fact_filter import FactFilter
from prima_fpa.domain.enums.fpa import Scenario, ScenarioLever
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.domain.services.aggregation_engine import totals_by_measure
from prima_fpa.domain.services.scenario_engine import normalize_changes, simulate_scenario
from prima_fpa.infrastructure.observability.metrics import observe_usecase

logger = logging.getLogger(__name__)


class SimulateScenario:
    """Use case to run a what-if simulation.

    Args:
        repository: Fact repository.
    """

    def __init__(self, repository: FactRepository) -> None:
        self._repository = repository

    async def execute(
        self,
        changes: Mapping[ScenarioLever, float] | Mapping[str, float],
        scenario: Scenario = Scenario.ACTUAL,
        flt: FactFilter | None = None,
    ) -> ScenarioSimulationDTO:
        """Return per-measure adjustments for ``changes``.

        Args:
            changes: Lever -> percentage change (10 means +10%).
            scenario: Scenario whose totals are the simulation base.
            flt: Optional fact filter.
        """
        levers = normalize_changes(changes)
        with observe_usecase("simulate_scenario"):
            facts = await self._repository.list_facts(flt)
            base = {measure: totals.for_scenario(scenario) for measure, totals in totals_by_measure(facts).items()}
            adjustments = simulate_scenario(base, levers)

        logger.info(
            "analytics.scenario.success",
            extra={
                "scenario": scenario.value,
                "levers": {lever.value: pct for lever, pct in levers.items()},
                "measures": len(adjustments),
            },
        )
        return ScenarioSimulationDTO(
            scenario=scenario,
            changes=levers,
            adjustments=[
                ScenarioAdjustmentDTO(
                    measure=a.measure,
                    base_value=a.base_value,
                    adjusted_value=a.adjusted_value,
                    delta=a.delta,
                )
                for a in adjustments
            ],
        )
