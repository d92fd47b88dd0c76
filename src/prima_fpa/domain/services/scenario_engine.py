# src/prima_fpa/domain/services/scenario_engine.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""What-if scenario adjustments.

Purpose:
    Apply named percentage levers (price, volume, conversion, retention,
    opex, loss ratio) to measure totals. Each measure has a fixed set of
    applicable levers; every applicable lever multiplies the base value by
    ``(1 + pct / 100)``.

Layer:
    domain

Notes:
    - Pure functions, no logging.
    - The measure -> levers table is total over :class:`Measure`; measures
      with no applicable lever map to an empty tuple and pass through
      unchanged. Coverage is checked at import time.
"""

from __future__ import annotations

from collections.abc import Mapping

from prima_fpa.domain.entities.analytics import ScenarioAdjustment
from prima_fpa.domain.enums.fpa import ScenarioLever
from prima_fpa.domain.enums.measure import Measure

type LeverChanges = Mapping[ScenarioLever, float] | Mapping[str, float]

MEASURE_LEVERS: dict[Measure, tuple[ScenarioLever, ...]] = {
    Measure.REVENUE: (ScenarioLever.PRICE_CHANGE, ScenarioLever.VOLUME_CHANGE),
    Measure.COGS: (),
    Measure.GM: (),
    Measure.OPEX: (ScenarioLever.OPEX_CHANGE,),
    Measure.EBITDA: (),
    Measure.GWP: (),
    Measure.LR: (ScenarioLever.LOSS_RATIO_CHANGE,),
    Measure.CONTRACTS: (),
    Measure.CONVERSION: (ScenarioLever.CONVERSION_CHANGE,),
    Measure.RETENTION: (ScenarioLever.RETENTION_CHANGE,),
    Measure.NEP: (),
    Measure.CLAIMS: (),
    Measure.ER: (),
    Measure.CR: (),
}

if set(MEASURE_LEVERS) != set(Measure):
    raise RuntimeError("scenario lever table must cover every Measure member")


def levers_for(measure: Measure) -> tuple[ScenarioLever, ...]:
    """Return the levers that adjust ``measure`` (possibly empty)."""
    return MEASURE_LEVERS[measure]


def normalize_changes(changes: LeverChanges) -> dict[ScenarioLever, float]:
    """Key a change mapping by :class:`ScenarioLever`.

    String keys are matched against lever values (``"priceChange"``) or
    member names (``"PRICE_CHANGE"``). Unrecognised keys are dropped.
    """
    normalized: dict[ScenarioLever, float] = {}
    for key, pct in changes.items():
        lever = key if isinstance(key, ScenarioLever) else _lever_from_text(key)
        if lever is not None:
            normalized[lever] = float(pct)
    return normalized


def _lever_from_text(raw: str) -> ScenarioLever | None:
    try:
        return ScenarioLever(raw)
    except ValueError:
        return ScenarioLever.__members__.get(raw.strip().upper())


def apply_scenario_changes(
    base_value: float,
    measure: Measure | str,
    changes: LeverChanges,
) -> float:
    """Return ``base_value`` adjusted by the levers applicable to ``measure``.

    Args:
        base_value: Unadjusted measure total.
        measure: Measure member or measure name. Unknown names are identity.
        changes: Lever -> percentage change. Missing levers count as 0%.

    Revenue with +10% price and +10% volume is ``base * 1.1 * 1.1``.
    """
    resolved = measure if isinstance(measure, Measure) else Measure.parse(measure)
    if resolved is None:
        return base_value
    pcts = normalize_changes(changes)
    adjusted = base_value
    for lever in MEASURE_LEVERS[resolved]:
        adjusted *= 1 + pcts.get(lever, 0.0) / 100
    return adjusted


def simulate_scenario(
    base_totals: Mapping[Measure, float],
    changes: LeverChanges,
) -> list[ScenarioAdjustment]:
    """Apply ``changes`` to every measure total.

    Args:
        base_totals: Measure -> base total, in the order results are wanted.
        changes: Lever -> percentage change.

    Returns:
        One :class:`ScenarioAdjustment` per measure, including measures no
        lever touches (their delta is zero).
    """
    pcts = normalize_changes(changes)
    return [
        ScenarioAdjustment(
            measure=measure,
            base_value=base,
            adjusted_value=apply_scenario_changes(base, measure, pcts),
        )
        for measure, base in base_totals.items()
    ]


__all__ = [
    "MEASURE_LEVERS",
    "LeverChanges",
    "apply_scenario_changes",
    "levers_for",
    "normalize_changes",
    "simulate_scenario",
]
