# src/prima_fpa/domain/enums/measure.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Financial measure enumeration.

Purpose:
    Define the fixed set of financial measures carried by fact records, and
    the total mappings that classify each measure's polarity (revenue-like or
    cost-like) and its preferred display format.

Layer:
    domain

Notes:
    - Values are the measure codes used by the ledger ("Revenue", "LR", ...).
    - The polarity and display tables are exhaustive over :class:`Measure`;
      adding a member without extending them fails at import time.
"""

from __future__ import annotations

from enum import Enum


class MeasureKind(str, Enum):
    """Polarity of a measure for favorability purposes."""

    REVENUE_LIKE = "REVENUE_LIKE"
    COST_LIKE = "COST_LIKE"


class DisplayFormat(str, Enum):
    """How a measure (or ratio) is rendered for humans."""

    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    NUMBER = "number"
    RATIO = "ratio"


class Measure(str, Enum):
    """Financial measures tracked in the fact ledger."""

    REVENUE = "Revenue"
    COGS = "COGS"
    GM = "GM"
    OPEX = "Opex"
    EBITDA = "EBITDA"
    GWP = "GWP"
    LR = "LR"
    CONTRACTS = "Contracts"
    CONVERSION = "Conversion"
    RETENTION = "Retention"
    NEP = "NEP"
    CLAIMS = "Claims"
    ER = "ER"
    CR = "CR"

    @property
    def kind(self) -> MeasureKind:
        """Return the polarity of this measure."""
        return _MEASURE_KINDS[self]

    @property
    def is_revenue_type(self) -> bool:
        """Return True when growth in this measure is favorable."""
        return _MEASURE_KINDS[self] is MeasureKind.REVENUE_LIKE

    @property
    def display_format(self) -> DisplayFormat:
        """Return the default display format for this measure."""
        return _MEASURE_DISPLAY[self]

    @classmethod
    def parse(cls, raw: str) -> Measure | None:
        """Resolve a measure from its code, member name, or a common alias.

        Args:
            raw: Measure token as found in files or query strings.

        Returns:
            The matching measure, or ``None`` when nothing matches.
        """
        token = raw.strip()
        if not token:
            return None
        try:
            return cls(token)
        except ValueError:
            pass
        folded = token.lower().replace(" ", "_")
        for member in cls:
            if member.value.lower() == folded or member.name.lower() == folded:
                return member
        return _MEASURE_ALIASES.get(folded)


_MEASURE_KINDS: dict[Measure, MeasureKind] = {
    Measure.REVENUE: MeasureKind.REVENUE_LIKE,
    Measure.COGS: MeasureKind.COST_LIKE,
    Measure.GM: MeasureKind.REVENUE_LIKE,
    Measure.OPEX: MeasureKind.COST_LIKE,
    Measure.EBITDA: MeasureKind.REVENUE_LIKE,
    Measure.GWP: MeasureKind.REVENUE_LIKE,
    Measure.LR: MeasureKind.COST_LIKE,
    Measure.CONTRACTS: MeasureKind.REVENUE_LIKE,
    Measure.CONVERSION: MeasureKind.REVENUE_LIKE,
    Measure.RETENTION: MeasureKind.REVENUE_LIKE,
    Measure.NEP: MeasureKind.REVENUE_LIKE,
    Measure.CLAIMS: MeasureKind.COST_LIKE,
    Measure.ER: MeasureKind.COST_LIKE,
    Measure.CR: MeasureKind.COST_LIKE,
}

_MEASURE_DISPLAY: dict[Measure, DisplayFormat] = {
    Measure.REVENUE: DisplayFormat.CURRENCY,
    Measure.COGS: DisplayFormat.CURRENCY,
    Measure.GM: DisplayFormat.CURRENCY,
    Measure.OPEX: DisplayFormat.CURRENCY,
    Measure.EBITDA: DisplayFormat.CURRENCY,
    Measure.GWP: DisplayFormat.CURRENCY,
    Measure.LR: DisplayFormat.PERCENTAGE,
    Measure.CONTRACTS: DisplayFormat.NUMBER,
    Measure.CONVERSION: DisplayFormat.PERCENTAGE,
    Measure.RETENTION: DisplayFormat.PERCENTAGE,
    Measure.NEP: DisplayFormat.CURRENCY,
    Measure.CLAIMS: DisplayFormat.CURRENCY,
    Measure.ER: DisplayFormat.PERCENTAGE,
    Measure.CR: DisplayFormat.PERCENTAGE,
}

_MEASURE_ALIASES: dict[str, Measure] = {
    "loss_ratio": Measure.LR,
    "expense_ratio": Measure.ER,
    "combined_ratio": Measure.CR,
    "gross_written_premium": Measure.GWP,
    "net_earned_premium": Measure.NEP,
    "gross_margin": Measure.GM,
    "operating_expenses": Measure.OPEX,
    "policies": Measure.CONTRACTS,
}

if set(_MEASURE_KINDS) != set(Measure) or set(_MEASURE_DISPLAY) != set(Measure):
    raise RuntimeError("measure polarity/display tables must cover every Measure member")


__all__ = ["DisplayFormat", "Measure", "MeasureKind"]
