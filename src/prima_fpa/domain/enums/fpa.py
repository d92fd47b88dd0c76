# src/prima_fpa/domain/enums/fpa.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
FP&A enumerations.

Purpose:
    Provide the small, closed vocabularies used by the aggregation and
    forecast engine: scenarios, grouping dimensions, favorability outcomes,
    KPI trends, and forecast methods.

Layer:
    domain

Notes:
    - Values are string identifiers suitable for JSON payloads, query
      parameters, and CSV columns.
    - Scenario tags are mutually exclusive, not a hierarchy.
"""

from __future__ import annotations

from enum import Enum


class Scenario(str, Enum):
    """Provenance tag of a financial value."""

    ACTUAL = "ACTUAL"
    BUDGET = "BUDGET"
    FORECAST = "FORECAST"

    @classmethod
    def parse(cls, raw: str) -> Scenario | None:
        """Return the scenario matching ``raw`` (case-insensitive) or None."""
        token = raw.strip().upper()
        if token in ("ACTUALS", "ACT"):
            token = "ACTUAL"
        elif token in ("BUD", "PLAN"):
            token = "BUDGET"
        elif token in ("FCST", "FC"):
            token = "FORECAST"
        try:
            return cls(token)
        except ValueError:
            return None


class Dimension(str, Enum):
    """Grouping keys available on a fact record.

    Values match the attribute names on :class:`FactRecord` so that the
    aggregator can resolve keys with a single attribute lookup.
    """

    PERIOD = "period"
    BUSINESS_UNIT = "business_unit"
    MARKET = "market"
    PRODUCT = "product"
    CHANNEL = "channel"
    DEPARTMENT = "department"


class Favorability(str, Enum):
    """Outcome of classifying a variance against the measure's polarity."""

    FAVORABLE = "favorable"
    UNFAVORABLE = "unfavorable"
    NEUTRAL = "neutral"


class Trend(str, Enum):
    """KPI direction derived from the sign of the absolute variance."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"


class ForecastMethod(str, Enum):
    """Supported extrapolation methods."""

    MOVING_AVERAGE = "movingAverage"
    YOY_GROWTH = "yoyGrowth"
    CAGR = "cagr"


class ScenarioLever(str, Enum):
    """Named what-if percentage changes accepted by the scenario applicator.

    Values are the camelCase keys used by scenario simulator payloads.
    """

    PRICE_CHANGE = "priceChange"
    VOLUME_CHANGE = "volumeChange"
    CONVERSION_CHANGE = "conversionChange"
    RETENTION_CHANGE = "retentionChange"
    OPEX_CHANGE = "opexChange"
    LOSS_RATIO_CHANGE = "lossRatioChange"


__all__ = ["Dimension", "Favorability", "ForecastMethod", "Scenario", "ScenarioLever", "Trend"]
