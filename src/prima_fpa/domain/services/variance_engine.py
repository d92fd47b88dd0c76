# src/prima_fpa/domain/services/variance_engine.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Variance calculation and favorability classification.

Purpose:
    Compute actual-versus-budget variances and classify them as favorable,
    unfavorable, or neutral depending on whether the measure is revenue-like
    (growth is good) or cost-like (reduction is good).

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No HTTP concerns.
        * No persistence.
    - Nothing here raises for numeric edge cases. A zero budget yields a
      zero percent variance, by policy, so downstream formatting stays safe.
    - Unit convention: favorability is classified on the *fractional*
      percent variance (0.05 == 5%). The default epsilon of 0.01 is
      therefore one percent.
"""

from __future__ import annotations

from prima_fpa.domain.entities.analytics import Variance, VarianceResult
from prima_fpa.domain.enums.fpa import Favorability, Trend
from prima_fpa.domain.enums.measure import Measure

FAVORABILITY_EPSILON = 0.01


def calculate_variance(actual: float, budget: float) -> Variance:
    """Return the absolute and fractional variance of ``actual`` vs ``budget``.

    Args:
        actual: Observed value.
        budget: Planned value.

    Returns:
        :class:`Variance` where ``percent_variance`` is ``0.0`` when
        ``budget`` is zero.
    """
    absolute = actual - budget
    percent = absolute / budget if budget != 0 else 0.0
    return Variance(absolute_variance=absolute, percent_variance=percent)


def classify_favorability(
    variance: float,
    is_revenue_type: bool = True,
    *,
    epsilon: float = FAVORABILITY_EPSILON,
) -> Favorability:
    """Classify a variance.

    Args:
        variance: Fractional percent variance (or an absolute variance in
            units consistent with ``epsilon``).
        is_revenue_type: True when a positive variance is good for the
            measure (revenue, premiums, volumes).
        epsilon: Magnitude below which the variance is neutral.

    Returns:
        ``NEUTRAL`` if ``|variance| < epsilon``; otherwise ``FAVORABLE`` when
        the sign of the variance agrees with the measure's polarity, else
        ``UNFAVORABLE``.
    """
    if abs(variance) < epsilon:
        return Favorability.NEUTRAL
    if (variance > 0) == is_revenue_type:
        return Favorability.FAVORABLE
    return Favorability.UNFAVORABLE


def trend_of(absolute_variance: float) -> Trend:
    """Return the KPI trend for an absolute variance (exact zero is flat)."""
    if absolute_variance > 0:
        return Trend.UP
    if absolute_variance < 0:
        return Trend.DOWN
    return Trend.FLAT


def build_variance_result(
    actual: float,
    budget: float,
    measure: Measure | None = None,
    *,
    epsilon: float = FAVORABILITY_EPSILON,
) -> VarianceResult:
    """Compute a full :class:`VarianceResult`.

    Args:
        actual: Observed value.
        budget: Planned value.
        measure: Measure whose polarity drives favorability. ``None`` treats
            the values as revenue-like.
        epsilon: Neutral band on the fractional variance.
    """
    variance = calculate_variance(actual, budget)
    is_revenue = measure.is_revenue_type if measure is not None else True
    return VarianceResult(
        actual=actual,
        budget=budget,
        absolute_variance=variance.absolute_variance,
        percent_variance=variance.percent_variance,
        favorability=classify_favorability(
            variance.percent_variance, is_revenue, epsilon=epsilon
        ),
    )


__all__ = [
    "FAVORABILITY_EPSILON",
    "build_variance_result",
    "calculate_variance",
    "classify_favorability",
    "trend_of",
]
