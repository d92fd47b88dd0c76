# src/prima_fpa/domain/services/forecast_engine.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Forecast extrapolation engine.

Purpose:
    Project a historical series forward by a fixed number of periods using
    one of three methods:

        * moving average of the last three observations (flat projection),
        * average year-over-year growth compounded from the last value,
        * compound annual growth rate over the whole history.

Layer:
    domain

Notes:
    - This module is pure domain logic:
        * No logging.
        * No HTTP concerns.
        * No persistence.
    - Nothing here raises for numeric edge cases. Short histories fall back
      to repeating the last observation and an empty history yields an empty
      projection.
    - Zero or negative denominators are not corrected: they propagate as
      IEEE-754 ``inf`` / ``nan`` through the projection. Python raises where
      IEEE arithmetic would not, so division and exponentiation go through
      :func:`ieee_divide` and :func:`ieee_power`.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from prima_fpa.domain.enums.fpa import ForecastMethod

DEFAULT_HORIZON = 12
MOVING_AVERAGE_WINDOW = 3
YOY_SEASON_LENGTH = 12
CAGR_MIN_HISTORY = 2


# --------------------------------------------------------------------------- #
# IEEE-754 helpers                                                            #
# --------------------------------------------------------------------------- #


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics instead of raising ``ZeroDivisionError``.

    ``x / 0`` is ``±inf`` with the sign of ``x`` (and of a signed zero
    denominator); ``0 / 0`` and ``nan / 0`` are ``nan``.
    """
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def ieee_power(base: float, exponent: float) -> float:
    """Raise ``base`` to ``exponent`` with IEEE-754 results instead of errors.

    A negative base with a fractional exponent is ``nan`` (Python would return
    a complex number). Zero to a negative power and overflow are ``inf``.
    """
    try:
        result = base**exponent
    except ZeroDivisionError:
        return math.inf
    except OverflowError:
        return math.inf
    if isinstance(result, complex):
        return math.nan
    return float(result)


# --------------------------------------------------------------------------- #
# Methods                                                                     #
# --------------------------------------------------------------------------- #


def _repeat(value: float, horizon: int) -> list[float]:
    return [value] * horizon


def _compound(start: float, rate: float, horizon: int) -> list[float]:
    projected: list[float] = []
    current = start
    for _ in range(horizon):
        current = current * (1 + rate)
        projected.append(current)
    return projected


def moving_average_forecast(history: Sequence[float], horizon: int) -> list[float]:
    """Repeat the mean of the last ``min(3, n)`` observations ``horizon`` times."""
    window = history[-min(MOVING_AVERAGE_WINDOW, len(history)) :]
    return _repeat(sum(window) / len(window), horizon)


def average_yoy_growth(history: Sequence[float]) -> float:
    """Return the mean year-over-year growth rate of the latest twelve periods.

    The last twelve values are paired by position with the twelve values
    before them. With fewer than 24 observations the missing prior-year
    values give ``nan`` rates, which carry into the mean.
    """
    current = history[-YOY_SEASON_LENGTH:]
    previous = history[-2 * YOY_SEASON_LENGTH : -YOY_SEASON_LENGTH]
    rates = [
        ieee_divide(curr - previous[i], previous[i]) if i < len(previous) else math.nan
        for i, curr in enumerate(current)
    ]
    return sum(rates) / len(rates)


def yoy_growth_forecast(history: Sequence[float], horizon: int) -> list[float]:
    """Compound the average year-over-year growth rate from the last value.

    Fewer than twelve observations repeat the last value. From twelve to 23
    observations the rate is ``nan``, and so is every projected value.
    """
    last = history[-1]
    if len(history) < YOY_SEASON_LENGTH:
        return _repeat(last, horizon)
    return _compound(last, average_yoy_growth(history), horizon)


def cagr_rate(first: float, last: float, periods: int) -> float:
    """Return ``(last / first) ** (1 / periods) - 1`` with IEEE propagation."""
    return ieee_power(ieee_divide(last, first), 1 / periods) - 1


def cagr_forecast(history: Sequence[float], horizon: int) -> list[float]:
    """Compound the whole-history CAGR from the last value.

    Fewer than two observations repeat the last value.
    """
    last = history[-1]
    if len(history) < CAGR_MIN_HISTORY:
        return _repeat(last, horizon)
    rate = cagr_rate(history[0], last, len(history) - 1)
    return _compound(last, rate, horizon)


_FORECASTERS = {
    ForecastMethod.MOVING_AVERAGE: moving_average_forecast,
    ForecastMethod.YOY_GROWTH: yoy_growth_forecast,
    ForecastMethod.CAGR: cagr_forecast,
}

if set(_FORECASTERS) != set(ForecastMethod):
    raise RuntimeError("forecast dispatch table must cover every ForecastMethod")


def generate_forecast(
    history: Sequence[float],
    method: ForecastMethod,
    horizon: int = DEFAULT_HORIZON,
) -> list[float]:
    """Project ``history`` forward by ``horizon`` periods.

    Args:
        history: Ordered historical values, oldest first.
        method: Extrapolation method.
        horizon: Number of future periods. Negative values are treated as 0.

    Returns:
        Exactly ``horizon`` projected values, or an empty list when
        ``history`` is empty.

    Example:
        >>> generate_forecast([10, 20, 30], ForecastMethod.MOVING_AVERAGE, 2)
        [20.0, 20.0]
    """
    if not history or horizon <= 0:
        return []
    values = [float(v) for v in history]
    return _FORECASTERS[ForecastMethod(method)](values, horizon)


__all__ = [
    "DEFAULT_HORIZON",
    "average_yoy_growth",
    "cagr_forecast",
    "cagr_rate",
    "generate_forecast",
    "ieee_divide",
    "ieee_power",
    "moving_average_forecast",
    "yoy_growth_forecast",
]
