# src/prima_fpa/adapters/presenters/formatting.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Display formatting for financial values.

Purpose:
    Render engine outputs as the strings shown on dashboard cards, variance
    tables and CLI reports: whole-unit currency amounts, one-decimal
    percentages, ``1.23x`` ratios, and measure-aware insurance metrics.

Layer:
    adapters/presenters

Notes:
    - Rounding is half away from zero (``Decimal.ROUND_HALF_UP`` on the
      magnitude), so ``2.5`` renders as ``3`` and ``-2.5`` as ``-3``.
    - Percentages take *percentage points* (``5.0`` renders ``5.0%``).
      Fractional variances go through :func:`format_percent_variance`.
    - Non-finite values render as ``"n/a"``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from prima_fpa.domain.enums.fpa import Favorability
from prima_fpa.domain.enums.measure import DisplayFormat, Measure
from prima_fpa.domain.services.variance_engine import FAVORABILITY_EPSILON

NOT_AVAILABLE: Final[str] = "n/a"

CURRENCY_SYMBOLS: Mapping[str, str] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
}

DEPARTMENT_DISPLAY_NAMES: Mapping[str, str] = {
    "underwriting": "Underwriting",
    "claims": "Claims",
    "sales": "Sales",
    "ops": "Operations",
    "it": "IT",
    "ga": "G&A",
    "general_admin": "G&A",
}

FAVORABILITY_LABELS: Mapping[Favorability, str] = {
    Favorability.FAVORABLE: "success",
    Favorability.UNFAVORABLE: "danger",
    Favorability.NEUTRAL: "neutral",
}


def _round_magnitude(value: float, places: int) -> tuple[str, bool]:
    """Return the grouped, rounded magnitude of ``value`` and whether it is zero."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(abs(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:,.{places}f}", rounded.is_zero()


def _signed(formatted: str, value: float, is_zero: bool, show_sign: bool) -> str:
    # Values that round to zero never carry a sign.
    if is_zero:
        return formatted
    if value < 0:
        return f"-{formatted}"
    if show_sign:
        return f"+{formatted}"
    return formatted


def format_number(value: float, show_sign: bool = False) -> str:
    """Format ``value`` with thousands grouping and no decimals."""
    if not math.isfinite(value):
        return NOT_AVAILABLE
    digits, is_zero = _round_magnitude(value, 0)
    return _signed(digits, value, is_zero, show_sign)


def format_currency(value: float, currency: str = "EUR", show_sign: bool = False) -> str:
    """Format ``value`` as a whole-unit currency amount (``€1,235``).

    Currencies without a known symbol are prefixed with their ISO code
    (``CHF 1,235``).
    """
    if not math.isfinite(value):
        return NOT_AVAILABLE
    code = currency.upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    digits, is_zero = _round_magnitude(value, 0)
    body = f"{symbol}{digits}" if symbol else f"{code} {digits}"
    return _signed(body, value, is_zero, show_sign)


def format_percentage(value: float, show_sign: bool = False) -> str:
    """Format percentage points with one decimal (``12.3%``)."""
    if not math.isfinite(value):
        return NOT_AVAILABLE
    digits, is_zero = _round_magnitude(value, 1)
    return _signed(f"{digits}%", value, is_zero, show_sign)


def format_percent_variance(fraction: float) -> str:
    """Format a fractional variance as signed percentage points (``+5.0%``)."""
    return format_percentage(fraction * 100, show_sign=True)


def format_ratio(value: float) -> str:
    """Format a multiple with two decimals (``1.25x``)."""
    if not math.isfinite(value):
        return NOT_AVAILABLE
    digits, is_zero = _round_magnitude(value, 2)
    return _signed(f"{digits}x", value, is_zero, False)


def format_value(
    value: float,
    display_format: DisplayFormat,
    *,
    currency: str = "EUR",
    show_sign: bool = False,
) -> str:
    """Format ``value`` according to ``display_format``."""
    if display_format is DisplayFormat.CURRENCY:
        return format_currency(value, currency, show_sign)
    if display_format is DisplayFormat.PERCENTAGE:
        return format_percentage(value, show_sign)
    if display_format is DisplayFormat.RATIO:
        return format_ratio(value)
    return format_number(value, show_sign)


def format_insurance_metric(
    measure: Measure,
    value: float,
    show_sign: bool = False,
    *,
    currency: str = "EUR",
) -> str:
    """Format a measure value using the measure's display format.

    Premium and claim amounts render as currency, loss/expense/combined
    ratios and conversion/retention as percentages, counts as numbers.
    """
    return format_value(value, measure.display_format, currency=currency, show_sign=show_sign)


def variance_icon(variance: float, *, epsilon: float = FAVORABILITY_EPSILON) -> str:
    """Return ``→`` inside the neutral band, else ``↑`` or ``↓``."""
    if math.isnan(variance) or abs(variance) < epsilon:
        return "→"
    return "↑" if variance > 0 else "↓"


def department_display_name(department: str) -> str:
    """Return the display name for a department key (unknown keys unchanged)."""
    return DEPARTMENT_DISPLAY_NAMES.get(department.lower(), department)


__all__ = [
    "CURRENCY_SYMBOLS",
    "DEPARTMENT_DISPLAY_NAMES",
    "FAVORABILITY_LABELS",
    "NOT_AVAILABLE",
    "department_display_name",
    "format_currency",
    "format_insurance_metric",
    "format_number",
    "format_percent_variance",
    "format_percentage",
    "format_ratio",
    "format_value",
    "variance_icon",
]
