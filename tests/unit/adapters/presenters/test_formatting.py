# tests/unit/adapters/presenters/test_formatting.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for display formatting of financial values."""

from __future__ import annotations

import math

import pytest

from prima_fpa.adapters.presenters.formatting import (
    FAVORABILITY_LABELS,
    NOT_AVAILABLE,
    department_display_name,
    format_currency,
    format_insurance_metric,
    format_number,
    format_percent_variance,
    format_percentage,
    format_ratio,
    format_value,
    variance_icon,
)
from prima_fpa.domain.enums.fpa import Favorability
from prima_fpa.domain.enums.measure import DisplayFormat, Measure


@pytest.mark.parametrize(
    ("value", "kwargs", "expected"),
    [
        (1234.5, {}, "€1,235"),
        (-1234.4, {}, "-€1,234"),
        (1_250_000, {}, "€1,250,000"),
        (50, {"show_sign": True}, "+€50"),
        (-50, {"show_sign": True}, "-€50"),
        (-0.4, {"show_sign": True}, "€0"),
        (1000, {"currency": "usd"}, "$1,000"),
        (1000, {"currency": "CHF"}, "CHF 1,000"),
    ],
)
def test_format_currency(value: float, kwargs: dict[str, object], expected: str) -> None:
    assert format_currency(value, **kwargs) == expected  # type: ignore[arg-type]


def test_rounding_is_half_away_from_zero() -> None:
    assert format_number(2.5) == "3"
    assert format_number(-2.5) == "-3"
    assert format_percentage(2.25) == "2.3%"


def test_format_percentage_and_variance() -> None:
    assert format_percentage(12.345) == "12.3%"
    assert format_percentage(5.0, show_sign=True) == "+5.0%"
    assert format_percent_variance(0.05) == "+5.0%"
    assert format_percent_variance(-0.123) == "-12.3%"
    assert format_percent_variance(0.0) == "0.0%"


def test_format_ratio_and_number() -> None:
    assert format_ratio(1.256) == "1.26x"
    assert format_number(1_234_567.5) == "1,234,568"
    assert format_number(-12, show_sign=True) == "-12"


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_values_are_not_available(value: float) -> None:
    assert format_currency(value) == NOT_AVAILABLE
    assert format_percentage(value) == NOT_AVAILABLE
    assert format_ratio(value) == NOT_AVAILABLE
    assert format_number(value) == NOT_AVAILABLE


def test_format_value_dispatches_on_display_format() -> None:
    assert format_value(1500, DisplayFormat.CURRENCY, currency="GBP") == "£1,500"
    assert format_value(64.0, DisplayFormat.PERCENTAGE) == "64.0%"
    assert format_value(0.97, DisplayFormat.RATIO) == "0.97x"
    assert format_value(1500, DisplayFormat.NUMBER) == "1,500"


def test_format_insurance_metric_uses_measure_format() -> None:
    assert format_insurance_metric(Measure.GWP, 2_000_000) == "€2,000,000"
    assert format_insurance_metric(Measure.LR, 64.04) == "64.0%"
    assert format_insurance_metric(Measure.CONTRACTS, 1500) == "1,500"
    assert format_insurance_metric(Measure.CLAIMS, -10, True, currency="USD") == "-$10"


@pytest.mark.parametrize(
    ("variance", "icon"),
    [(0.05, "↑"), (-0.05, "↓"), (0.005, "→"), (-0.0099, "→"), (math.nan, "→")],
)
def test_variance_icon(variance: float, icon: str) -> None:
    assert variance_icon(variance) == icon


def test_variance_icon_custom_epsilon() -> None:
    assert variance_icon(0.05, epsilon=0.1) == "→"


def test_department_display_names() -> None:
    assert department_display_name("ops") == "Operations"
    assert department_display_name("GA") == "G&A"
    assert department_display_name("legal") == "legal"


def test_favorability_labels_cover_every_outcome() -> None:
    assert set(FAVORABILITY_LABELS) == set(Favorability)
    assert FAVORABILITY_LABELS[Favorability.UNFAVORABLE] == "danger"
