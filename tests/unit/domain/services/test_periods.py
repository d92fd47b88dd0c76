# tests/unit/domain/services/test_periods.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for reporting-period parsing and ordering."""

from __future__ import annotations

import pytest

from prima_fpa.domain.exceptions.fpa import InvalidPeriodError
from prima_fpa.domain.services.periods import (
    Period,
    next_periods,
    parse_period,
    quarter_months,
    sort_periods,
    try_parse_period,
)


def test_parse_monthly_key_is_canonicalized() -> None:
    period = parse_period(" 2024-3 ")

    assert (period.year, period.month, period.quarter) == (2024, 3, None)
    assert period.key == "2024-03"
    assert period.quarter_of == 1
    assert not period.is_quarterly


def test_parse_quarterly_key_is_case_insensitive() -> None:
    period = parse_period("2024-q2")

    assert period.is_quarterly
    assert period.key == "2024-Q2"
    assert period.quarter_of == 2


@pytest.mark.parametrize("key", ["2024-13", "2024-00", "2024-Q5", "FY24", "", "2024/01"])
def test_parse_period_rejects_unknown_shapes(key: str) -> None:
    with pytest.raises(InvalidPeriodError) as excinfo:
        parse_period(key)

    assert excinfo.value.code == "INVALID_PERIOD"
    assert excinfo.value.details == {"period": key}


@pytest.mark.parametrize(
    "fields",
    [{}, {"month": 3, "quarter": 1}],
)
def test_period_needs_exactly_one_of_month_or_quarter(fields: dict[str, int]) -> None:
    with pytest.raises(InvalidPeriodError):
        Period(year=2024, **fields)


def test_try_parse_period_returns_none_for_unknown_key() -> None:
    assert try_parse_period("budget-line") is None
    assert try_parse_period("2023-12") is not None


def test_quarter_key_sorts_after_its_months() -> None:
    ordered = sort_periods(["2024-04", "2024-Q1", "2024-03", "2023-12", "2024-01"])

    assert ordered == ["2023-12", "2024-01", "2024-03", "2024-Q1", "2024-04"]


def test_unknown_keys_sort_last_and_duplicates_collapse() -> None:
    ordered = sort_periods(["zeta", "2024-02", "alpha", "2024-02"])

    assert ordered == ["2024-02", "alpha", "zeta"]


def test_quarter_months() -> None:
    assert quarter_months(2024, 4) == ["2024-10", "2024-11", "2024-12"]
    with pytest.raises(InvalidPeriodError):
        quarter_months(2024, 0)


def test_next_periods_rolls_over_year() -> None:
    assert next_periods("2024-11", 3) == ["2024-12", "2025-01", "2025-02"]


def test_next_periods_quarterly() -> None:
    assert next_periods("2024-Q4", 2) == ["2025-Q1", "2025-Q2"]


def test_next_periods_unknown_key_uses_ordinals() -> None:
    assert next_periods("FY24", 2) == ["+1", "+2"]


def test_next_periods_non_positive_count() -> None:
    assert next_periods("2024-01", 0) == []
    assert next_periods("2024-01", -3) == []
