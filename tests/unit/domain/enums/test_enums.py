# tests/unit/domain/enums/test_enums.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for measure and FP&A enumerations."""

from __future__ import annotations

import pytest

from prima_fpa.domain.enums.fpa import Scenario
from prima_fpa.domain.enums.measure import DisplayFormat, Measure, MeasureKind
from prima_fpa.domain.exceptions.fpa import (
    FactValidationError,
    ImportTooLargeError,
    InvalidPeriodError,
    UnsupportedFileError,
)

COST_LIKE = {Measure.COGS, Measure.OPEX, Measure.LR, Measure.CLAIMS, Measure.ER, Measure.CR}


@pytest.mark.parametrize("measure", list(Measure))
def test_measure_polarity(measure: Measure) -> None:
    assert measure.is_revenue_type is (measure not in COST_LIKE)
    expected = MeasureKind.COST_LIKE if measure in COST_LIKE else MeasureKind.REVENUE_LIKE
    assert measure.kind is expected


def test_measure_display_formats() -> None:
    assert Measure.GWP.display_format is DisplayFormat.CURRENCY
    assert Measure.LR.display_format is DisplayFormat.PERCENTAGE
    assert Measure.CONTRACTS.display_format is DisplayFormat.NUMBER


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Revenue", Measure.REVENUE),
        (" revenue ", Measure.REVENUE),
        ("OPEX", Measure.OPEX),
        ("loss ratio", Measure.LR),
        ("Gross_Written_Premium", Measure.GWP),
        ("policies", Measure.CONTRACTS),
        ("", None),
        ("margin of safety", None),
    ],
)
def test_measure_parse(raw: str, expected: Measure | None) -> None:
    assert Measure.parse(raw) is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("actual", Scenario.ACTUAL),
        ("Actuals", Scenario.ACTUAL),
        ("plan", Scenario.BUDGET),
        ("FCST", Scenario.FORECAST),
        ("outlook", None),
    ],
)
def test_scenario_parse(raw: str, expected: Scenario | None) -> None:
    assert Scenario.parse(raw) is expected


def test_domain_error_codes_and_details() -> None:
    err = InvalidPeriodError("bad", details={"period": "x"})

    assert str(err) == "bad"
    assert err.details == {"period": "x"}
    assert [cls.code for cls in (FactValidationError, UnsupportedFileError, ImportTooLargeError)] == [
        "FACT_VALIDATION_ERROR",
        "UNSUPPORTED_FILE",
        "IMPORT_TOO_LARGE",
    ]
    assert FactValidationError("x").details == {}
