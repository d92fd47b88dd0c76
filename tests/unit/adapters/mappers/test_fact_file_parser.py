# tests/unit/adapters/mappers/test_fact_file_parser.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for the pandas-backed fact file parser."""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import Workbook

from prima_fpa.adapters.mappers.fact_file_parser import (
    PandasFactFileParser,
    normalize_columns,
    normalize_period,
    resolve_column,
)
from prima_fpa.application.interfaces.fact_file_parser_port import FactFileLayout
from prima_fpa.domain.enums.fpa import Scenario
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.exceptions.fpa import FactValidationError, UnsupportedFileError

LEDGER_CSV = b"""period,measure,scenario,value,Business Unit,market
2024-01,Revenue,ACTUAL,100,Motor,IT
2024-01,Revenue,budget,90.5,Motor,IT
2024-Q1,loss ratio,Actual,0.6,,
"""

GWP_CSV = b"""Country,Month,GWP,Contracts
IT,2024-01-31,1000,10
ES,Mar 2024,2000,
"""

COST_CSV = b"""Department,Month,Actuals,Budget
ops,03/2024,100,120
claims,2024-04,50,
"""


@pytest.fixture
def parser() -> PandasFactFileParser:
    return PandasFactFileParser()


def test_ledger_layout(parser: PandasFactFileParser) -> None:
    parsed = parser.parse("ledger.csv", LEDGER_CSV)

    assert parsed.layout is FactFileLayout.LEDGER
    assert parsed.rows == 3
    first, second, third = parsed.facts
    assert (first.period, first.measure, first.scenario, first.value) == (
        "2024-01",
        Measure.REVENUE,
        Scenario.ACTUAL,
        100.0,
    )
    assert first.business_unit == "Motor"
    assert first.market == "IT"
    assert second.scenario is Scenario.BUDGET
    assert second.value == 90.5
    assert third.period == "2024-Q1"
    assert third.measure is Measure.LR
    assert third.business_unit is None
    assert third.market is None


def test_gwp_layout(parser: PandasFactFileParser) -> None:
    parsed = parser.parse("premiums.CSV", GWP_CSV)

    assert parsed.layout is FactFileLayout.GWP
    assert parsed.rows == 2
    summary = [(f.period, f.measure, f.value, f.market) for f in parsed.facts]
    assert summary == [
        ("2024-01", Measure.GWP, 1000.0, "IT"),
        ("2024-01", Measure.CONTRACTS, 10.0, "IT"),
        ("2024-03", Measure.GWP, 2000.0, "ES"),
    ]
    assert all(f.scenario is Scenario.ACTUAL for f in parsed.facts)


def test_gwp_non_numeric_cell_is_rejected(parser: PandasFactFileParser) -> None:
    content = b"country,month,gwp,contracts\nIT,2024-01,lots,\n"

    with pytest.raises(FactValidationError) as excinfo:
        parser.parse("premiums.csv", content)

    assert excinfo.value.details["line"] == 2
    assert excinfo.value.details["column"] == "gwp"


def test_cost_layout(parser: PandasFactFileParser) -> None:
    parsed = parser.parse("costs.csv", COST_CSV)

    assert parsed.layout is FactFileLayout.COST
    summary = [(f.period, f.scenario, f.value, f.department) for f in parsed.facts]
    assert summary == [
        ("2024-03", Scenario.ACTUAL, 100.0, "ops"),
        ("2024-03", Scenario.BUDGET, 120.0, "ops"),
        ("2024-04", Scenario.ACTUAL, 50.0, "claims"),
    ]
    assert all(f.measure is Measure.OPEX for f in parsed.facts)


def test_xlsx_ledger_with_date_cells(parser: PandasFactFileParser) -> None:
    wb = Workbook()
    ws = wb.active
    ws.append(["Period", "Measure", "Scenario", "Value", "Market"])
    ws.append(["2024-01", "GWP", "ACTUAL", 500, "IT"])
    ws.append([datetime(2024, 2, 1), "GWP", "BUDGET", 450.25, "IT"])
    buf = BytesIO()
    wb.save(buf)

    parsed = parser.parse("facts.xlsx", buf.getvalue())

    assert [(f.period, f.scenario, f.value) for f in parsed.facts] == [
        ("2024-01", Scenario.ACTUAL, 500.0),
        ("2024-02", Scenario.BUDGET, 450.25),
    ]


def test_parse_path(parser: PandasFactFileParser, tmp_path: Path) -> None:
    path = tmp_path / "ledger.csv"
    path.write_bytes(LEDGER_CSV)

    assert len(parser.parse_path(path).facts) == 3


@pytest.mark.parametrize(
    ("row", "column"),
    [
        (b"2024-01,Revenue,ACTUAL,abc", "value"),
        (b"2024-01,Revenue,ACTUAL,", "value"),
        (b"2024-01,Revenue,ACTUAL,inf", "value"),
        (b"2024-01,Widgets,ACTUAL,1", "measure"),
        (b"2024-01,Revenue,outlook,1", "scenario"),
        (b"someday,Revenue,ACTUAL,1", "period"),
    ],
)
def test_invalid_ledger_rows_report_line_and_column(
    parser: PandasFactFileParser, row: bytes, column: str
) -> None:
    content = b"period,measure,scenario,value\n2024-01,GWP,ACTUAL,1\n" + row + b"\n"

    with pytest.raises(FactValidationError) as excinfo:
        parser.parse("ledger.csv", content)

    assert excinfo.value.details["line"] == 3
    assert excinfo.value.details["column"] == column
    assert "line 3" in excinfo.value.message


def test_unsupported_extension(parser: PandasFactFileParser) -> None:
    with pytest.raises(UnsupportedFileError) as excinfo:
        parser.parse("facts.json", b"{}")

    assert excinfo.value.details == {"file_name": "facts.json"}


@pytest.mark.parametrize(
    "content",
    [b"", b"period,measure,scenario,value\n"],
)
def test_empty_files_are_rejected(parser: PandasFactFileParser, content: bytes) -> None:
    with pytest.raises(UnsupportedFileError):
        parser.parse("empty.csv", content)


def test_undetectable_layout(parser: PandasFactFileParser) -> None:
    with pytest.raises(UnsupportedFileError, match="could not detect"):
        parser.parse("mystery.csv", b"alpha,beta\n1,2\n")


def test_corrupt_workbook(parser: PandasFactFileParser) -> None:
    with pytest.raises(UnsupportedFileError, match="failed to read"):
        parser.parse("broken.xlsx", b"not a zip archive")


def test_detect_layout_prefers_ledger() -> None:
    columns = ["period", "measure", "scenario", "value", "gwp"]

    assert PandasFactFileParser.detect_layout(columns) is FactFileLayout.LEDGER
    assert PandasFactFileParser.detect_layout(["month", "cost_center"]) is FactFileLayout.COST


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-3", "2024-03"),
        ("2024-q4", "2024-Q4"),
        ("2024-03-31", "2024-03"),
        ("2024/11/02 00:00:00", "2024-11"),
        ("Mar 2024", "2024-03"),
        ("september 2023", "2023-09"),
        ("03/2024", "2024-03"),
        (pd.Timestamp("2024-07-15"), "2024-07"),
        (datetime(2023, 12, 1), "2023-12"),
        ("", None),
        (None, None),
        ("sometime", None),
        ("2024", None),
    ],
)
def test_normalize_period(raw: object, expected: str | None) -> None:
    assert normalize_period(raw) == expected


def test_normalize_columns_and_resolve() -> None:
    df = normalize_columns(pd.DataFrame(columns=[" Business Unit ", "Policy-Count", "Country"]))

    assert list(df.columns) == ["business_unit", "policy_count", "country"]
    assert resolve_column(list(df.columns), ("contracts", "policies", "count")) == "policy_count"
    assert resolve_column(list(df.columns), ("country",)) == "country"
    assert resolve_column(list(df.columns), ("department",)) is None
