# tests/unit/tasks/test_cli.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Tests for the Typer CLI over a local fact file."""

from __future__ import annotations

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from prima_fpa.domain.enums.fpa import ScenarioLever
from prima_fpa.tasks.cli import app, parse_change

LEDGER_CSV = """period,measure,scenario,value,business_unit,market
2024-01,Revenue,ACTUAL,100,Motor,IT
2024-01,Revenue,BUDGET,90,Motor,IT
2024-02,Revenue,ACTUAL,110,Motor,IT
2024-01,GWP,ACTUAL,1000,Home,ES
"""

runner = CliRunner()


@pytest.fixture
def ledger(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("ENVIRONMENT", "test")
    path = tmp_path / "ledger.csv"
    path.write_text(LEDGER_CSV, encoding="utf-8")
    return path


def test_parse_change_accepts_known_lever() -> None:
    assert parse_change("priceChange=5") == (ScenarioLever.PRICE_CHANGE, 5.0)


@pytest.mark.parametrize("raw", ["priceChange", "priceChange=abc", "unknownLever=5"])
def test_parse_change_rejects_malformed_input(raw: str) -> None:
    with pytest.raises(typer.BadParameter):
        parse_change(raw)


def test_kpis_command(ledger: Path) -> None:
    result = runner.invoke(app, ["kpis", str(ledger)])

    assert result.exit_code == 0, result.output
    assert "4 facts" in result.output
    assert "Revenue" in result.output
    assert "€210" in result.output


def test_kpis_command_with_market_filter(ledger: Path) -> None:
    result = runner.invoke(app, ["kpis", str(ledger), "--market", "ES"])

    assert result.exit_code == 0, result.output
    assert "1 facts" in result.output


def test_kpis_command_rejects_bad_period(ledger: Path) -> None:
    result = runner.invoke(app, ["kpis", str(ledger), "--period-from", "2024-13"])

    assert result.exit_code == 2


def test_rollup_command(ledger: Path) -> None:
    result = runner.invoke(app, ["rollup", str(ledger), "--dimension", "market"])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert any(line.startswith("IT") and "210" in line for line in lines)
    assert any(line.startswith("ES") and "1,000" in line for line in lines)


def test_variance_command(ledger: Path) -> None:
    result = runner.invoke(app, ["variance", str(ledger), "--limit", "1"])

    assert result.exit_code == 0, result.output
    assert len([line for line in result.output.splitlines() if line.strip()]) == 1


def test_forecast_command(ledger: Path) -> None:
    result = runner.invoke(
        app, ["forecast", str(ledger), "--measure", "Revenue", "--horizon", "2"]
    )

    assert result.exit_code == 0, result.output
    assert "-- movingAverage forecast (2 periods)" in result.output
    assert "2024-03" in result.output
    assert "2024-04" in result.output


def test_scenario_command(ledger: Path) -> None:
    result = runner.invoke(app, ["scenario", str(ledger), "--change", "priceChange=10"])

    assert result.exit_code == 0, result.output
    assert "€210" in result.output
    assert "€231" in result.output
    assert "+€21" in result.output


def test_scenario_command_rejects_unknown_lever(ledger: Path) -> None:
    result = runner.invoke(app, ["scenario", str(ledger), "--change", "bogus=1"])

    assert result.exit_code == 2


def test_ratios_command_reports_unavailable_ratios(ledger: Path) -> None:
    result = runner.invoke(app, ["ratios", str(ledger)])

    assert result.exit_code == 0, result.output
    assert "Combined Ratio" in result.output
    assert "n/a (" in result.output


def test_unsupported_file_exits_with_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "test")
    path = tmp_path / "facts.pdf"
    path.write_bytes(b"%PDF")

    result = runner.invoke(app, ["kpis", str(path)])

    assert result.exit_code == 1
    assert "UNSUPPORTED_FILE" in result.output
