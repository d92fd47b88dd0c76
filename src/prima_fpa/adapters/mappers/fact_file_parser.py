# src/prima_fpa/adapters/mappers/fact_file_parser.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Fact file parser (CSV / XLSX -> FactRecord).

Purpose:
    Read uploaded spreadsheets with pandas and map their rows to fact
    records. Three column layouts are recognised from the header row:

        * ledger: ``period, measure, scenario, value`` plus optional
          dimension columns (``business_unit, market, product, channel,
          department``).
        * gwp: premium exports with ``country, month, gwp, contracts``
          columns. Each row yields ACTUAL ``GWP`` and ``Contracts`` facts
          keyed by market.
        * cost: cost-monitoring exports with ``department, month, actuals,
          budget`` columns. Each row yields ACTUAL and BUDGET ``Opex`` facts
          keyed by department.

Layer:
    adapters/mappers

Notes:
    - Header names are normalized to snake_case before matching; each
      logical column accepts several aliases (``month``, ``date``,
      ``period``...).
    - Dates are normalized to ``YYYY-MM``; quarterly keys are kept.
    - Parsing is all-or-nothing: the first invalid row raises
      :class:`FactValidationError` with its 1-based line number and column.
    - Empty cells in gwp/cost value columns produce no fact for that cell.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from io import BytesIO
from pathlib import Path
from typing import Any

import pandas as pd

from prima_fpa.application.interfaces.fact_file_parser_port import (
    FactFileLayout,
    ParsedFactFile,
)
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.enums.fpa import Scenario
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.domain.exceptions.fpa import FactValidationError, UnsupportedFileError
from prima_fpa.domain.services.periods import try_parse_period

CSV_EXTENSIONS = frozenset({".csv", ".txt"})
EXCEL_EXTENSIONS = frozenset({".xlsx", ".xlsm"})

LEDGER_COLUMNS = ("period", "measure", "scenario", "value")
DIMENSION_COLUMNS = ("business_unit", "market", "product", "channel", "department")

# Logical column -> accepted header aliases, in priority order.
COLUMN_ALIASES: Mapping[str, tuple[str, ...]] = {
    "period": ("period", "month", "date"),
    "country": ("country", "nation", "region", "market"),
    "gwp": ("gwp", "gross_written_premium", "premium"),
    "contracts": ("contracts", "policies", "count"),
    "department": ("department", "dept", "division"),
    "actuals": ("actuals", "actual", "spent"),
    "budget": ("budget", "budgeted", "planned"),
    "business_unit": ("business_unit", "bu"),
}

_GWP_KEYWORDS = ("gwp", "contracts", "growth")
_COST_KEYWORDS = ("department", "actuals", "budget", "cost")

_YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
_MONTH_RE = re.compile(r"\b(0?[1-9]|1[012])\b")
_ISO_DATE_RE = re.compile(r"^(\d{4})[-/](\d{1,2})(?:[-/]\d{1,2})?(?:[ T].*)?$")
_MONTH_NAMES = {
    name: idx
    for idx, names in enumerate(
        (
            ("jan", "january"),
            ("feb", "february"),
            ("mar", "march"),
            ("apr", "april"),
            ("may",),
            ("jun", "june"),
            ("jul", "july"),
            ("aug", "august"),
            ("sep", "sept", "september"),
            ("oct", "october"),
            ("nov", "november"),
            ("dec", "december"),
        ),
        start=1,
    )
    for name in names
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Return ``df`` with snake_case, lower-cased column names."""
    df = df.copy()
    df.columns = [re.sub(r"[\s\-]+", "_", str(col).strip().lower()) for col in df.columns]
    return df


def resolve_column(columns: Sequence[str], aliases: Sequence[str]) -> str | None:
    """Return the first column matching ``aliases``.

    Exact matches win over token matches; a token match is a column whose
    underscore-separated parts include the alias (``policy_count`` matches
    ``count``, ``country`` does not).
    """
    for alias in aliases:
        if alias in columns:
            return alias
    for alias in aliases:
        for column in columns:
            if alias in column.split("_"):
                return column
    return None


def _is_blank(raw: Any) -> bool:
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    if raw is pd.NaT:
        return True
    return isinstance(raw, str) and not raw.strip()


def normalize_period(raw: Any) -> str | None:
    """Normalize a cell to a ``YYYY-MM`` (or ``YYYY-Qn``) key.

    Accepts timestamps, ISO dates (``2024-03-31``), period keys, and free
    text that contains a four-digit year and a month number or name
    (``03/2024``, ``Mar 2024``).

    Returns:
        The canonical key, or None when no period can be recognised.
    """
    if _is_blank(raw):
        return None
    if isinstance(raw, pd.Timestamp | datetime | date):
        return f"{raw.year:04d}-{raw.month:02d}"

    text = str(raw).strip()
    parsed = try_parse_period(text)
    if parsed is not None:
        return parsed.key

    iso = _ISO_DATE_RE.match(text)
    if iso and 1 <= int(iso.group(2)) <= 12:
        return f"{int(iso.group(1)):04d}-{int(iso.group(2)):02d}"

    year_match = _YEAR_RE.search(text)
    if year_match is None:
        return None
    remainder = text[: year_match.start()] + " " + text[year_match.end() :]
    for token in re.findall(r"[A-Za-z]+", remainder):
        month = _MONTH_NAMES.get(token.lower())
        if month is not None:
            return f"{year_match.group(1)}-{month:02d}"
    month_match = _MONTH_RE.search(remainder)
    if month_match is None:
        return None
    return f"{year_match.group(1)}-{int(month_match.group(1)):02d}"


def _text(raw: Any) -> str | None:
    if _is_blank(raw):
        return None
    return str(raw).strip()


class PandasFactFileParser:
    """pandas-backed implementation of the fact file parser port."""

    def parse(self, file_name: str, content: bytes) -> ParsedFactFile:
        """Parse ``content`` into fact records.

        Raises:
            UnsupportedFileError: Unknown extension, unreadable or empty
                file, or undetectable layout.
            FactValidationError: A row cannot be turned into a fact.
        """
        df = normalize_columns(self._read_frame(file_name, content))
        df = df.dropna(how="all")
        if df.empty:
            raise UnsupportedFileError("no data rows found in file", details={"file_name": file_name})

        layout = self.detect_layout(list(df.columns))
        records = df.to_dict(orient="records")
        if layout is FactFileLayout.LEDGER:
            facts = self._ledger_facts(records, list(df.columns))
        elif layout is FactFileLayout.GWP:
            facts = self._gwp_facts(records, list(df.columns))
        else:
            facts = self._cost_facts(records, list(df.columns))
        return ParsedFactFile(layout=layout, facts=facts, rows=len(records))

    def parse_path(self, path: Path) -> ParsedFactFile:
        """Read and parse a local file."""
        return self.parse(path.name, path.read_bytes())

    # ------------------------------------------------------------------ #
    # Reading / detection
    # ------------------------------------------------------------------ #

    @staticmethod
    def _read_frame(file_name: str, content: bytes) -> pd.DataFrame:
        suffix = Path(file_name).suffix.lower()
        try:
            if suffix in CSV_EXTENSIONS:
                return pd.read_csv(BytesIO(content), dtype=str, keep_default_na=False, skipinitialspace=True)
            if suffix in EXCEL_EXTENSIONS:
                return pd.read_excel(BytesIO(content), engine="openpyxl")
        except pd.errors.EmptyDataError as exc:
            raise UnsupportedFileError("file is empty", details={"file_name": file_name}) from exc
        except Exception as exc:  # noqa: BLE001 - reader errors are reported to the caller
            raise UnsupportedFileError(
                f"failed to read {suffix or 'file'}: {exc}",
                details={"file_name": file_name},
            ) from exc
        raise UnsupportedFileError(
            f"unsupported file type {suffix or '(none)'}; expected CSV or XLSX",
            details={"file_name": file_name},
        )

    @staticmethod
    def detect_layout(columns: Sequence[str]) -> FactFileLayout:
        """Detect the layout from normalized header names.

        Raises:
            UnsupportedFileError: If no layout matches.
        """
        if all(col in columns for col in LEDGER_COLUMNS):
            return FactFileLayout.LEDGER
        if any(keyword in col for col in columns for keyword in _GWP_KEYWORDS):
            return FactFileLayout.GWP
        if any(keyword in col for col in columns for keyword in _COST_KEYWORDS):
            return FactFileLayout.COST
        raise UnsupportedFileError(
            "could not detect file layout; headers must include period/measure/scenario/value, "
            "gwp/contracts, or department/actuals/budget columns",
            details={"columns": ", ".join(columns)},
        )

    # ------------------------------------------------------------------ #
    # Row mapping
    # ------------------------------------------------------------------ #

    @staticmethod
    def _number(raw: Any, *, line: int, column: str) -> float:
        if _is_blank(raw):
            raise FactValidationError(
                f"line {line}: missing value in column '{column}'",
                details={"line": line, "column": column},
            )
        if isinstance(raw, bool):
            raise FactValidationError(
                f"line {line}: non-numeric value in column '{column}'",
                details={"line": line, "column": column, "value": str(raw)},
            )
        try:
            value = float(str(raw).strip().replace(" ", ""))
        except ValueError as exc:
            raise FactValidationError(
                f"line {line}: non-numeric value {raw!r} in column '{column}'",
                details={"line": line, "column": column, "value": str(raw)},
            ) from exc
        if not math.isfinite(value):
            raise FactValidationError(
                f"line {line}: non-finite value in column '{column}'",
                details={"line": line, "column": column, "value": str(raw)},
            )
        return value

    @classmethod
    def _optional_number(cls, raw: Any, *, line: int, column: str) -> float | None:
        if _is_blank(raw):
            return None
        return cls._number(raw, line=line, column=column)

    @staticmethod
    def _period(raw: Any, *, line: int, column: str) -> str:
        period = normalize_period(raw)
        if period is None:
            raise FactValidationError(
                f"line {line}: unrecognised period {raw!r} in column '{column}'",
                details={"line": line, "column": column, "value": "" if _is_blank(raw) else str(raw)},
            )
        return period

    def _ledger_facts(self, records: list[dict[str, Any]], columns: list[str]) -> list[FactRecord]:
        dims = {dim: resolve_column(columns, COLUMN_ALIASES.get(dim, (dim,))) for dim in DIMENSION_COLUMNS}
        facts: list[FactRecord] = []
        for idx, row in enumerate(records):
            line = idx + 2
            measure = Measure.parse(_text(row["measure"]) or "")
            if measure is None:
                raise FactValidationError(
                    f"line {line}: unknown measure {row['measure']!r}",
                    details={"line": line, "column": "measure", "value": str(row["measure"])},
                )
            scenario = Scenario.parse(_text(row["scenario"]) or "")
            if scenario is None:
                raise FactValidationError(
                    f"line {line}: unknown scenario {row['scenario']!r}",
                    details={"line": line, "column": "scenario", "value": str(row["scenario"])},
                )
            value = self._number(row["value"], line=line, column="value")
            facts.append(
                FactRecord(
                    period=self._period(row["period"], line=line, column="period"),
                    measure=measure,
                    scenario=scenario,
                    value=value,
                    **{dim: _text(row[col]) if col else None for dim, col in dims.items()},
                )
            )
        return facts

    def _gwp_facts(self, records: list[dict[str, Any]], columns: list[str]) -> list[FactRecord]:
        period_col = resolve_column(columns, COLUMN_ALIASES["period"])
        market_col = resolve_column(columns, COLUMN_ALIASES["country"])
        gwp_col = resolve_column(columns, COLUMN_ALIASES["gwp"])
        contracts_col = resolve_column(columns, COLUMN_ALIASES["contracts"])
        if period_col is None:
            raise UnsupportedFileError("gwp file has no month/date/period column")

        facts: list[FactRecord] = []
        for idx, row in enumerate(records):
            line = idx + 2
            period = self._period(row[period_col], line=line, column=period_col)
            market = _text(row[market_col]) if market_col else None
            for measure, col in ((Measure.GWP, gwp_col), (Measure.CONTRACTS, contracts_col)):
                if col is None:
                    continue
                value = self._optional_number(row[col], line=line, column=col)
                if value is not None:
                    facts.append(
                        FactRecord(period=period, measure=measure, scenario=Scenario.ACTUAL, value=value, market=market)
                    )
        return facts

    def _cost_facts(self, records: list[dict[str, Any]], columns: list[str]) -> list[FactRecord]:
        period_col = resolve_column(columns, COLUMN_ALIASES["period"])
        dept_col = resolve_column(columns, COLUMN_ALIASES["department"])
        market_col = resolve_column(columns, COLUMN_ALIASES["country"])
        actual_col = resolve_column(columns, COLUMN_ALIASES["actuals"])
        budget_col = resolve_column(columns, COLUMN_ALIASES["budget"])
        if period_col is None:
            raise UnsupportedFileError("cost file has no month/date/period column")

        facts: list[FactRecord] = []
        for idx, row in enumerate(records):
            line = idx + 2
            period = self._period(row[period_col], line=line, column=period_col)
            department = _text(row[dept_col]) if dept_col else None
            market = _text(row[market_col]) if market_col else None
            for scenario, col in ((Scenario.ACTUAL, actual_col), (Scenario.BUDGET, budget_col)):
                if col is None:
                    continue
                value = self._optional_number(row[col], line=line, column=col)
                if value is not None:
                    facts.append(
                        FactRecord(
                            period=period,
                            measure=Measure.OPEX,
                            scenario=scenario,
                            value=value,
                            department=department,
                            market=market,
                        )
                    )
        return facts


__all__ = [
    "COLUMN_ALIASES",
    "PandasFactFileParser",
    "normalize_columns",
    "normalize_period",
    "resolve_column",
]
