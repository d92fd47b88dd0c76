# src/prima_fpa/application/interfaces/fact_file_parser_port.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Application Interface: Fact File Parser Port.

Synopsis:
    Turns the raw bytes of an uploaded spreadsheet into fact records. The
    import use case depends on this port; the pandas-backed implementation
    lives in the adapters layer.

Layer:
    application/interfaces
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from prima_fpa.domain.entities.fact_record import FactRecord


class FactFileLayout(str, Enum):
    """Column layouts recognised in uploaded files."""

    LEDGER = "ledger"
    GWP = "gwp"
    COST = "cost"


@dataclass(frozen=True, slots=True)
class ParsedFactFile:
    """Facts extracted from one file plus the layout that was detected."""

    layout: FactFileLayout
    facts: list[FactRecord]
    rows: int


class FactFileParserPort(Protocol):
    """Parse uploaded file content into fact records."""

    def parse(self, file_name: str, content: bytes) -> ParsedFactFile:
        """Parse ``content``.

        Args:
            file_name: Original file name; its extension selects the reader.
            content: Raw file bytes.

        Raises:
            UnsupportedFileError: Unknown extension or undetectable layout.
            FactValidationError: A row cannot be turned into a fact.
        """
