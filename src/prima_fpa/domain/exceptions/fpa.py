# src/prima_fpa/domain/exceptions/fpa.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
FP&A Domain Exceptions

Purpose:
    Error conditions raised at the edges of the aggregation engine: parsing
    period keys and turning uploaded files into fact records. The numeric
    engine itself never raises; these are mapped to HTTP by adapters.

Layer: domain/exceptions
"""
from __future__ import annotations

from .base import DomainError


class InvalidPeriodError(DomainError):
    """A period key is neither ``YYYY-MM`` nor ``YYYY-Qn``."""

    code = "INVALID_PERIOD"


class FactValidationError(DomainError):
    """A row or payload cannot be turned into a valid fact record."""

    code = "FACT_VALIDATION_ERROR"


class UnsupportedFileError(DomainError):
    """An uploaded file has an unknown type or an undetectable layout."""

    code = "UNSUPPORTED_FILE"


class ImportTooLargeError(DomainError):
    """An uploaded file exceeds the configured size limit."""

    code = "IMPORT_TOO_LARGE"
