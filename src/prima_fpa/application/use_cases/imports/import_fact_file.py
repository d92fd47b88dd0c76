# src/prima_fpa/application/use_cases/imports/import_fact_file.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Use Case: Import Fact File

Purpose:
    Parse an uploaded CSV/XLSX file into fact records and append them to the
    fact repository. The layout (ledger, GWP, cost) is detected from the
    header row by the injected parser.

Layer: application/use_cases

Notes:
    - Imports are all-or-nothing: a single invalid row rejects the file and
      nothing is stored.
    - Accepted and rejected imports are counted in Prometheus.
"""

from __future__ import annotations

import logging

from prima_fpa.application.interfaces.fact_file_parser_port import FactFileParserPort
from prima_fpa.application.schemas.dto.fpa import FactImportResultDTO
from prima_fpa.domain.exceptions.base import DomainError
from prima_fpa.domain.exceptions.fpa import ImportTooLargeError
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.infrastructure.observability.metrics import (
    observe_usecase,
    record_facts_imported,
    record_import_error,
)

logger = logging.getLogger(__name__)


class ImportFactFile:
    """Use case to import a fact file.

    Args:
        repository: Fact repository receiving the parsed facts.
        parser: File parser implementation.
        max_bytes: Maximum accepted file size.
    """

    def __init__(
        self,
        repository: FactRepository,
        parser: FactFileParserPort,
        *,
        max_bytes: int,
    ) -> None:
        self._repository = repository
        self._parser = parser
        self._max_bytes = max_bytes

    async def execute(self, file_name: str, content: bytes) -> FactImportResultDTO:
        """Parse ``content`` and store the resulting facts.

        Raises:
            ImportTooLargeError: ``content`` exceeds ``max_bytes``.
            UnsupportedFileError: Unknown file type or layout.
            FactValidationError: A row cannot be turned into a fact.
        """
        logger.info(
            "facts.import.start",
            extra={"file_name": file_name, "bytes": len(content)},
        )
        try:
            with observe_usecase("import_fact_file"):
                if len(content) > self._max_bytes:
                    raise ImportTooLargeError(
                        f"file exceeds the {self._max_bytes} byte import limit",
                        details={"size": len(content), "limit": self._max_bytes},
                    )
                parsed = self._parser.parse(file_name, content)
                imported = await self._repository.add_facts(parsed.facts)
                total = await self._repository.count()
        except DomainError as exc:
            record_import_error(exc.code.lower())
            logger.warning(
                "facts.import.rejected",
                extra={"file_name": file_name, "code": exc.code, "reason": exc.message},
            )
            raise

        record_facts_imported(parsed.layout.value, imported)
        logger.info(
            "facts.import.success",
            extra={
                "file_name": file_name,
                "layout": parsed.layout.value,
                "rows": parsed.rows,
                "imported": imported,
                "total_facts": total,
            },
        )
        return FactImportResultDTO(
            file_name=file_name,
            layout=parsed.layout.value,
            rows=parsed.rows,
            imported=imported,
            total_facts=total,
        )
