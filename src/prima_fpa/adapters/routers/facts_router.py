# src/prima_fpa/adapters/routers/facts_router.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Facts Router.

Summary:
    Write endpoints for the fact store: append JSON facts, import a
    base64-encoded CSV/XLSX file, and clear the store.

Layer:
    adapters/routers

Notes:
    Domain errors propagate to the structured handlers in
    ``infrastructure/http/errors.py`` (400 / 413 / 415).
"""

from __future__ import annotations

import base64
import binascii
from typing import Annotated

from fastapi import Depends, Request, Response, status

from prima_fpa.adapters.presenters.fpa_presenter import FpaPresenter
from prima_fpa.adapters.routers.base_router import BaseRouter
from prima_fpa.adapters.schemas.http.envelopes import SuccessEnvelope
from prima_fpa.adapters.schemas.http.fpa_schemas import (
    FactImportHTTP,
    FactImportRequest,
    FactsAcceptedHTTP,
    FactsClearedHTTP,
    FactsIn,
)
from prima_fpa.application.schemas.dto.fpa import FactDTO
from prima_fpa.application.use_cases.imports.import_fact_file import ImportFactFile
from prima_fpa.dependencies.fpa import RepositoryDep, get_import_fact_file_uc, get_presenter
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.exceptions.fpa import FactValidationError
from prima_fpa.domain.services.periods import parse_period
from prima_fpa.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)
router = BaseRouter(version="v1", resource="facts", tags=["Facts"])

PresenterDep = Annotated[FpaPresenter, Depends(get_presenter)]


def _to_records(payload: FactsIn) -> list[FactRecord]:
    records: list[FactRecord] = []
    for index, fact in enumerate(payload.facts):
        data = fact.model_dump()
        data["period"] = parse_period(fact.period).key
        dto = FactDTO(**data)
        try:
            records.append(dto.to_entity())
        except ValueError as exc:
            raise FactValidationError(str(exc), details={"index": index}) from exc
    return records


@router.post(
    "",
    response_model=SuccessEnvelope[FactsAcceptedHTTP],
    status_code=status.HTTP_201_CREATED,
    responses=BaseRouter.std_error_responses(),
    summary="Append fact records",
)
async def add_facts(
    request: Request,
    response: Response,
    payload: FactsIn,
    repository: RepositoryDep,
    presenter: PresenterDep,
) -> SuccessEnvelope[FactsAcceptedHTTP]:
    """Validate and append ``payload.facts`` (all-or-nothing)."""
    records = _to_records(payload)
    accepted = await repository.add_facts(records)
    total = await repository.count()
    logger.info("facts.append.success", extra={"accepted": accepted, "total_facts": total})
    result = presenter.present_facts_accepted(accepted, total, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)


@router.post(
    "/import",
    response_model=SuccessEnvelope[FactImportHTTP],
    status_code=status.HTTP_201_CREATED,
    responses=BaseRouter.std_error_responses(),
    summary="Import a CSV or XLSX fact file",
)
async def import_facts(
    request: Request,
    response: Response,
    payload: FactImportRequest,
    uc: Annotated[ImportFactFile, Depends(get_import_fact_file_uc)],
    presenter: PresenterDep,
) -> SuccessEnvelope[FactImportHTTP]:
    """Decode the uploaded file and import its facts."""
    try:
        content = base64.b64decode(payload.content_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FactValidationError(
            "content_base64 is not valid base64",
            details={"file_name": payload.file_name},
        ) from exc

    dto = await uc.execute(payload.file_name, content)
    result = presenter.present_import(dto, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)


@router.delete(
    "",
    response_model=SuccessEnvelope[FactsClearedHTTP],
    status_code=status.HTTP_200_OK,
    responses=BaseRouter.std_error_responses(),
    summary="Remove every fact from the store",
)
async def clear_facts(
    request: Request,
    response: Response,
    repository: RepositoryDep,
    presenter: PresenterDep,
) -> SuccessEnvelope[FactsClearedHTTP]:
    removed = await repository.clear()
    logger.info("facts.clear.success", extra={"removed": removed})
    result = presenter.present_cleared(removed, trace_id=BaseRouter.trace_id(request))
    return BaseRouter.send(response, result)
