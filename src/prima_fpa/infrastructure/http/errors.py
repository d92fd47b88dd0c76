# src/prima_fpa/infrastructure/http/errors.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Exception handlers producing canonical error envelopes.

Purpose:
    Convert request validation failures, HTTP exceptions, domain errors and
    unexpected exceptions into ``{"error": {...}}`` JSON bodies carrying the
    request id as ``trace_id``.

Layer:
    infrastructure/http
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from prima_fpa.domain.exceptions.base import DomainError
from prima_fpa.domain.exceptions.fpa import (
    FactValidationError,
    ImportTooLargeError,
    InvalidPeriodError,
    UnsupportedFileError,
)
from prima_fpa.infrastructure.logging.logger import get_json_logger

logger: logging.Logger = get_json_logger(__name__)

DOMAIN_ERROR_STATUS: Mapping[type[DomainError], int] = {
    InvalidPeriodError: 400,
    FactValidationError: 400,
    ImportTooLargeError: 413,
    UnsupportedFileError: 415,
}


def _trace_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "request_id", None)


def status_for(exc: DomainError) -> int:
    """Return the HTTP status for a domain error (400 for unmapped subclasses)."""
    for error_type, status_code in DOMAIN_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


def error_envelope(
    *,
    code: str,
    http_status: int,
    message: str,
    details: dict[str, Any] | None = None,
    trace_id: str | None = None,
) -> dict[str, Any]:
    err: dict[str, Any] = {
        "code": code,
        "http_status": http_status,
        "message": message,
    }
    if details is not None:
        err["details"] = details
    if trace_id is not None:
        err["trace_id"] = trace_id
    return {"error": err}


async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
    payload = error_envelope(
        code="VALIDATION_ERROR",
        http_status=422,
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=422, content=payload)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    payload = error_envelope(
        code="HTTP_ERROR",
        http_status=exc.status_code,
        message=exc.detail if isinstance(exc.detail, str) else "HTTP error",
        details=None if isinstance(exc.detail, str) else {"detail": exc.detail},
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=exc.status_code, content=payload, headers=exc.headers)


async def handle_domain_error(request: Request, exc: DomainError) -> Response:
    status_code = status_for(exc)
    logger.info(
        "http.domain_error",
        extra={"code": exc.code, "status": status_code, "path": request.url.path},
    )
    payload = error_envelope(
        code=exc.code,
        http_status=status_code,
        message=exc.message or exc.code,
        details=jsonable_encoder(exc.details),
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=status_code, content=payload)


async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
    logger.exception(
        "http.unhandled_exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    payload = error_envelope(
        code="INTERNAL_ERROR",
        http_status=500,
        message="Internal server error",
        details=None,
        trace_id=_trace_id(request),
    )
    return JSONResponse(status_code=500, content=payload)


def install_exception_handlers(app: FastAPI) -> None:
    """Register the structured handlers on ``app``."""

    async def _http_error_handler(request: Request, exc: Exception) -> Response:
        if not isinstance(exc, StarletteHTTPException):
            raise exc
        return await handle_http_exception(request, exc)

    async def _validation_error_handler(request: Request, exc: Exception) -> Response:
        if not isinstance(exc, RequestValidationError):
            raise exc
        return await handle_validation_error(request, exc)

    async def _domain_error_handler(request: Request, exc: Exception) -> Response:
        if not isinstance(exc, DomainError):
            raise exc
        return await handle_domain_error(request, exc)

    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(DomainError, _domain_error_handler)
    app.add_exception_handler(Exception, handle_unhandled_exception)


__all__ = [
    "DOMAIN_ERROR_STATUS",
    "error_envelope",
    "handle_domain_error",
    "handle_http_exception",
    "handle_unhandled_exception",
    "handle_validation_error",
    "install_exception_handlers",
    "status_for",
]
