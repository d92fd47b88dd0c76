# src/prima_fpa/adapters/routers/base_router.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Base Router (Adapters Layer)

Purpose:
    Provide a canonical APIRouter wrapper and shared utilities for FP&A HTTP
    endpoints:
      - Versioned routing with stable prefixes (e.g., "/v1/analytics").
      - Standard error response mapping using ErrorEnvelope.
      - Helpers to emit presenter results with headers (ETag, X-Request-ID).

Layer:
    adapters/routers
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from fastapi import APIRouter, Request, Response

from prima_fpa.adapters.presenters.base_presenter import BasePresenter, PresentResult
from prima_fpa.adapters.schemas.http.envelopes import ErrorEnvelope
from prima_fpa.infrastructure.logging.logger import get_json_logger

_LOGGER = get_json_logger(__name__)

TagType = str | Enum


class BaseRouter(APIRouter):
    """Canonical router wrapper for FP&A HTTP endpoints.

    Args:
        version: API version segment (e.g., "v1").
        resource: Plural resource segment (e.g., "facts").
        prefix: Optional explicit prefix (overrides version/resource).
        tags: Default tags applied to all routes mounted on this router.
        **kwargs: Additional APIRouter kwargs.
    """

    def __init__(
        self,
        *,
        version: str,
        resource: str,
        prefix: str | None = None,
        tags: Sequence[TagType] | None = None,
        **kwargs: Any,
    ) -> None:
        computed_prefix = prefix or f"/{version}/{resource}"
        super().__init__(
            prefix=computed_prefix,
            tags=list(tags) if tags is not None else None,
            **kwargs,
        )
        _LOGGER.debug(
            "router_initialized",
            extra={"prefix": computed_prefix, "tags": [str(t) for t in tags or []]},
        )

    @staticmethod
    def trace_id(request: Request) -> str | None:
        """Return the request id assigned by the request-id middleware."""
        return getattr(request.state, "request_id", None)

    @staticmethod
    def send(response: Response, result: PresentResult[Any]) -> Any:
        """Apply presenter headers to ``response`` and return the envelope body."""
        BasePresenter.apply_headers(result, response)
        return result.body

    @staticmethod
    def std_error_responses() -> dict[int | str, dict[str, Any]]:
        """Return the canonical error response mapping for endpoints.

        Use in routes via ``responses=BaseRouter.std_error_responses()``.
        """
        return {
            400: {"model": ErrorEnvelope, "description": "Bad request (domain validation)."},
            413: {"model": ErrorEnvelope, "description": "Uploaded file too large."},
            415: {"model": ErrorEnvelope, "description": "Unsupported file type or layout."},
            422: {"model": ErrorEnvelope, "description": "Unprocessable content."},
            500: {"model": ErrorEnvelope, "description": "Internal server error."},
        }
