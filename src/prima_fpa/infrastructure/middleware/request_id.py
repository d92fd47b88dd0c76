# src/prima_fpa/infrastructure/middleware/request_id.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Request ID and access-log middleware.

Summary:
    Assigns a correlation ID to each request, propagates it in the response
    headers and log context, and emits one structured access-log line per
    request.

Contract:
    • Reads:  X-Request-ID (optional; kept when it is a safe token)
    • Writes: X-Request-ID (always written)
    • Stores: request.state.request_id (str)
    • Logs:   ``http.access`` with method, path, status, elapsed_ms

Notes:
    Error envelopes include this value as ``trace_id``.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Final

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from prima_fpa.infrastructure.logging.logger import get_json_logger, set_request_context

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
_SAFE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9\-_.:@]{1,128}$")

_logger: logging.Logger = get_json_logger(__name__)


def coerce_request_id(raw: str | None) -> str:
    """Return ``raw`` when it is a safe token, else a fresh UUID4 string."""
    if raw and _SAFE_RE.match(raw):
        return raw
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Attach a request id to the request, the response, and the log context."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Run the downstream handler with a request id in scope.

        Raises:
            Exception: Re-raised after logging if the downstream handler fails.
        """
        req_id = coerce_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = req_id
        set_request_context(request_id=req_id)

        t0 = time.perf_counter()
        response: Response | None = None
        try:
            response = await call_next(request)
            response.headers.setdefault(REQUEST_ID_HEADER, req_id)
            return response
        finally:
            _logger.info(
                "http.access",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code if response is not None else 500,
                    "elapsed_ms": round((time.perf_counter() - t0) * 1000.0, 2),
                    "request_id": req_id,
                },
            )
