# src/prima_fpa/adapters/routers/metrics_router.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Prometheus scrape endpoint (`/metrics`).

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Return the default registry in the Prometheus text format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
