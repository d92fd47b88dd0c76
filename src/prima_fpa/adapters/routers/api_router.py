# src/prima_fpa/adapters/routers/api_router.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""API Router Aggregator (Adapters Layer).

Purpose:
    Compose and expose the top-level `router` that includes all feature routers.

Responsibilities:
    • Mount the liveness check at `/healthz`.
    • Mount fact ingestion under `/v1/facts`.
    • Mount analytics under `/v1/analytics`.
    • Mount the Prometheus scrape endpoint at `/metrics`.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter

from prima_fpa.adapters.routers.analytics_router import router as analytics_router
from prima_fpa.adapters.routers.facts_router import router as facts_router
from prima_fpa.adapters.routers.health_router import router as health_router
from prima_fpa.adapters.routers.metrics_router import router as metrics_router

router = APIRouter()

router.include_router(health_router)
router.include_router(facts_router)
router.include_router(analytics_router)
router.include_router(metrics_router)
