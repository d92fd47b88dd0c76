# src/prima_fpa/adapters/routers/health_router.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Health endpoint (Adapters Layer).

Purpose:
    Expose a liveness signal for container orchestrators that also reports
    how many facts the in-memory store currently holds.

Layer:
    adapters/routers
"""

from __future__ import annotations

from fastapi import APIRouter, status

from prima_fpa.adapters.schemas.http.fpa_schemas import HealthHTTP
from prima_fpa.dependencies.fpa import RepositoryDep, SettingsDep

router = APIRouter()


@router.get(
    "/healthz",
    response_model=HealthHTTP,
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
    tags=["Health"],
)
async def healthz(repository: RepositoryDep, settings: SettingsDep) -> HealthHTTP:
    """Return service identity and the current fact count."""
    return HealthHTTP(
        status="ok",
        service=settings.service_name,
        environment=settings.environment.value,
        facts=await repository.count(),
    )
