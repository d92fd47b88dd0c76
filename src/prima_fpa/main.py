# src/prima_fpa/main.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires middleware, exception handlers and routers.
    Provides an application factory (`create_app`) used by uvicorn
    (``uvicorn prima_fpa.main:create_app --factory``) and by tests.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • The fact repository and file parser are constructed here and stored on
      ``app.state``; dependencies resolve them per request.
    • Lifespan configures logging and seeds the store via the core bootstrap.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError, version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from prima_fpa.adapters.mappers.fact_file_parser import PandasFactFileParser
from prima_fpa.adapters.repositories.in_memory_fact_repository import InMemoryFactRepository
from prima_fpa.adapters.routers import api_router
from prima_fpa.config.settings import Settings, get_settings
from prima_fpa.dependencies.core.bootstrap import bootstrap
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.infrastructure.http.errors import install_exception_handlers
from prima_fpa.infrastructure.logging.logger import get_json_logger
from prima_fpa.infrastructure.middleware.request_id import RequestIdMiddleware

logger = get_json_logger(__name__)


def _stable_operation_id(route: APIRoute) -> str:
    """Deterministic operationId, e.g. ``get__v1_analytics_kpis``."""
    methods = ",".join(sorted(route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "")
    return f"{methods.lower()}_{path.lower()}"


def _service_version() -> str:
    try:
        return version("prima-fpa")
    except PackageNotFoundError:
        return "0.0.0"


@asynccontextmanager
async def runtime_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Run the core bootstrap for the lifetime of the application."""
    async with bootstrap(app) as state:
        app.state.settings = state.settings
        yield


def _attach_cors(app: FastAPI, settings: Settings) -> None:
    if not settings.cors_allow_origins:
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials="*" not in settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(
    settings: Settings | None = None,
    *,
    repository: FactRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to :func:`get_settings`.
        repository: Fact store to serve from; defaults to a new
            :class:`InMemoryFactRepository`.
    """
    settings = settings or get_settings()
    service_version = _service_version()

    app = FastAPI(
        title="Prima FP&A API",
        version=service_version,
        description="Aggregation, variance and forecast engine for the FP&A dashboard.",
        lifespan=runtime_lifespan,
        generate_unique_id_function=_stable_operation_id,
        docs_url=settings.docs_url,
        openapi_url=settings.openapi_url,
    )
    app.state.settings = settings
    app.state.fact_repository = repository if repository is not None else InMemoryFactRepository()
    app.state.fact_parser = PandasFactFileParser()

    install_exception_handlers(app)
    app.add_middleware(RequestIdMiddleware)
    _attach_cors(app, settings)
    app.include_router(api_router)

    logger.info(
        "service_startup",
        extra={
            "service": settings.service_name,
            "env": settings.environment.value,
            "version": service_version,
            "status": "starting",
        },
    )
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "prima_fpa.main:create_app",
        factory=True,
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8080")),
    )
