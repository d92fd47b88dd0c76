# src/prima_fpa/dependencies/core/bootstrap.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Core bootstrap for the fact store.

This module owns the startup and shutdown of shared state used by the FastAPI
app. Configuration is read from Settings; the fact repository and parser are
created by the application factory and seeded here.

The single public surface is :func:`bootstrap`, an async context manager that
yields a simple state object with the resolved Settings and the repository.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI

from prima_fpa.application.interfaces.fact_file_parser_port import FactFileParserPort
from prima_fpa.config.settings import Settings, get_settings
from prima_fpa.domain.interfaces.repositories.fact_repository import FactRepository
from prima_fpa.infrastructure.logging.logger import configure_root_logging, get_json_logger

logger = get_json_logger(__name__)


@dataclass
class BootstrapState:
    """State yielded by the bootstrap context manager."""

    settings: Settings
    repository: FactRepository
    seeded_facts: int = 0


async def seed_repository(
    repository: FactRepository,
    parser: FactFileParserPort,
    settings: Settings,
) -> int:
    """Load ``settings.facts_seed_path`` into ``repository``.

    Returns:
        Number of facts added (0 when no seed path is configured).

    Raises:
        FileNotFoundError: The seed file does not exist.
        DomainError: The seed file cannot be parsed.
    """
    path = settings.facts_seed_path
    if path is None:
        return 0
    if not path.is_file():
        raise FileNotFoundError(f"FACTS_SEED_PATH does not exist: {path}")

    parsed = parser.parse(path.name, path.read_bytes())
    added = await repository.add_facts(parsed.facts)
    logger.info(
        "bootstrap.seeded",
        extra={"path": str(path), "layout": parsed.layout.value, "facts": added},
    )
    return added


@asynccontextmanager
async def bootstrap(app: FastAPI) -> AsyncGenerator[BootstrapState, None]:
    """Initialize and teardown shared state.

    Responsibilities:
        * Resolve settings (``app.state.settings`` wins over the global cache).
        * Configure root logging at the configured level.
        * Seed the fact repository from ``FACTS_SEED_PATH`` when set.

    Args:
        app: FastAPI application created by :func:`prima_fpa.main.create_app`.

    Yields:
        BootstrapState: Resolved settings and the fact repository.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    configure_root_logging(settings.log_level)
    logger.info("bootstrap.start", extra={"environment": settings.environment.value})

    repository: FactRepository = app.state.fact_repository
    try:
        seeded = await seed_repository(repository, app.state.fact_parser, settings)
    except Exception:
        logger.exception("bootstrap.seed_failed", extra={"path": str(settings.facts_seed_path)})
        raise

    try:
        yield BootstrapState(settings=settings, repository=repository, seeded_facts=seeded)
    finally:
        logger.info("bootstrap.stop", extra={"facts": await repository.count()})
