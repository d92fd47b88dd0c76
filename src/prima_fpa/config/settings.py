# src/prima_fpa/config/settings.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Prima FP&A Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated application configuration for the FP&A analytics
    service. Only adapters, infrastructure and the CLI read the process
    environment; use cases receive the values they need through their
    constructors.

Design:
    - Pydantic v2 BaseSettings with `extra='forbid'` to catch unknown env.
    - Explicit field declarations with constrained types and ranges.
    - Environment enumeration for behavior toggles (includes TEST).
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed application configuration for the FP&A service."""

    # ---------------------------
    # Core environment
    # ---------------------------
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    service_name: str = Field(
        default="prima-fpa",
        min_length=1,
        description="Service name reported by health checks and logs.",
        validation_alias="SERVICE_NAME",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"(?i)^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level.",
        validation_alias="LOG_LEVEL",
    )

    # Raw env for CORS; the parsed list is computed in a model validator.
    cors_allow_origins_raw: str | None = Field(
        default=None,
        description="Raw env for allowed CORS origins (comma-separated).",
        validation_alias="ALLOWED_ORIGINS",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=list,
        description=(
            "Allowed CORS origins. Derived from ALLOWED_ORIGINS. "
            "In development/test, '*' is allowed; in production-like envs, '*' is rejected."
        ),
    )

    # ---------------------------
    # OpenAPI / docs
    # ---------------------------
    docs_url: str | None = Field(
        default="/docs",
        description="Swagger UI docs URL. Set to None to disable interactive docs.",
        validation_alias="DOCS_URL",
    )
    openapi_url: str | None = Field(
        default="/openapi.json",
        description="OpenAPI JSON schema URL. Set to None to disable OpenAPI exposure.",
        validation_alias="OPENAPI_URL",
    )

    # ---------------------------
    # Analytics engine
    # ---------------------------
    default_currency: str = Field(
        default="EUR",
        pattern=r"^[A-Z]{3}$",
        description="ISO 4217 code used when formatting currency values.",
        validation_alias="DEFAULT_CURRENCY",
    )
    favorability_epsilon: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Neutral band on the fractional variance (0.01 == 1%).",
        validation_alias="FAVORABILITY_EPSILON",
    )
    forecast_default_horizon: int = Field(
        default=12,
        ge=0,
        description="Forecast horizon used when a request does not specify one.",
        validation_alias="FORECAST_DEFAULT_HORIZON",
    )
    forecast_max_horizon: int = Field(
        default=60,
        ge=1,
        le=600,
        description="Upper bound on requested forecast horizons.",
        validation_alias="FORECAST_MAX_HORIZON",
    )

    # ---------------------------
    # Fact ingestion
    # ---------------------------
    import_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        ge=1,
        description="Maximum decoded size of an uploaded fact file.",
        validation_alias="IMPORT_MAX_BYTES",
    )
    facts_seed_path: Path | None = Field(
        default=None,
        description="Optional CSV/XLSX file loaded into the fact store at startup.",
        validation_alias="FACTS_SEED_PATH",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def _compute_cors_and_horizons(self) -> Settings:
        """Compute the CORS list and cross-check forecast horizons.

        Raises:
            ValueError: If CORS or horizon invariants are violated.
        """
        raw = (self.cors_allow_origins_raw or "").strip()
        entries = [e.strip() for e in raw.split(",") if e.strip()]
        if any(e == "*" for e in entries) and self.environment not in (
            Environment.DEVELOPMENT,
            Environment.TEST,
        ):
            raise ValueError(
                "'*' CORS origin is only allowed in development/test environments.",
            )
        self.cors_allow_origins = entries

        if self.forecast_default_horizon > self.forecast_max_horizon:
            raise ValueError(
                "FORECAST_DEFAULT_HORIZON must not exceed FORECAST_MAX_HORIZON.",
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.exception("Invalid application configuration")
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    logger.info(
        "Settings initialized",
        extra={
            "environment": settings.environment.value,
            "service_name": settings.service_name,
            "cors_count": len(settings.cors_allow_origins),
            "cors_has_wildcard": any(o == "*" for o in settings.cors_allow_origins),
            "docs": {"docs_url": settings.docs_url, "openapi_url": settings.openapi_url},
            "forecast_max_horizon": settings.forecast_max_horizon,
            "seed_path_set": settings.facts_seed_path is not None,
        },
    )
    return settings
