# tests/unit/config/test_settings.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Unit tests for typed settings and the cached accessor."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from prima_fpa.config.settings import Environment, Settings, get_settings


def test_defaults() -> None:
    s = Settings(ENVIRONMENT="test")
    assert s.environment is Environment.TEST
    assert s.default_currency == "EUR"
    assert s.favorability_epsilon == 0.01
    assert s.forecast_default_horizon == 12
    assert s.forecast_max_horizon == 60
    assert s.import_max_bytes == 5 * 1024 * 1024
    assert s.facts_seed_path is None
    assert s.cors_allow_origins == []


def test_cors_origins_parsed_from_comma_list() -> None:
    s = Settings(ENVIRONMENT="staging", ALLOWED_ORIGINS=" https://a.example , ,https://b.example")
    assert s.cors_allow_origins == ["https://a.example", "https://b.example"]


def test_wildcard_cors_allowed_in_test() -> None:
    s = Settings(ENVIRONMENT="test", ALLOWED_ORIGINS="*")
    assert s.cors_allow_origins == ["*"]


def test_wildcard_cors_rejected_in_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    get_settings.cache_clear()
    with pytest.raises(RuntimeError, match="Invalid configuration"):
        get_settings()


def test_default_horizon_must_not_exceed_max() -> None:
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="test", FORECAST_DEFAULT_HORIZON=24, FORECAST_MAX_HORIZON=12)


@pytest.mark.parametrize(
    "overrides",
    [
        {"DEFAULT_CURRENCY": "eur"},
        {"FAVORABILITY_EPSILON": 1.5},
        {"IMPORT_MAX_BYTES": 0},
        {"LOG_LEVEL": "verbose"},
    ],
)
def test_constrained_fields_reject_invalid_values(overrides: dict[str, object]) -> None:
    with pytest.raises(ValidationError):
        Settings(ENVIRONMENT="test", **overrides)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DEFAULT_CURRENCY", "GBP")
    get_settings.cache_clear()
    first = get_settings()
    assert first is get_settings()
    assert first.default_currency == "GBP"
