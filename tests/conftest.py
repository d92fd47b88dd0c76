# tests/conftest.py
from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from prima_fpa.adapters.repositories.in_memory_fact_repository import InMemoryFactRepository
from prima_fpa.config.settings import Settings, get_settings
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.enums.fpa import Scenario
from prima_fpa.domain.enums.measure import Measure
from prima_fpa.main import create_app

A = Scenario.ACTUAL
B = Scenario.BUDGET


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Force pytest-anyio to use asyncio (not trio)."""
    return "asyncio"


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    """Prevent env-driven Settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_facts() -> list[FactRecord]:
    """Small ledger spanning two business units and three months.

    Totals (ACTUAL / BUDGET):
        Revenue  100 / 90     (Motor, IT, 2024-01)
        Opex      40 / 50     (Motor, IT, ops, 2024-01)
        GWP     2200 / 1000   (Home, ES, 2024-02 and 2024-03)
        Claims   600 / -      (Home, ES, 2024-02)
    """
    return [
        FactRecord("2024-01", Measure.REVENUE, A, 100.0, business_unit="Motor", market="IT"),
        FactRecord("2024-01", Measure.REVENUE, B, 90.0, business_unit="Motor", market="IT"),
        FactRecord(
            "2024-01", Measure.OPEX, A, 40.0, business_unit="Motor", market="IT", department="ops"
        ),
        FactRecord(
            "2024-01", Measure.OPEX, B, 50.0, business_unit="Motor", market="IT", department="ops"
        ),
        FactRecord("2024-02", Measure.GWP, A, 1000.0, business_unit="Home", market="ES"),
        FactRecord("2024-02", Measure.GWP, B, 1000.0, business_unit="Home", market="ES"),
        FactRecord("2024-02", Measure.CLAIMS, A, 600.0, business_unit="Home", market="ES"),
        FactRecord("2024-03", Measure.GWP, A, 1200.0, business_unit="Home", market="ES"),
    ]


@pytest.fixture
def repository(sample_facts: list[FactRecord]) -> InMemoryFactRepository:
    return InMemoryFactRepository(sample_facts)


@pytest.fixture
def settings() -> Settings:
    return Settings(ENVIRONMENT="test", DEFAULT_CURRENCY="EUR")


@pytest.fixture
def app(settings: Settings, repository: InMemoryFactRepository) -> FastAPI:
    return create_app(settings, repository=repository)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
