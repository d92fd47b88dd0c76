# src/prima_fpa/adapters/schemas/http/fpa_schemas.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""HTTP Schemas: FP&A analytics.

Synopsis:
    Pydantic models that define the HTTP-facing request/response contracts for
    fact ingestion, KPI cards, dimension rollups, variance tables, forecasts,
    what-if scenarios and ratios. Every numeric field is paired with the
    display string the dashboard renders.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from prima_fpa.adapters.schemas.http.base import BaseHTTPSchema, JsonFloat
from prima_fpa.domain.enums.fpa import (
    Dimension,
    Favorability,
    ForecastMethod,
    Scenario,
    ScenarioLever,
    Trend,
)
from prima_fpa.domain.enums.measure import DisplayFormat, Measure

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class FactIn(BaseHTTPSchema):
    """One fact record submitted by a client."""

    model_config = ConfigDict(extra="forbid", use_enum_values=False)

    period: str = Field(..., description="Period key (YYYY-MM or YYYY-Qn).", examples=["2024-01"])
    measure: Measure = Field(..., description="Measure code.", examples=["GWP"])
    scenario: Scenario = Field(..., description="Scenario tag.", examples=["ACTUAL"])
    value: float = Field(..., allow_inf_nan=False, description="Finite numeric value.")
    business_unit: str | None = Field(default=None, examples=["Motor"])
    market: str | None = Field(default=None, examples=["IT"])
    product: str | None = Field(default=None)
    channel: str | None = Field(default=None)
    department: str | None = Field(default=None)


class FactsIn(BaseHTTPSchema):
    """Batch of fact records to append to the store."""

    model_config = ConfigDict(extra="forbid", use_enum_values=False)

    facts: list[FactIn] = Field(..., min_length=1, description="Fact records (at least one).")


class FactImportRequest(BaseHTTPSchema):
    """Spreadsheet upload carried as base64 in a JSON body."""

    file_name: str = Field(
        ...,
        min_length=1,
        description="Original file name; the extension selects the reader.",
        examples=["gwp_2024.csv"],
    )
    content_base64: str = Field(..., min_length=1, description="Base64-encoded file bytes.")


class ScenarioRequest(BaseHTTPSchema):
    """What-if levers, in percent, applied to one scenario's measure totals."""

    model_config = ConfigDict(extra="forbid", use_enum_values=False)

    changes: dict[ScenarioLever, float] = Field(
        default_factory=dict,
        description="Percentage change per lever (5 == +5%).",
        examples=[{"priceChange": 5, "opexChange": -2}],
    )
    scenario: Scenario = Field(
        default=Scenario.ACTUAL,
        description="Scenario whose totals are the simulation base.",
    )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class FactsAcceptedHTTP(BaseHTTPSchema):
    """Result of appending facts."""

    accepted: int = Field(..., ge=0)
    total_facts: int = Field(..., ge=0)


class FactsClearedHTTP(BaseHTTPSchema):
    """Result of clearing the fact store."""

    removed: int = Field(..., ge=0)


class FactImportHTTP(BaseHTTPSchema):
    """Result of importing a spreadsheet."""

    file_name: str
    layout: str = Field(..., description="Detected layout (ledger, gwp or cost).")
    rows: int
    imported: int
    total_facts: int


class KpiHTTP(BaseHTTPSchema):
    """KPI card for one measure."""

    name: Measure
    actual: float
    budget: float
    variance: float
    percent_variance: float = Field(..., description="Fractional variance (0.05 == 5%).")
    trend: Trend
    favorability: Favorability
    status: str = Field(..., description="Badge color key (success, danger, neutral).")
    display_format: DisplayFormat
    actual_display: str = Field(..., examples=["€1,250,000"])
    budget_display: str
    variance_display: str
    percent_variance_display: str = Field(..., examples=["+5.0%"])
    icon: str = Field(..., examples=["↑"])


class KpiSummaryHTTP(BaseHTTPSchema):
    """KPI cards for the filtered fact set."""

    items: list[KpiHTTP]
    fact_count: int


class RollupBucketHTTP(BaseHTTPSchema):
    """Scenario totals for one dimension value."""

    key: str
    actual: float
    budget: float
    forecast: float


class DimensionRollupHTTP(BaseHTTPSchema):
    """Scenario totals per dimension value."""

    dimension: Dimension
    buckets: list[RollupBucketHTTP]


class VarianceRowHTTP(BaseHTTPSchema):
    """One variance-table row."""

    entity: str = Field(..., examples=["Motor - GWP"])
    dimension_value: str
    measure: Measure
    actual: float
    comparison: float
    absolute_variance: float
    percent_variance: float
    favorability: Favorability
    status: str
    actual_display: str
    comparison_display: str
    variance_display: str
    percent_variance_display: str
    icon: str


class VarianceTableHTTP(BaseHTTPSchema):
    """Variance rows ranked by absolute variance, largest first."""

    dimension: Dimension
    comparison: Scenario
    rows: list[VarianceRowHTTP]


class SeriesPointHTTP(BaseHTTPSchema):
    """One labelled value of a time series (non-finite values become null)."""

    period: str
    value: JsonFloat
    display: str


class ForecastHTTP(BaseHTTPSchema):
    """History and projection of one measure."""

    measure: Measure
    scenario: Scenario
    method: ForecastMethod
    horizon: int
    history: list[SeriesPointHTTP]
    forecast: list[SeriesPointHTTP]


class ScenarioAdjustmentHTTP(BaseHTTPSchema):
    """Base and adjusted total for one measure."""

    measure: Measure
    base_value: float
    adjusted_value: float
    delta: float
    base_display: str
    adjusted_display: str
    delta_display: str


class ScenarioSimulationHTTP(BaseHTTPSchema):
    """What-if simulation result."""

    scenario: Scenario
    changes: dict[str, float]
    adjustments: list[ScenarioAdjustmentHTTP]


class RatioValueHTTP(BaseHTTPSchema):
    """Evaluated ratio, or the reason it could not be evaluated."""

    code: str = Field(..., examples=["combined_ratio"])
    name: str
    category: str
    formula: str
    value: JsonFloat = None
    display: str | None = Field(default=None, examples=["97.4%"])
    failure_reason: str | None = None
    details: dict[str, str] | None = None


class RatioEvaluationHTTP(BaseHTTPSchema):
    """Ratios over the measure totals of one scenario."""

    scenario: Scenario
    ratios: list[RatioValueHTTP]


class HealthHTTP(BaseHTTPSchema):
    """Liveness payload."""

    status: str = Field(..., examples=["ok"])
    service: str
    environment: str
    facts: int = Field(..., ge=0, description="Facts currently held in the store.")


__all__ = [
    "DimensionRollupHTTP",
    "FactImportHTTP",
    "FactImportRequest",
    "FactIn",
    "FactsAcceptedHTTP",
    "FactsClearedHTTP",
    "FactsIn",
    "ForecastHTTP",
    "HealthHTTP",
    "KpiHTTP",
    "KpiSummaryHTTP",
    "RatioEvaluationHTTP",
    "RatioValueHTTP",
    "RollupBucketHTTP",
    "ScenarioAdjustmentHTTP",
    "ScenarioRequest",
    "ScenarioSimulationHTTP",
    "SeriesPointHTTP",
    "VarianceRowHTTP",
    "VarianceTableHTTP",
]
