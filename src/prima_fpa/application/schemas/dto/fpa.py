# src/prima_fpa/application/schemas/dto/fpa.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Application DTOs for FP&A analytics.

Synopsis:
    Strict (Pydantic v2) DTOs returned by the analytics and import use cases.
    Adapters map them into HTTP envelopes or CLI tables.

Layer:
    application/schemas/dto
"""

from __future__ import annotations

from pydantic import ConfigDict

from prima_fpa.application.schemas.dto.base import BaseDTO
from prima_fpa.domain.entities.fact_record import FactRecord
from prima_fpa.domain.enums.fpa import (
    Dimension,
    Favorability,
    ForecastMethod,
    Scenario,
    ScenarioLever,
    Trend,
)
from prima_fpa.domain.enums.measure import DisplayFormat, Measure


class FactDTO(BaseDTO):
    """Transport-agnostic fact record."""

    model_config = ConfigDict(extra="forbid")

    period: str
    measure: Measure
    scenario: Scenario
    value: float
    business_unit: str | None = None
    market: str | None = None
    product: str | None = None
    channel: str | None = None
    department: str | None = None

    def to_entity(self) -> FactRecord:
        """Build the domain entity (raises ``ValueError`` on invalid values)."""
        return FactRecord(
            period=self.period,
            measure=self.measure,
            scenario=self.scenario,
            value=self.value,
            business_unit=self.business_unit or None,
            market=self.market or None,
            product=self.product or None,
            channel=self.channel or None,
            department=self.department or None,
        )


class KpiDTO(BaseDTO):
    """KPI rollup for one measure.

    Attributes:
        name: Measure summarized.
        actual: Sum of ACTUAL values.
        budget: Sum of BUDGET values.
        variance: ``actual - budget``.
        percent_variance: Fractional variance (0.05 == 5%).
        trend: Sign of the variance.
        favorability: Classification using the measure's polarity.
        display_format: How the measure renders for humans.
    """

    model_config = ConfigDict(extra="forbid")

    name: Measure
    actual: float
    budget: float
    variance: float
    percent_variance: float
    trend: Trend
    favorability: Favorability
    display_format: DisplayFormat


class KpiSummaryDTO(BaseDTO):
    """KPI records for the filtered fact set, in first-seen measure order."""

    model_config = ConfigDict(extra="forbid")

    items: list[KpiDTO]
    fact_count: int


class RollupBucketDTO(BaseDTO):
    """Scenario totals for one dimension value."""

    model_config = ConfigDict(extra="forbid")

    key: str
    actual: float
    budget: float
    forecast: float


class DimensionRollupDTO(BaseDTO):
    """Scenario totals per value of one dimension."""

    model_config = ConfigDict(extra="forbid")

    dimension: Dimension
    buckets: list[RollupBucketDTO]


class VarianceRowDTO(BaseDTO):
    """One variance-table row (dimension value x measure)."""

    model_config = ConfigDict(extra="forbid")

    entity: str
    dimension_value: str
    measure: Measure
    actual: float
    comparison: float
    absolute_variance: float
    percent_variance: float
    favorability: Favorability


class VarianceTableDTO(BaseDTO):
    """Variance rows sorted by absolute variance magnitude, largest first."""

    model_config = ConfigDict(extra="forbid")

    dimension: Dimension
    comparison: Scenario
    rows: list[VarianceRowDTO]


class SeriesPointDTO(BaseDTO):
    """One labelled value in a time series."""

    model_config = ConfigDict(extra="forbid")

    period: str
    value: float


class ForecastDTO(BaseDTO):
    """Historical series and its projection for one measure.

    Attributes:
        measure: Measure projected.
        scenario: Scenario the history was drawn from.
        method: Extrapolation method.
        horizon: Number of projected periods actually produced.
        history: Chronological historical points.
        forecast: Projected points labelled with the following periods.
    """

    model_config = ConfigDict(extra="forbid")

    measure: Measure
    scenario: Scenario
    method: ForecastMethod
    horizon: int
    history: list[SeriesPointDTO]
    forecast: list[SeriesPointDTO]


class ScenarioAdjustmentDTO(BaseDTO):
    """Base and adjusted totals for one measure."""

    model_config = ConfigDict(extra="forbid")

    measure: Measure
    base_value: float
    adjusted_value: float
    delta: float


class ScenarioSimulationDTO(BaseDTO):
    """What-if simulation over measure totals of one scenario."""

    model_config = ConfigDict(extra="forbid")

    scenario: Scenario
    changes: dict[ScenarioLever, float]
    adjustments: list[ScenarioAdjustmentDTO]


class RatioValueDTO(BaseDTO):
    """Evaluated ratio, or the reason it could not be evaluated."""

    model_config = ConfigDict(extra="forbid")

    code: str
    name: str
    category: str
    formula: str
    display_format: DisplayFormat
    value: float | None = None
    failure_reason: str | None = None
    details: dict[str, str] | None = None


class RatioEvaluationDTO(BaseDTO):
    """Ratios evaluated over the measure totals of one scenario."""

    model_config = ConfigDict(extra="forbid")

    scenario: Scenario
    ratios: list[RatioValueDTO]


class FactImportResultDTO(BaseDTO):
    """Outcome of a fact file import."""

    model_config = ConfigDict(extra="forbid")

    file_name: str
    layout: str
    rows: int
    imported: int
    total_facts: int


__all__ = [
    "DimensionRollupDTO",
    "FactDTO",
    "FactImportResultDTO",
    "ForecastDTO",
    "KpiDTO",
    "KpiSummaryDTO",
    "RatioEvaluationDTO",
    "RatioValueDTO",
    "RollupBucketDTO",
    "ScenarioAdjustmentDTO",
    "ScenarioSimulationDTO",
    "SeriesPointDTO",
    "VarianceRowDTO",
    "VarianceTableDTO",
]
