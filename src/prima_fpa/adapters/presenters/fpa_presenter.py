# src/prima_fpa/adapters/presenters/fpa_presenter.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Presenter: FP&A DTOs → HTTP SuccessEnvelope.

Synopsis:
    Renders application-layer analytics DTOs into the HTTP schemas, adding
    the display strings (currency amounts, signed percentages, trend icons,
    badge colors) that the dashboard shows next to each number.

Layer:
    adapters/presenters

Notes:
    - The ``to_*`` methods return bare HTTP schemas and are shared with the
      CLI; ``present_*`` wraps them in a SuccessEnvelope with ETag headers.
    - Variance displays always carry a sign; base values never do.
"""

from __future__ import annotations

from prima_fpa.adapters.presenters.base_presenter import BasePresenter, PresentResult
from prima_fpa.adapters.presenters.formatting import (
    FAVORABILITY_LABELS,
    format_insurance_metric,
    format_percent_variance,
    format_value,
    variance_icon,
)
from prima_fpa.adapters.schemas.http.envelopes import SuccessEnvelope
from prima_fpa.adapters.schemas.http.fpa_schemas import (
    DimensionRollupHTTP,
    FactImportHTTP,
    FactsAcceptedHTTP,
    FactsClearedHTTP,
    ForecastHTTP,
    KpiHTTP,
    KpiSummaryHTTP,
    RatioEvaluationHTTP,
    RatioValueHTTP,
    RollupBucketHTTP,
    ScenarioAdjustmentHTTP,
    ScenarioSimulationHTTP,
    SeriesPointHTTP,
    VarianceRowHTTP,
    VarianceTableHTTP,
)
from prima_fpa.application.schemas.dto.fpa import (
    DimensionRollupDTO,
    FactImportResultDTO,
    ForecastDTO,
    KpiDTO,
    KpiSummaryDTO,
    RatioEvaluationDTO,
    RatioValueDTO,
    ScenarioSimulationDTO,
    SeriesPointDTO,
    VarianceRowDTO,
    VarianceTableDTO,
)
from prima_fpa.domain.services.variance_engine import FAVORABILITY_EPSILON


class FpaPresenter(BasePresenter):
    """Presenter for the FP&A analytics endpoints.

    Args:
        currency: ISO 4217 code used for currency displays.
        epsilon: Neutral band used when choosing variance icons.
    """

    def __init__(self, *, currency: str = "EUR", epsilon: float = FAVORABILITY_EPSILON) -> None:
        self._currency = currency
        self._epsilon = epsilon

    # ------------------------- Schema mapping -------------------------- #

    def to_kpi(self, dto: KpiDTO) -> KpiHTTP:
        """Map one KPI DTO to its card schema."""
        fmt = dto.display_format
        return KpiHTTP(
            name=dto.name,
            actual=dto.actual,
            budget=dto.budget,
            variance=dto.variance,
            percent_variance=dto.percent_variance,
            trend=dto.trend,
            favorability=dto.favorability,
            status=FAVORABILITY_LABELS[dto.favorability],
            display_format=fmt,
            actual_display=format_value(dto.actual, fmt, currency=self._currency),
            budget_display=format_value(dto.budget, fmt, currency=self._currency),
            variance_display=format_value(
                dto.variance, fmt, currency=self._currency, show_sign=True
            ),
            percent_variance_display=format_percent_variance(dto.percent_variance),
            icon=variance_icon(dto.percent_variance, epsilon=self._epsilon),
        )

    def to_kpi_summary(self, dto: KpiSummaryDTO) -> KpiSummaryHTTP:
        return KpiSummaryHTTP(
            items=[self.to_kpi(item) for item in dto.items],
            fact_count=dto.fact_count,
        )

    def to_rollup(self, dto: DimensionRollupDTO) -> DimensionRollupHTTP:
        return DimensionRollupHTTP(
            dimension=dto.dimension,
            buckets=[
                RollupBucketHTTP(key=b.key, actual=b.actual, budget=b.budget, forecast=b.forecast)
                for b in dto.buckets
            ],
        )

    def to_variance_row(self, dto: VarianceRowDTO) -> VarianceRowHTTP:
        """Map one variance row, formatting amounts with the measure's format."""
        return VarianceRowHTTP(
            entity=dto.entity,
            dimension_value=dto.dimension_value,
            measure=dto.measure,
            actual=dto.actual,
            comparison=dto.comparison,
            absolute_variance=dto.absolute_variance,
            percent_variance=dto.percent_variance,
            favorability=dto.favorability,
            status=FAVORABILITY_LABELS[dto.favorability],
            actual_display=format_insurance_metric(
                dto.measure, dto.actual, currency=self._currency
            ),
            comparison_display=format_insurance_metric(
                dto.measure, dto.comparison, currency=self._currency
            ),
            variance_display=format_insurance_metric(
                dto.measure, dto.absolute_variance, True, currency=self._currency
            ),
            percent_variance_display=format_percent_variance(dto.percent_variance),
            icon=variance_icon(dto.percent_variance, epsilon=self._epsilon),
        )

    def to_variance_table(self, dto: VarianceTableDTO) -> VarianceTableHTTP:
        return VarianceTableHTTP(
            dimension=dto.dimension,
            comparison=dto.comparison,
            rows=[self.to_variance_row(r) for r in dto.rows],
        )

    def to_forecast(self, dto: ForecastDTO) -> ForecastHTTP:
        """Map a forecast; non-finite projections display as ``n/a``."""

        def _points(points: list[SeriesPointDTO]) -> list[SeriesPointHTTP]:
            return [
                SeriesPointHTTP(
                    period=p.period,
                    value=p.value,
                    display=format_insurance_metric(dto.measure, p.value, currency=self._currency),
                )
                for p in points
            ]

        return ForecastHTTP(
            measure=dto.measure,
            scenario=dto.scenario,
            method=dto.method,
            horizon=dto.horizon,
            history=_points(dto.history),
            forecast=_points(dto.forecast),
        )

    def to_scenario(self, dto: ScenarioSimulationDTO) -> ScenarioSimulationHTTP:
        return ScenarioSimulationHTTP(
            scenario=dto.scenario,
            changes={lever.value: pct for lever, pct in dto.changes.items()},
            adjustments=[
                ScenarioAdjustmentHTTP(
                    measure=a.measure,
                    base_value=a.base_value,
                    adjusted_value=a.adjusted_value,
                    delta=a.delta,
                    base_display=format_insurance_metric(
                        a.measure, a.base_value, currency=self._currency
                    ),
                    adjusted_display=format_insurance_metric(
                        a.measure, a.adjusted_value, currency=self._currency
                    ),
                    delta_display=format_insurance_metric(
                        a.measure, a.delta, True, currency=self._currency
                    ),
                )
                for a in dto.adjustments
            ],
        )

    def to_ratio(self, dto: RatioValueDTO) -> RatioValueHTTP:
        display = (
            format_value(dto.value, dto.display_format, currency=self._currency)
            if dto.value is not None
            else None
        )
        return RatioValueHTTP(
            code=dto.code,
            name=dto.name,
            category=dto.category,
            formula=dto.formula,
            value=dto.value,
            display=display,
            failure_reason=dto.failure_reason,
            details=dto.details,
        )

    def to_ratios(self, dto: RatioEvaluationDTO) -> RatioEvaluationHTTP:
        return RatioEvaluationHTTP(
            scenario=dto.scenario,
            ratios=[self.to_ratio(r) for r in dto.ratios],
        )

    # ------------------------- Envelopes ------------------------------- #

    def present_kpis(
        self, dto: KpiSummaryDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[KpiSummaryHTTP]]:
        return self.present_success(data=self.to_kpi_summary(dto), trace_id=trace_id)

    def present_rollup(
        self, dto: DimensionRollupDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[DimensionRollupHTTP]]:
        return self.present_success(data=self.to_rollup(dto), trace_id=trace_id)

    def present_variance(
        self, dto: VarianceTableDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[VarianceTableHTTP]]:
        return self.present_success(data=self.to_variance_table(dto), trace_id=trace_id)

    def present_forecast(
        self, dto: ForecastDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[ForecastHTTP]]:
        return self.present_success(data=self.to_forecast(dto), trace_id=trace_id)

    def present_scenario(
        self, dto: ScenarioSimulationDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[ScenarioSimulationHTTP]]:
        return self.present_success(data=self.to_scenario(dto), trace_id=trace_id)

    def present_ratios(
        self, dto: RatioEvaluationDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[RatioEvaluationHTTP]]:
        return self.present_success(data=self.to_ratios(dto), trace_id=trace_id)

    def present_import(
        self, dto: FactImportResultDTO, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[FactImportHTTP]]:
        data = FactImportHTTP(
            file_name=dto.file_name,
            layout=dto.layout,
            rows=dto.rows,
            imported=dto.imported,
            total_facts=dto.total_facts,
        )
        return self.present_success(data=data, trace_id=trace_id)

    def present_facts_accepted(
        self, accepted: int, total_facts: int, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[FactsAcceptedHTTP]]:
        data = FactsAcceptedHTTP(accepted=accepted, total_facts=total_facts)
        return self.present_success(data=data, trace_id=trace_id)

    def present_cleared(
        self, removed: int, *, trace_id: str | None = None
    ) -> PresentResult[SuccessEnvelope[FactsClearedHTTP]]:
        return self.present_success(data=FactsClearedHTTP(removed=removed), trace_id=trace_id)


__all__ = ["FpaPresenter"]
