# src/prima_fpa/adapters/schemas/http/__init__.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""HTTP Schemas package (Adapters Layer).

Purpose:
    Public, adapter-facing HTTP schema surface. Re-exports the canonical
    envelopes and the FP&A resource schemas used by routers and presenters.
    BaseHTTPSchema stays internal to this package.

Layer:
    adapters/schemas/http
"""

from __future__ import annotations

from prima_fpa.adapters.schemas.http.envelopes import (
    ErrorEnvelope,
    ErrorObject,
    SuccessEnvelope,
)
from prima_fpa.adapters.schemas.http.fpa_schemas import (
    DimensionRollupHTTP,
    FactImportHTTP,
    FactImportRequest,
    FactIn,
    FactsAcceptedHTTP,
    FactsClearedHTTP,
    FactsIn,
    ForecastHTTP,
    HealthHTTP,
    KpiHTTP,
    KpiSummaryHTTP,
    RatioEvaluationHTTP,
    RatioValueHTTP,
    RollupBucketHTTP,
    ScenarioAdjustmentHTTP,
    ScenarioRequest,
    ScenarioSimulationHTTP,
    SeriesPointHTTP,
    VarianceRowHTTP,
    VarianceTableHTTP,
)

__all__ = [
    # Envelopes
    "ErrorObject",
    "ErrorEnvelope",
    "SuccessEnvelope",
    # Requests
    "FactIn",
    "FactsIn",
    "FactImportRequest",
    "ScenarioRequest",
    # Responses
    "DimensionRollupHTTP",
    "FactImportHTTP",
    "FactsAcceptedHTTP",
    "FactsClearedHTTP",
    "ForecastHTTP",
    "HealthHTTP",
    "KpiHTTP",
    "KpiSummaryHTTP",
    "RatioEvaluationHTTP",
    "RatioValueHTTP",
    "RollupBucketHTTP",
    "ScenarioAdjustmentHTTP",
    "ScenarioSimulationHTTP",
    "SeriesPointHTTP",
    "VarianceRowHTTP",
    "VarianceTableHTTP",
]
