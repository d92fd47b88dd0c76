# src/prima_fpa/adapters/routers/__init__.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Routers Package Export (Adapters Layer).

Purpose:
    Provide stable, explicit exports for the application router aggregator
    (`api_router`). The FastAPI application imports this name during startup.

Layer:
    adapters/routers
"""

from __future__ import annotations

from .api_router import router as api_router

__all__ = ["api_router"]
