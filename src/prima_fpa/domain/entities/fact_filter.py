# src/prima_fpa/domain/entities/fact_filter.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""
Fact Filter

Purpose:
    Immutable selection criteria applied to a fact collection before
    aggregation: an inclusive period range plus allow-lists per dimension.

Layer: domain/entities

Notes:
    - An empty allow-list means "no restriction" for that dimension.
    - Period bounds compare by parsed (year, month) position, so monthly and
      quarterly keys can be mixed in one range.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .base import BaseEntity


@dataclass(frozen=True, slots=True)
class FactFilter(BaseEntity):
    """Selection criteria for fact records."""

    period_from: str | None = None
    period_to: str | None = None
    business_units: frozenset[str] = field(default_factory=frozenset)
    markets: frozenset[str] = field(default_factory=frozenset)
    products: frozenset[str] = field(default_factory=frozenset)
    channels: frozenset[str] = field(default_factory=frozenset)
    departments: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in ("business_units", "markets", "products", "channels", "departments"):
            value = getattr(self, name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, frozenset(value))

    @property
    def is_empty(self) -> bool:
        """Return True when the filter selects every fact."""
        return (
            self.period_from is None
            and self.period_to is None
            and not self.business_units
            and not self.markets
            and not self.products
            and not self.channels
            and not self.departments
        )


__all__ = ["FactFilter"]
