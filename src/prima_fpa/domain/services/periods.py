# src/prima_fpa/domain/services/periods.py
# Copyright (c) Prima FP&A.
# SPDX-License-Identifier: MIT
"""Reporting-period helpers.

Purpose:
    Parse and order the period keys carried by fact records. Two key shapes
    are recognised:

        * ``YYYY-MM``  (monthly, e.g. ``2024-03``)
        * ``YYYY-Qn``  (quarterly, e.g. ``2024-Q1``)

Layer:
    domain

Notes:
    - Pure functions, no logging.
    - A quarterly key sorts after the months it contains, so ``2024-03``
      precedes ``2024-Q1`` which precedes ``2024-04``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from prima_fpa.domain.exceptions.fpa import InvalidPeriodError

_MONTHLY_RE = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{1,2})$")
_QUARTERLY_RE = re.compile(r"^(?P<year>\d{4})-Q(?P<quarter>[1-4])$", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Period:
    """Parsed period key.

    Exactly one of ``month`` or ``quarter`` is set.
    """

    year: int
    month: int | None = None
    quarter: int | None = None

    def __post_init__(self) -> None:
        if (self.month is None) == (self.quarter is None):
            raise InvalidPeriodError(
                "period needs exactly one of month or quarter",
                details={"year": self.year, "month": self.month, "quarter": self.quarter},
            )

    @property
    def is_quarterly(self) -> bool:
        """Return True for ``YYYY-Qn`` periods."""
        return self.quarter is not None

    def _month_number(self) -> int:
        if self.month is None:
            raise InvalidPeriodError(
                f"period {self.key} is quarterly and has no month",
                details={"period": self.key},
            )
        return self.month

    @property
    def quarter_of(self) -> int:
        """Return the calendar quarter (1..4) this period falls into."""
        if self.quarter is not None:
            return self.quarter
        return (self._month_number() - 1) // 3 + 1

    @property
    def key(self) -> str:
        """Return the canonical string key."""
        if self.quarter is not None:
            return f"{self.year}-Q{self.quarter}"
        return f"{self.year}-{self.month:02d}"

    def sort_position(self) -> tuple[int, int, int]:
        """Return a tuple usable for chronological ordering."""
        if self.quarter is not None:
            return (self.year, self.quarter * 3, 1)
        return (self.year, self._month_number(), 0)


def parse_period(key: str) -> Period:
    """Parse a period key.

    Args:
        key: ``YYYY-MM`` or ``YYYY-Qn``.

    Returns:
        Parsed :class:`Period`.

    Raises:
        InvalidPeriodError: If ``key`` matches neither shape or the month is
            outside 1..12.
    """
    text = key.strip()
    quarterly = _QUARTERLY_RE.match(text)
    if quarterly:
        return Period(year=int(quarterly["year"]), quarter=int(quarterly["quarter"]))

    monthly = _MONTHLY_RE.match(text)
    if monthly:
        month = int(monthly["month"])
        if 1 <= month <= 12:
            return Period(year=int(monthly["year"]), month=month)

    raise InvalidPeriodError(
        f"period must be YYYY-MM or YYYY-Qn, got {key!r}",
        details={"period": key},
    )


def try_parse_period(key: str) -> Period | None:
    """Return the parsed period or None when ``key`` is not recognised."""
    try:
        return parse_period(key)
    except InvalidPeriodError:
        return None


def sort_periods(keys: Iterable[str]) -> list[str]:
    """Return distinct period keys in chronological order.

    Unrecognised keys sort after recognised ones, lexically among themselves.
    """
    distinct = set(keys)

    def _position(key: str) -> tuple[int, tuple[int, int, int], str]:
        parsed = try_parse_period(key)
        if parsed is None:
            return (1, (0, 0, 0), key)
        return (0, parsed.sort_position(), key)

    return sorted(distinct, key=_position)


def quarter_months(year: int, quarter: int) -> list[str]:
    """Return the monthly keys contained in a quarter.

    Example:
        >>> quarter_months(2024, 4)
        ['2024-10', '2024-11', '2024-12']
    """
    if not 1 <= quarter <= 4:
        raise InvalidPeriodError(
            f"quarter must be between 1 and 4, got {quarter}",
            details={"quarter": quarter},
        )
    first = (quarter - 1) * 3 + 1
    return [f"{year}-{month:02d}" for month in range(first, first + 3)]


def next_periods(last_key: str, count: int) -> list[str]:
    """Return the ``count`` period keys following ``last_key``.

    Monthly keys advance by month, quarterly keys by quarter. Unrecognised
    keys yield ordinal labels (``"+1"``, ``"+2"``, ...).
    """
    if count <= 0:
        return []
    parsed = try_parse_period(last_key)
    if parsed is None:
        return [f"+{step}" for step in range(1, count + 1)]

    keys: list[str] = []
    year = parsed.year
    if parsed.quarter is not None:
        quarter = parsed.quarter
        for _ in range(count):
            quarter += 1
            if quarter > 4:
                quarter = 1
                year += 1
            keys.append(f"{year}-Q{quarter}")
        return keys

    month = parsed._month_number()
    for _ in range(count):
        month += 1
        if month > 12:
            month = 1
            year += 1
        keys.append(f"{year}-{month:02d}")
    return keys


__all__ = [
    "Period",
    "next_periods",
    "parse_period",
    "quarter_months",
    "sort_periods",
    "try_parse_period",
]
