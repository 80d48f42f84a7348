"""Utilities for working with monthly reporting periods."""

from __future__ import annotations

import math
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T")


def parse_month(key: str) -> Tuple[int, int]:
    """Split a ``"YYYY-MM"`` key into ``(year, month)``."""

    year, month = key.split("-")
    return int(year), int(month)


def month_span(earliest: str, latest: str) -> int:
    """Return the inclusive number of calendar months between two keys."""

    earliest_year, earliest_month = parse_month(earliest)
    latest_year, latest_month = parse_month(latest)
    return (latest_year - earliest_year) * 12 + (latest_month - earliest_month) + 1


def trailing(rows: Sequence[T], months: int) -> Sequence[T]:
    """Return the last ``months`` entries of a month-ordered sequence."""

    if months < 1:
        raise ValueError(f"months must be at least 1, got {months}")
    return rows[-months:]


def round_half_away(value: float, places: int = 2) -> float:
    factor = 10 ** places
    return math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor


def round_cents(value: float) -> float:
    """Round a monetary value to the cent, halves away from zero."""

    return round_half_away(value, 2)
