from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import HOURS_QUANTUM


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date.

    Longer ISO strings (``2024-03-01T00:00:00``) are cut to the date part.
    """
    return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1]
    return datetime.fromisoformat(v)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so services can take it as an injectable clock.
    """
    return datetime.now()


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Elapsed hours from ``start`` to ``end`` rounded half-up to 2 places."""
    seconds = Decimal(str((end - start).total_seconds()))
    return (seconds / Decimal(3600)).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def isoformat_or_none(value):
    return value.isoformat() if value is not None else None
