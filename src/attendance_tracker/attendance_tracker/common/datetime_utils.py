from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse an ISO-8601 date or datetime string into a calendar day.

    Any time-of-day part is discarded, so ``2024-01-01T15:30:00Z`` and
    ``2024-01-01`` name the same day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = (value or "").strip() if isinstance(value, str) else ""
    if not raw:
        raise ValidationError("Invalid date format")

    try:
        if len(raw) == 10:
            return datetime.strptime(raw, "%Y-%m-%d").date()
        if len(raw) < 11 or raw[10] not in "T ":
            raise ValueError(raw)
        # The calendar day is the one written in the string, not its UTC day.
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError("Invalid date format")


def to_calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
