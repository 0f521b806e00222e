from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def utcnow() -> datetime:
    """Current UTC time (timezone-aware).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse ``YYYY-MM-DD`` or a full ISO-8601 timestamp; ``None`` when unparsable."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def require_datetime(value: Any, message: str) -> datetime:
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValidationError(message)
    return parsed


def clock_minutes(value: str) -> int:
    """Minutes since midnight for an ``HH:mm`` string."""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
