"""Helpers for timezone-aware timestamps."""
from datetime import date, datetime, time, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def start_of_day(value: date) -> datetime:
    """Return midnight UTC of ``value``; due dates are compared as this instant."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc)
