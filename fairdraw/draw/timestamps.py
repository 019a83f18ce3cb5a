"""Timestamp helpers shared by the engine, verifier and codec."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format ``moment`` as ISO-8601 UTC with milliseconds, e.g. ``2024-05-01T12:00:00.000Z``."""
    moment = _as_utc(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Raises
    ------
    ValueError
        If ``text`` is not a valid ISO-8601 timestamp.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("timestamp must be a non-empty string")
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return _as_utc(datetime.fromisoformat(value))


def timestamp_millis(moment: datetime) -> int:
    """Return milliseconds since the Unix epoch for ``moment``."""
    return (_as_utc(moment) - EPOCH) // timedelta(milliseconds=1)


__all__ = [
    "format_timestamp",
    "parse_timestamp",
    "timestamp_millis",
    "utcnow",
]
