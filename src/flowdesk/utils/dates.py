"""Timestamp helpers.

Timestamps are stored as ISO-8601 strings and only turned into
``datetime`` objects for date comparisons.
"""

from datetime import UTC, datetime

__all__ = [
    "ensure_date",
    "now_iso",
]


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


def ensure_date(value: str | datetime | None) -> datetime:
    """Coerce a stored timestamp to ``datetime``.

    Missing values fall back to the current time. A trailing ``Z`` is
    accepted for timestamps written by JavaScript clients.
    """
    if value is None or value == "":
        return datetime.now(UTC)
    if isinstance(value, datetime):
        return value
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)

