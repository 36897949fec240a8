"""
Timestamp parsing shared by the store (ordering) and the report (display).
"""
from datetime import datetime, timezone
from typing import Any, Optional

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch milliseconds; None when unusable."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def instant_key(value: Any) -> datetime:
    """Sort key for a stored timestamp: aware UTC, unusable values first."""
    dt = parse_timestamp(value)
    if dt is None:
        return _EARLIEST
    if dt.tzinfo is None:
        # naive values are taken as UTC
        return dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError:
        return _EARLIEST if dt.year == 1 else datetime.max.replace(tzinfo=timezone.utc)
