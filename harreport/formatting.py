"""String formatting helpers shared by the report views and the CLI."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Any

UNKNOWN_TIMESTAMP = "unknown"
NOT_AVAILABLE = "N/A"

# Epoch values above this magnitude are milliseconds (JavaScript style).
_EPOCH_MS_THRESHOLD = 1e11


def format_count(n: int | None, separator: str = ",") -> str:
    """Render an integer with thousands grouping: 12345 -> "12,345"."""
    grouped = f"{int(n or 0):,}"
    if separator != ",":
        grouped = grouped.replace(",", separator)
    return grouped


def _parse_instant(instant: Any) -> datetime | None:
    if isinstance(instant, datetime):
        parsed = instant
    elif isinstance(instant, bool) or instant is None:
        return None
    elif isinstance(instant, (int, float)):
        seconds = instant / 1000 if abs(instant) > _EPOCH_MS_THRESHOLD else instant
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(instant, str):
        text = instant.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(instant: Any, tz: tzinfo = timezone.utc) -> str:
    """Render an instant as ``M/D/YYYY, h:MM:SS AM TZ`` in ``tz``.

    Accepts ISO-8601 strings, datetimes and epoch numbers. Anything that
    cannot be read as an instant renders as ``"unknown"``.
    """
    parsed = _parse_instant(instant)
    if parsed is None:
        return UNKNOWN_TIMESTAMP
    try:
        local = parsed.astimezone(tz)
    except (OverflowError, ValueError):
        return UNKNOWN_TIMESTAMP

    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    rendered = (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
    )
    zone = local.tzname()
    return f"{rendered} {zone}" if zone else rendered


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def method_label(endpoint: Any) -> str:
    """Resolve the HTTP method to display for an endpoint or pattern.

    Falls back to the first token of ``url`` ("GET /api/x" -> "GET").
    """
    if endpoint is None:
        return ""
    method = _field(endpoint, "method")
    if isinstance(method, str) and method:
        return method
    url = _field(endpoint, "url")
    if isinstance(url, str) and url:
        return url.split(" ", 1)[0]
    return ""


def format_metric(value: float | int | None, suffix: str = "") -> str:
    """Render an optional metric, ``"N/A"`` when it was not measured.

    Whole floats drop their fraction (120.0 -> "120"); other values are
    rendered as-is, without rounding.
    """
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}{suffix}"
