# Security Command Center Inventory MCP Server
# File: timestamps.py
# Version: v1

"""Conversion between ``datetime`` and the API's RFC 3339 timestamps."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from .errors import TimestampConversionError


def to_wire_timestamp(value: Any) -> str:
    """Convert an aware ``datetime`` to ``YYYY-MM-DDTHH:MM:SS[.ffffff]Z``.

    Naive datetimes are rejected; the value must carry its own offset.
    """
    if not isinstance(value, datetime):
        raise TimestampConversionError(
            f"Expected a datetime, got {type(value).__name__}: {value!r}"
        )
    if value.tzinfo is None or value.utcoffset() is None:
        raise TimestampConversionError(
            f"Timestamp {value.isoformat()} has no timezone; pass an aware datetime."
        )

    try:
        utc = value.astimezone(timezone.utc)
    except (OverflowError, ValueError) as exc:
        raise TimestampConversionError(
            f"Timestamp {value.isoformat()} is out of range: {exc}"
        ) from exc

    # strftime does not zero-pad years below 1000 on every platform.
    text = f"{utc.year:04d}-{utc.month:02d}-{utc.day:02d}T{utc:%H:%M:%S}"
    if utc.microsecond:
        text += f".{utc.microsecond:06d}"
    return text + "Z"


def parse_wire_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp (``Z`` or explicit offset) to aware UTC."""
    if not isinstance(text, str) or not text.strip():
        raise TimestampConversionError(f"Invalid timestamp: {text!r}")

    raw = text.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"

    # The API may return nanosecond precision; datetime keeps microseconds.
    if "." in raw:
        head, _, tail = raw.partition(".")
        digits = ""
        while tail and tail[0].isdigit():
            digits, tail = digits + tail[0], tail[1:]
        raw = f"{head}.{digits[:6].ljust(6, '0')}{tail}" if digits else head + tail

    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise TimestampConversionError(f"Invalid timestamp {text!r}: {exc}") from exc

    if parsed.tzinfo is None:
        raise TimestampConversionError(
            f"Timestamp {text!r} has no timezone designator."
        )
    return parsed.astimezone(timezone.utc)
