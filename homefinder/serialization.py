"""Shared serialization utilities for persisted records."""

from dataclasses import fields
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any


def to_dict_fast(obj: Any) -> dict:
    """Convert a flat dataclass without the deep copy done by ``asdict``.

    Parameters
    ----------
    obj : Any
        A dataclass instance with no nested dataclass fields.

    Returns
    -------
    dict
        Serialized dictionary.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    elif isinstance(value, (set, frozenset)):
        return sorted(serialize_value(v) for v in value)
    return value


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix accepted).

    Timestamps without an offset are taken as UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
