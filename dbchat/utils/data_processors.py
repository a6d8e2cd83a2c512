"""Serialization helpers for query results."""

import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID


def json_default(value: Any) -> Any:
    """
    Convert values json cannot encode natively.

    Args:
        value: Object rejected by the json encoder

    Returns:
        A JSON-compatible representation

    Raises:
        TypeError: If the value has no known representation

    """
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_rows(rows: Any, indent: int | None = 2) -> str:
    """Serialize result rows the way they are shown to the summary model."""
    return json.dumps(rows, indent=indent, default=json_default, ensure_ascii=False)


def truncate_text(text: str, max_chars: int, marker: str) -> tuple[str, bool]:
    """
    Hard-truncate text to a character budget.

    Returns:
        Tuple of (possibly truncated text, whether truncation happened)

    """
    if len(text) <= max_chars:
        return text, False
    return text[:max_chars] + marker, True
