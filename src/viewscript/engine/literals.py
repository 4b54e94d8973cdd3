"""Structured literal encoding for component props.

Props travel from a parent template to a child component as attribute
values, so anything that is not a plain string has to survive a round trip
through text. JSON is the wire format.
"""

from __future__ import annotations

import json
from datetime import date, time
from typing import Any


def _fallback(value: Any) -> str:
    # YAML settings decode timestamps to date/datetime objects
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def encode_literal(value: Any) -> str:
    """Encode a value as a structured literal.

    Values JSON has no type for (dates, times, and anything else) are
    encoded as strings.
    """
    return json.dumps(value, ensure_ascii=False, default=_fallback)


def decode_literal(text: str) -> Any:
    """Decode a structured literal.

    Raises:
        ValueError: If text is not a valid literal
    """
    return json.loads(text)


def to_text(value: Any) -> str:
    """Render a value as attribute or text content.

    Strings are kept as-is and dates use ISO format; numbers, booleans and
    collections use their literal form ('3', 'true', '["a", "b"]').
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (date, time)):
        return value.isoformat()
    return encode_literal(value)
