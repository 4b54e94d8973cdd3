"""Dotted path lookup against a data context.

Key lookup only: no expressions, no filters.
A missing key anywhere along the path resolves to None instead of raising,
so directives can probe for optional data.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any


def resolve(context: Mapping[str, Any], path: str | None) -> Any:
    """Resolve a dotted path like 'user.address.city' against context.

    Numeric segments index into lists ('items.0.name').

    Args:
        context: Nested mapping of data
        path: Dot-separated key path

    Returns:
        The resolved value, or None if any segment is missing

    Example:
        >>> resolve({"user": {"name": "Ann"}}, "user.name")
        'Ann'
        >>> resolve({"user": {}}, "user.name.first") is None
        True
    """
    if not path:
        return None

    value: Any = context
    for part in path.split("."):
        value = _step(value, part)
        if value is None:
            return None

    return value


def _step(value: Any, part: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(part)
    if (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes))
        and part.isdecimal()
    ):
        index = int(part)
        return value[index] if index < len(value) else None
    return None


def derive(context: Mapping[str, Any], name: str, value: Any) -> dict[str, Any]:
    """Return a new context with one extra key; the parent is left untouched."""
    derived = dict(context)
    derived[name] = value
    return derived
