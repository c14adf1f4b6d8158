"""Text rendering of sequences, mappings and tuples for log messages."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

RANGE_OUTPUT_LENGTH_LIMIT = 256


def _format_element(value: Any, add_space: bool) -> str:
    prefix = " " if add_space else ""
    if isinstance(value, (str, bytes)):
        text = value.decode() if isinstance(value, bytes) else value
        return f'{prefix}"{text}"'
    if isinstance(value, bool):
        return prefix + ("true" if value else "false")
    if isinstance(value, tuple):
        return prefix + format_tuple(value)
    if isinstance(value, Iterable):
        return prefix + format_range(value)
    return prefix + format(value)


def format_range(values: Iterable[Any]) -> str:
    """Render an iterable as ``{a, b, c}``, strings quoted.

    Mappings are rendered as their ``(key, value)`` pairs. Output stops after
    the element limit with a trailing marker.
    """
    items = values.items() if isinstance(values, Mapping) else values
    parts = ["{"]
    for count, value in enumerate(items, start=1):
        if count > 1:
            parts.append(",")
        parts.append(_format_element(value, count > 1))
        if count > RANGE_OUTPUT_LENGTH_LIMIT:
            parts.append(" ... <other elements>")
            break
    parts.append("}")
    return "".join(parts)


def format_tuple(values: tuple) -> str:
    """Render a tuple as ``(a, b)``, strings quoted."""
    inner = ",".join(
        _format_element(value, index > 0) for index, value in enumerate(values)
    )
    return f"({inner})"