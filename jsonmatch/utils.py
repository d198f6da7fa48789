"""Utility functions for jsonmatch."""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

from .models import JSONKind, MISSING


def kind_of(value: Any) -> Optional[JSONKind]:
    """
    Classify a canonical JSON value.

    bool is checked before int since it is an int subclass in Python.
    Returns None for MISSING and for anything that is not a canonical value.
    """
    if value is MISSING:
        return None
    if value is None:
        return JSONKind.NULL
    if isinstance(value, bool):
        return JSONKind.BOOLEAN
    if isinstance(value, int):
        return JSONKind.INTEGER
    if isinstance(value, float):
        return JSONKind.NUMBER
    if isinstance(value, str):
        return JSONKind.STRING
    if isinstance(value, list):
        return JSONKind.ARRAY
    if isinstance(value, dict):
        return JSONKind.OBJECT
    return None


def get_type_name(value: Any) -> str:
    """Get a friendly type name for a value."""
    if value is MISSING:
        return "missing"
    kind = kind_of(value)
    if kind is None:
        return type(value).__name__
    return kind.value


def build_key_path(parts: Iterable[str | int]) -> str:
    """
    Build the display key path for a sequence of object keys and array indices.

    Keys are dot-joined with literal dots escaped, empty keys render as ""
    and indices render as [n].
    """
    result = ""
    for part in parts:
        if isinstance(part, int):
            result += f"[{part}]"
            continue
        if result:
            result += "."
        if "." in part:
            result += part.replace(".", "\\.")
        elif part == "":
            result += '""'
        else:
            result += part
    return result


def render_value(value: Any, max_length: Optional[int] = None) -> str:
    """Render a value as compact JSON for failure messages."""
    if value is MISSING:
        return repr(MISSING)
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        text = repr(value)
    if max_length is not None and len(text) > max_length:
        return text[:max_length] + "..."
    return text


def render_with_count(value: list | dict, max_length: Optional[int] = None) -> str:
    """Render a collection prefixed with its entry count."""
    return f"count: {len(value)} - {render_value(value, max_length)}"
