"""Conversion of input representations into canonical JSON values."""

from __future__ import annotations

import json
import logging
from typing import Any

from .models import MISSING

logger = logging.getLogger(__name__)

_PAYLOAD_ATTRIBUTES = ("payload", "body")


class _Unconvertible(Exception):
    pass


def to_canonical(value: Any) -> Any:
    """
    Convert a value into the canonical JSON form used by the engine.

    Accepts JSON strings or bytes (falling back to a raw string leaf when the
    text is not JSON), dicts with string keys, lists and tuples, primitives,
    and objects carrying a JSON payload (a ``json()`` method, or a
    ``payload``/``body`` attribute).

    Returns MISSING for None and for anything that cannot be converted.
    Conversion problems never raise.
    """
    if value is None or value is MISSING:
        return MISSING
    try:
        return _convert_top_level(value)
    except _Unconvertible as e:
        logger.debug("Treating %s input as missing: %s", type(value).__name__, e)
        return MISSING


def _convert_top_level(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return _parse_text(_decode(value))
    if isinstance(value, str):
        return _parse_text(value)
    if isinstance(value, (bool, int, float, list, tuple, dict)):
        return _convert(value)
    return _unwrap_payload(value)


def _decode(data: bytes | bytearray) -> str:
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise _Unconvertible(f"payload is not UTF-8: {e}")


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def _parse_text(text: str) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text


def _convert(value: Any) -> Any:
    """Recursively convert nested values. None inside a document is JSON null."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (list, tuple)):
        return [_convert(item) for item in value]
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise _Unconvertible(f"object key {key!r} is not a string")
            result[key] = _convert(item)
        return result
    raise _Unconvertible(f"unsupported value of type {type(value).__name__}")


def _unwrap_payload(value: Any) -> Any:
    json_method = getattr(value, "json", None)
    if callable(json_method):
        try:
            payload = json_method()
        except Exception as e:
            raise _Unconvertible(f"json() failed: {e}")
        if payload is None:
            raise _Unconvertible("json() returned no payload")
        return _convert_top_level(payload)

    for attribute in _PAYLOAD_ATTRIBUTES:
        payload = getattr(value, attribute, None)
        if payload is not None:
            return _convert_top_level(payload)

    raise _Unconvertible(f"unsupported input of type {type(value).__name__}")
