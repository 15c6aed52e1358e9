"""
Session data serialization.

Records are stored as compact UTF-8 JSON objects. Values are validated against
the SessionValue space before encoding, so that decoding reconstructs exactly
what was saved: JSON would otherwise silently turn tuples into lists and
integer keys into strings.
"""

import json
import math
from typing import Any

from .interfaces import SessionData


def check_value(value: Any, path: str = "$") -> None:
    """
    Validate that value round-trips through the codec unchanged.

    Raises:
        TypeError: Unsupported type or non-string mapping key
        ValueError: Non-finite float
    """
    # bool is an int subclass; both are fine
    if value is None or isinstance(value, (str, bool, int)):
        return

    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"non-finite float at {path}")
        return

    if isinstance(value, list):
        for index, item in enumerate(value):
            check_value(item, f"{path}[{index}]")
        return

    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"non-string key {key!r} at {path}")
            check_value(item, f"{path}.{key}")
        return

    raise TypeError(f"unsupported type {type(value).__name__} at {path}")


def encode_session(data: SessionData) -> bytes:
    """
    Serialize session data.

    Raises:
        TypeError, ValueError: Data falls outside the SessionValue space
        RecursionError: Data is cyclic or nested too deeply
    """
    if not isinstance(data, dict):
        raise TypeError(f"session data must be a dict, got {type(data).__name__}")
    check_value(data)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


def decode_session(raw: bytes) -> SessionData:
    """
    Deserialize session data written by encode_session.

    Raises:
        ValueError: Bytes are not a UTF-8 JSON object
        RecursionError: Payload is nested too deeply
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")

    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return data


__all__ = ["check_value", "encode_session", "decode_session"]
