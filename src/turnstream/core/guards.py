"""Type guards and coercion helpers for untrusted provider payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeGuard

from .response import CanonicalResponse, Part


def coerce_mapping(value: Any) -> Mapping[str, Any] | None:
    """Return a mapping view of ``value`` or ``None`` when it has none.

    Accepts plain mappings, pydantic models and simple attribute objects so
    chunks from different SDKs can be validated the same way.
    """

    if isinstance(value, Mapping):
        return value

    if hasattr(value, "model_dump"):
        dumped = value.model_dump(by_alias=True)
        if isinstance(dumped, Mapping):
            return dumped

    if isinstance(value, (str, bytes, bytearray, int, float, bool)) or value is None:
        return None

    if hasattr(value, "__dict__"):
        return vars(value)

    return None


def is_text_part(part: Any) -> TypeGuard[Part]:
    return isinstance(part, Part) and part.text is not None


def is_function_call_part(part: Any) -> TypeGuard[Part]:
    return isinstance(part, Part) and part.function_call is not None


def has_function_calls(response: CanonicalResponse) -> bool:
    """Whether the response requests at least one function call."""

    return bool(response.function_calls)


def get_nested(mapping: Any, *keys: str) -> Any:
    """Walk nested mappings, returning ``None`` at the first missing key."""

    current = mapping
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current
