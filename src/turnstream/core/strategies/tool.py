"""Mapping between vendor tool-call records and canonical function calls."""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from ..adapters.base import ProviderAdapter
from ..guards import coerce_mapping
from ..response import FunctionCall, Part, thaw_json


@dataclass(frozen=True, slots=True)
class VendorToolCall:
    """Tool call in the provider-neutral ``{toolCallId, toolName, input}`` shape."""

    tool_call_id: str
    tool_name: str
    input: Any = None

    @classmethod
    def coerce(cls, value: Any) -> "VendorToolCall":
        """Accept records, pydantic chunks or wire mappings."""

        if isinstance(value, VendorToolCall):
            return value

        mapping = coerce_mapping(value)
        if mapping is None:
            msg = "tool call records must be mappings"
            raise TypeError(msg)

        call_id = mapping.get("toolCallId", mapping.get("tool_call_id"))
        name = mapping.get("toolName", mapping.get("tool_name"))
        return cls(
            tool_call_id="" if call_id is None else str(call_id),
            tool_name="" if name is None else str(name),
            input=mapping.get("input"),
        )


class ToolConversionStrategy:
    """Pure, order-preserving conversion of tool calls in both directions."""

    def to_canonical(self, vendor_calls: Iterable[Any]) -> tuple[FunctionCall, ...]:
        """Convert vendor tool calls into canonical function calls, one to one."""

        converted: list[FunctionCall] = []
        for item in vendor_calls:
            call = VendorToolCall.coerce(item)
            converted.append(
                FunctionCall(
                    id=call.tool_call_id,
                    name=call.tool_name,
                    args=_coerce_arguments(call.input),
                )
            )
        return tuple(converted)

    def from_canonical(
        self,
        calls: Iterable[Part | FunctionCall],
        *,
        adapter: ProviderAdapter | None = None,
    ) -> list[dict[str, Any]]:
        """Convert canonical function calls back into vendor tool-call parts.

        Provider options derived from part metadata are attached to the first
        call only, mirroring where the metadata was captured.
        """

        converted: list[dict[str, Any]] = []
        is_first = True
        for item in calls:
            metadata = None
            if isinstance(item, Part):
                if item.function_call is None:
                    continue
                call = item.function_call
                metadata = item.provider_metadata
            elif isinstance(item, FunctionCall):
                call = item
            else:
                msg = "expected Part or FunctionCall instances"
                raise TypeError(msg)

            payload: dict[str, Any] = {
                "type": "tool-call",
                "toolCallId": call.id or _generate_tool_call_id(),
                "toolName": call.name or "unknown",
                "input": thaw_json(call.args),
            }
            if is_first and adapter is not None:
                options = adapter.get_tool_call_provider_options(metadata)
                if options:
                    payload["providerOptions"] = thaw_json(options)
            is_first = False
            converted.append(payload)

        return converted


def _coerce_arguments(raw: Any) -> Mapping[str, Any]:
    if raw is None:
        return {}

    if isinstance(raw, Mapping):
        return raw

    if isinstance(raw, str):
        try:
            parsed = json.loads(raw or "{}")
        except json.JSONDecodeError:
            return {"value": raw}
        if isinstance(parsed, Mapping):
            return parsed
        return {"value": raw}

    return {"value": raw}


def _generate_tool_call_id() -> str:
    return f"call_{uuid.uuid4().hex}"
