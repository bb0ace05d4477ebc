"""OpenRouter adapter carrying reasoning details between turns."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ..guards import coerce_mapping, get_nested
from ..response import ProviderMetadata, thaw_json
from .base import ProviderAdapter


class OpenRouterAdapter(ProviderAdapter):
    """Collect ``reasoning_details`` that OpenRouter attaches to chunks.

    Reasoning models routed through OpenRouter expect the details to be echoed
    back with the tool calls of the next request.
    """

    def __init__(self) -> None:
        self._reasoning_details: list[Any] = []

    def process_stream_chunk(self, chunk: Any) -> None:
        mapping = coerce_mapping(chunk)
        if mapping is None:
            return
        details = _details_from(mapping.get("providerMetadata"))
        if details:
            self._reasoning_details.extend(details)

    def get_response_metadata(self) -> ProviderMetadata | None:
        if not self._reasoning_details:
            return None
        return {"openrouter": {"reasoning_details": list(self._reasoning_details)}}

    def get_tool_call_provider_options(
        self,
        metadata: ProviderMetadata | None,
    ) -> ProviderMetadata | None:
        details = _details_from(metadata)
        if not details:
            return None
        return {"openrouter": {"reasoning_details": details}}


def _details_from(metadata: Any) -> list[Any]:
    details = get_nested(metadata, "openrouter", "reasoning_details")
    if not isinstance(details, Sequence) or isinstance(details, (str, bytes, bytearray)):
        return []
    return [thaw_json(item) for item in details]
