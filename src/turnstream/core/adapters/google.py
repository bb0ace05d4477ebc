"""Google Gemini adapter preserving thought signatures across turns."""

from __future__ import annotations

import logging
from typing import Any

from ..guards import coerce_mapping, get_nested
from ..response import ProviderMetadata
from .base import ProviderAdapter

LOGGER = logging.getLogger(__name__)


class GoogleAdapter(ProviderAdapter):
    """Capture the Gemini thought signature emitted with tool calls.

    Gemini rejects follow-up requests whose first function call lacks the
    signature it issued, so the signature is surfaced as response metadata and
    replayed as provider options when the history is sent back.
    """

    def __init__(self) -> None:
        self._thought_signature: str | None = None

    def process_stream_chunk(self, chunk: Any) -> None:
        mapping = coerce_mapping(chunk)
        if mapping is None or mapping.get("type") != "tool-call":
            return
        if self._thought_signature is not None:
            return

        signature = _signature_from(mapping.get("providerMetadata"))
        if signature is not None:
            LOGGER.debug("captured thought signature call_id=%s", mapping.get("toolCallId"))
            self._thought_signature = signature

    def get_response_metadata(self) -> ProviderMetadata | None:
        if self._thought_signature is None:
            return None
        return {"google": {"thoughtSignature": self._thought_signature}}

    def get_tool_call_provider_options(
        self,
        metadata: ProviderMetadata | None,
    ) -> ProviderMetadata | None:
        signature = _signature_from(metadata)
        if signature is None:
            return None
        return {"google": {"thoughtSignature": signature}}


def _signature_from(metadata: Any) -> str | None:
    signature = get_nested(metadata, "google", "thoughtSignature")
    if isinstance(signature, str) and signature:
        return signature
    return None
