"""Provider adapter interface consulted while converting responses."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..response import ProviderMetadata


class ProviderAdapter(ABC):
    """Per-vendor hooks invoked by the response conversion strategies.

    Implementations may keep state collected from the chunks of one stream,
    so a single instance must never be shared between concurrent streams.
    """

    @abstractmethod
    def process_stream_chunk(self, chunk: Any) -> None:
        """Inspect a raw stream chunk before it is classified."""

    @abstractmethod
    def get_response_metadata(self) -> ProviderMetadata | None:
        """Return metadata to attach to the first function call of the turn."""

    def get_tool_call_provider_options(
        self,
        metadata: ProviderMetadata | None,
    ) -> ProviderMetadata | None:
        """Translate part metadata back into request-side provider options."""

        return None


class DefaultProviderAdapter(ProviderAdapter):
    """Adapter for vendors that need no special handling."""

    def process_stream_chunk(self, chunk: Any) -> None:
        return None

    def get_response_metadata(self) -> ProviderMetadata | None:
        return None
