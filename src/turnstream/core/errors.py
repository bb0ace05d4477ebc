"""Custom exception types raised by the normalization engine."""

from __future__ import annotations


class ProviderStreamError(RuntimeError):
    """Raised when the upstream provider declares an error mid-stream."""

    def __init__(self, provider_message: str) -> None:
        self.provider_message = provider_message
        super().__init__(f"LLM Provider Error: {provider_message}")
