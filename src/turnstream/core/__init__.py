"""Canonical response types, provider vocabulary and conversion machinery."""

from __future__ import annotations

from .errors import ProviderStreamError
from .response import (
    CanonicalResponse,
    Candidate,
    Content,
    FinishReason,
    FunctionCall,
    Part,
    UsageMetadata,
)
from .ui_stream import SSEMessageStreamWriter, UIMessageStreamWriter

__all__ = [
    "CanonicalResponse",
    "Candidate",
    "Content",
    "FinishReason",
    "FunctionCall",
    "Part",
    "ProviderStreamError",
    "SSEMessageStreamWriter",
    "UIMessageStreamWriter",
    "UsageMetadata",
]
