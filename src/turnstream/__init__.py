"""Streaming response normalization for browser-automation agents.

Provider output arrives either as a completed result or as a stream of
incremental chunks. The package folds both into one canonical model-turn
representation while mirroring streamed events onto a UI message stream.
"""

from __future__ import annotations

import logging

from .config import NormalizerConfig
from .core.adapters import ProviderAdapter, ProviderType, create_provider_adapter
from .core.errors import ProviderStreamError
from .core.replay import collect_responses, merge_responses
from .core.response import CanonicalResponse, FinishReason, FunctionCall, Part
from .core.strategies import ResponseConversionStrategy, ToolConversionStrategy
from .core.ui_stream import SSEMessageStreamWriter, UIMessageStreamWriter

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CanonicalResponse",
    "FinishReason",
    "FunctionCall",
    "NormalizerConfig",
    "Part",
    "ProviderAdapter",
    "ProviderStreamError",
    "ProviderType",
    "ResponseConversionStrategy",
    "SSEMessageStreamWriter",
    "ToolConversionStrategy",
    "UIMessageStreamWriter",
    "collect_responses",
    "create_provider_adapter",
    "merge_responses",
]

__version__ = "0.1.0"
