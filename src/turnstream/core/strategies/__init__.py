"""Conversion strategies between provider output and canonical responses."""

from __future__ import annotations

from .response import (
    ResponseConversionStrategy,
    StreamAccumulator,
    convert_usage,
    estimate_usage,
    map_finish_reason,
)
from .tool import ToolConversionStrategy, VendorToolCall

__all__ = [
    "ResponseConversionStrategy",
    "StreamAccumulator",
    "ToolConversionStrategy",
    "VendorToolCall",
    "convert_usage",
    "estimate_usage",
    "map_finish_reason",
]
