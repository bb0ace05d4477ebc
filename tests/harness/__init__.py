"""Test harness utilities for stream conversion validation."""

from .stream_harness import RecordingAdapter, build_strategy, convert_stream, convert_stream_async

__all__ = [
    "RecordingAdapter",
    "build_strategy",
    "convert_stream",
    "convert_stream_async",
]
