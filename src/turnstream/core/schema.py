"""Provider-neutral streaming vocabulary and completed-result schemas."""

from __future__ import annotations

import logging
from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .guards import coerce_mapping

LOGGER = logging.getLogger(__name__)


class _WireModel(BaseModel):
    """Base for wire records: camelCase aliases, extra keys tolerated."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)


class Usage(_WireModel):
    """Token usage in the provider-neutral shape."""

    input_tokens: int | None = Field(None, alias="inputTokens", ge=0)
    output_tokens: int | None = Field(None, alias="outputTokens", ge=0)
    total_tokens: int | None = Field(None, alias="totalTokens", ge=0)


class TextDeltaChunk(_WireModel):
    """Incremental assistant text."""

    type: Literal["text-delta"]
    text: str
    id: str | None = None


class ToolCallChunk(_WireModel):
    """A fully assembled tool invocation."""

    type: Literal["tool-call"]
    tool_call_id: str = Field(..., alias="toolCallId")
    tool_name: str = Field(..., alias="toolName")
    input: Any = None
    provider_metadata: Any = Field(None, alias="providerMetadata")


class FinishChunk(_WireModel):
    """End-of-stream marker carrying the provider finish reason."""

    type: Literal["finish"]
    finish_reason: str | None = Field(None, alias="finishReason")
    total_usage: Usage | None = Field(None, alias="totalUsage")


class ErrorChunk(_WireModel):
    """Upstream-declared failure."""

    type: Literal["error"]
    error: Any = None


class LifecycleChunk(_WireModel):
    """Known vocabulary entries that carry nothing the engine consumes."""

    type: Literal[
        "start",
        "start-step",
        "finish-step",
        "text-start",
        "text-end",
        "reasoning-start",
        "reasoning-delta",
        "reasoning-end",
        "tool-input-start",
        "tool-input-delta",
        "tool-input-end",
        "tool-result",
        "tool-error",
        "source",
        "file",
        "raw",
        "abort",
    ]


StreamChunk = Annotated[
    Union[TextDeltaChunk, ToolCallChunk, FinishChunk, ErrorChunk, LifecycleChunk],
    Field(discriminator="type"),
]


class ToolCallRecord(_WireModel):
    """Tool invocation as reported by a completed result."""

    tool_call_id: str = Field(..., alias="toolCallId")
    tool_name: str = Field(..., alias="toolName")
    input: Any = None


class CompletedResult(_WireModel):
    """A finished, non-streaming provider result."""

    text: str | None = None
    tool_calls: List[ToolCallRecord] | None = Field(None, alias="toolCalls")
    usage: Usage | None = None
    finish_reason: str | None = Field(None, alias="finishReason")


_STREAM_CHUNK_ADAPTER: TypeAdapter[StreamChunk] = TypeAdapter(StreamChunk)


def parse_stream_chunk(raw: Any) -> StreamChunk | None:
    """Validate a raw chunk, returning ``None`` when it does not fit the vocabulary."""

    mapping = coerce_mapping(raw)
    if mapping is None:
        return None
    try:
        return _STREAM_CHUNK_ADAPTER.validate_python(dict(mapping))
    except ValidationError as exc:
        LOGGER.debug("chunk failed validation type=%r errors=%s", mapping.get("type"), exc.error_count())
        return None


def parse_completed_result(raw: Any) -> CompletedResult | None:
    """Validate a completed result, returning ``None`` on failure."""

    mapping = coerce_mapping(raw)
    if mapping is None:
        return None
    try:
        return CompletedResult.model_validate(dict(mapping))
    except ValidationError as exc:
        LOGGER.debug("completed result failed validation errors=%s", exc.error_count())
        return None


def parse_usage(raw: Any) -> Usage | None:
    """Validate a usage record, returning ``None`` on failure."""

    if isinstance(raw, Usage):
        return raw
    mapping = coerce_mapping(raw)
    if mapping is None:
        return None
    try:
        return Usage.model_validate(dict(mapping))
    except ValidationError:
        return None


__all__ = [
    "CompletedResult",
    "ErrorChunk",
    "FinishChunk",
    "LifecycleChunk",
    "StreamChunk",
    "TextDeltaChunk",
    "ToolCallChunk",
    "ToolCallRecord",
    "Usage",
    "parse_completed_result",
    "parse_stream_chunk",
    "parse_usage",
]
