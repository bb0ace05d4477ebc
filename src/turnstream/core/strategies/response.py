"""Conversion of completed and streamed provider output into canonical responses.

Two entry points are exposed by :class:`ResponseConversionStrategy`:

``convert_completed``
    Pure conversion of an already finished result. Invalid input never raises;
    it produces a minimal empty response instead.

``stream_to_canonical``
    Async generator consuming provider chunks one at a time. Each text delta is
    yielded immediately as its own response and mirrored to the optional UI
    writer. Tool calls and the finish reason are accumulated and published in
    a single final response once the source is exhausted. An ``error`` chunk is
    the only input that aborts iteration.
"""

from __future__ import annotations

import logging
import math
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, NoReturn

from ...config import NormalizerConfig
from ..adapters.base import ProviderAdapter
from ..errors import ProviderStreamError
from ..guards import coerce_mapping
from ..response import (
    CanonicalResponse,
    Candidate,
    Content,
    FinishReason,
    FunctionCall,
    Part,
    ProviderMetadata,
    UsageMetadata,
    empty_response,
    text_response,
)
from ..schema import (
    FinishChunk,
    TextDeltaChunk,
    ToolCallChunk,
    Usage,
    parse_completed_result,
    parse_stream_chunk,
    parse_usage,
)
from ..ui_stream import UIMessageStreamWriter
from .tool import ToolConversionStrategy, VendorToolCall

LOGGER = logging.getLogger(__name__)

UsageAccessor = Callable[[], Awaitable[Any]]
ErrorReporter = Callable[[BaseException], None]

_FINISH_REASONS: Mapping[str, FinishReason] = MappingProxyType(
    {
        "stop": FinishReason.STOP,
        "tool-calls": FinishReason.STOP,
        "length": FinishReason.MAX_TOKENS,
        "max-tokens": FinishReason.MAX_TOKENS,
        "content-filter": FinishReason.SAFETY,
        "error": FinishReason.OTHER,
        "other": FinishReason.OTHER,
        "unknown": FinishReason.OTHER,
    }
)


def map_finish_reason(reason: str | None) -> FinishReason:
    """Map a provider-neutral finish reason onto the canonical enum.

    Absent or unrecognized values count as a normal stop.
    """

    if not isinstance(reason, str):
        return FinishReason.STOP
    return _FINISH_REASONS.get(reason, FinishReason.STOP)


def convert_usage(usage: Usage | None) -> UsageMetadata | None:
    if usage is None:
        return None
    return UsageMetadata(
        prompt_token_count=usage.input_tokens or 0,
        candidates_token_count=usage.output_tokens or 0,
        total_token_count=usage.total_tokens or 0,
    )


def estimate_usage(text: str, *, chars_per_token: int = 4) -> Usage:
    """Coarse usage estimate for streams whose provider reports none."""

    estimated = math.ceil(len(text) / chars_per_token)
    return Usage(input_tokens=0, output_tokens=estimated, total_tokens=estimated)


@dataclass(slots=True)
class StreamAccumulator:
    """State collected over one stream conversion."""

    text: list[str] = field(default_factory=list)
    tool_calls: dict[str, VendorToolCall] = field(default_factory=dict)
    finish_reason: str | None = None

    @property
    def accumulated_text(self) -> str:
        return "".join(self.text)

    def upsert_tool_call(self, call: VendorToolCall) -> None:
        self.tool_calls[call.tool_call_id] = call


class ResponseConversionStrategy:
    """Normalize provider output into :class:`CanonicalResponse` objects."""

    def __init__(
        self,
        tool_strategy: ToolConversionStrategy,
        adapter: ProviderAdapter,
        *,
        config: NormalizerConfig | None = None,
        error_reporter: ErrorReporter | None = None,
    ) -> None:
        self._tool_strategy = tool_strategy
        self._adapter = adapter
        self._config = config or NormalizerConfig()
        self._error_reporter = error_reporter

    @property
    def adapter(self) -> ProviderAdapter:
        return self._adapter

    def convert_completed(self, result: Any) -> CanonicalResponse:
        """Convert a finished provider result into a canonical response."""

        validated = parse_completed_result(result)
        if validated is None:
            LOGGER.warning("completed result failed validation; returning empty response")
            return empty_response(role=self._config.response_role)

        parts: list[Part] = []
        if validated.text:
            parts.append(Part(text=validated.text))

        function_calls: tuple[FunctionCall, ...] = ()
        if validated.tool_calls:
            function_calls = self._tool_strategy.to_canonical(validated.tool_calls)
            parts.extend(Part(function_call=call) for call in function_calls)

        candidate = Candidate(
            content=Content(role=self._config.response_role, parts=tuple(parts)),
            index=0,
            finish_reason=map_finish_reason(validated.finish_reason),
        )
        return CanonicalResponse(
            candidates=(candidate,),
            function_calls=function_calls or None,
            usage_metadata=convert_usage(validated.usage),
        )

    async def stream_to_canonical(
        self,
        stream: AsyncIterable[Any],
        get_usage: UsageAccessor,
        ui_stream: UIMessageStreamWriter | None = None,
    ) -> AsyncIterator[CanonicalResponse]:
        """Convert a provider chunk stream into canonical responses.

        Raises :class:`ProviderStreamError` after notifying ``ui_stream`` when
        the provider emits an error chunk. Exceptions raised by ``stream``
        itself propagate unchanged.
        """

        accumulator = StreamAccumulator()

        async for raw_chunk in stream:
            self._adapter.process_stream_chunk(raw_chunk)

            mapping = coerce_mapping(raw_chunk)
            if mapping is not None and mapping.get("type") == "error":
                await self._handle_error_chunk(mapping, ui_stream)

            chunk = parse_stream_chunk(raw_chunk)
            if chunk is None:
                LOGGER.debug("skipping malformed chunk")
                continue

            if isinstance(chunk, TextDeltaChunk):
                yield await self._handle_text_delta(chunk, accumulator, ui_stream)
            elif isinstance(chunk, ToolCallChunk):
                await self._handle_tool_call(chunk, accumulator, ui_stream)
            elif isinstance(chunk, FinishChunk):
                accumulator.finish_reason = chunk.finish_reason
            else:
                LOGGER.debug("ignoring chunk type=%s", chunk.type)

        usage = await self._resolve_usage(get_usage, accumulator)
        final = self._build_final_response(accumulator, usage, self._adapter.get_response_metadata())
        if final is not None:
            yield final

    async def _handle_error_chunk(
        self,
        chunk: Mapping[str, Any],
        ui_stream: UIMessageStreamWriter | None,
    ) -> NoReturn:
        message = _extract_error_message(chunk.get("error"), self._config.default_error_message)
        error = ProviderStreamError(message)

        LOGGER.error("provider reported an error: %s", message)
        if self._error_reporter is not None:
            try:
                self._error_reporter(error)
            except Exception:
                LOGGER.exception("error reporter failed")

        if ui_stream is not None:
            await ui_stream.write_error(message)
            await ui_stream.finish("error")
        raise error

    async def _handle_text_delta(
        self,
        chunk: TextDeltaChunk,
        accumulator: StreamAccumulator,
        ui_stream: UIMessageStreamWriter | None,
    ) -> CanonicalResponse:
        delta = chunk.text
        accumulator.text.append(delta)
        if ui_stream is not None:
            await ui_stream.write_text_delta(delta)
        return text_response(delta, role=self._config.response_role)

    async def _handle_tool_call(
        self,
        chunk: ToolCallChunk,
        accumulator: StreamAccumulator,
        ui_stream: UIMessageStreamWriter | None,
    ) -> None:
        if ui_stream is not None:
            await ui_stream.write_tool_call(chunk.tool_call_id, chunk.tool_name, chunk.input)
        accumulator.upsert_tool_call(
            VendorToolCall(
                tool_call_id=chunk.tool_call_id,
                tool_name=chunk.tool_name,
                input=chunk.input,
            )
        )

    async def _resolve_usage(
        self,
        get_usage: UsageAccessor,
        accumulator: StreamAccumulator,
    ) -> Usage | None:
        try:
            raw_usage = await get_usage()
        except Exception:
            LOGGER.debug("usage accessor failed; estimating from text", exc_info=True)
            return self._estimate(accumulator)

        if raw_usage is None:
            return None

        usage = parse_usage(raw_usage)
        if usage is None:
            LOGGER.debug("usage accessor returned an unreadable value; estimating from text")
            return self._estimate(accumulator)
        return usage

    def _estimate(self, accumulator: StreamAccumulator) -> Usage:
        return estimate_usage(
            accumulator.accumulated_text,
            chars_per_token=self._config.chars_per_token,
        )

    def _build_final_response(
        self,
        accumulator: StreamAccumulator,
        usage: Usage | None,
        metadata: ProviderMetadata | None,
    ) -> CanonicalResponse | None:
        if not accumulator.tool_calls and not accumulator.finish_reason and usage is None:
            return None

        function_calls = self._tool_strategy.to_canonical(accumulator.tool_calls.values())
        parts: list[Part] = []
        for index, call in enumerate(function_calls):
            if index == 0 and metadata is not None:
                parts.append(Part(function_call=call, provider_metadata=metadata))
            else:
                parts.append(Part(function_call=call))

        LOGGER.info(
            "assembled final response tool_calls=%s finish_reason=%s text_length=%s usage=%s",
            len(function_calls),
            accumulator.finish_reason,
            len(accumulator.accumulated_text),
            usage is not None,
        )

        candidate = Candidate(
            content=Content(
                role=self._config.response_role,
                parts=tuple(parts) if parts else (Part(text=""),),
            ),
            index=0,
            finish_reason=map_finish_reason(accumulator.finish_reason),
        )
        return CanonicalResponse(
            candidates=(candidate,),
            function_calls=function_calls or None,
            usage_metadata=convert_usage(usage),
        )


def _extract_error_message(error: Any, default: str) -> str:
    if isinstance(error, Mapping):
        message = error.get("message")
    elif isinstance(error, BaseException):
        message = str(error)
    elif isinstance(error, str):
        message = error
    else:
        message = getattr(error, "message", None)

    if isinstance(message, str) and message:
        return message
    return default
