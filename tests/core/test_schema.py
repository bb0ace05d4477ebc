from __future__ import annotations

from types import SimpleNamespace

import pytest

from turnstream.core.schema import (
    CompletedResult,
    ErrorChunk,
    FinishChunk,
    LifecycleChunk,
    TextDeltaChunk,
    ToolCallChunk,
    Usage,
    parse_completed_result,
    parse_stream_chunk,
    parse_usage,
)


def test_text_delta_chunk() -> None:
    chunk = parse_stream_chunk({"type": "text-delta", "id": "t0", "text": "hi"})

    assert isinstance(chunk, TextDeltaChunk)
    assert chunk.text == "hi"


def test_tool_call_chunk_reads_camel_case() -> None:
    chunk = parse_stream_chunk(
        {
            "type": "tool-call",
            "toolCallId": "c1",
            "toolName": "click",
            "input": {"selector": "#a"},
            "providerMetadata": {"google": {"thoughtSignature": "s"}},
            "providerExecuted": False,
        }
    )

    assert isinstance(chunk, ToolCallChunk)
    assert chunk.tool_call_id == "c1"
    assert chunk.tool_name == "click"
    assert chunk.input == {"selector": "#a"}
    assert chunk.provider_metadata == {"google": {"thoughtSignature": "s"}}


def test_finish_chunk_reason_is_optional() -> None:
    with_reason = parse_stream_chunk({"type": "finish", "finishReason": "length"})
    without_reason = parse_stream_chunk({"type": "finish"})

    assert isinstance(with_reason, FinishChunk)
    assert with_reason.finish_reason == "length"
    assert isinstance(without_reason, FinishChunk)
    assert without_reason.finish_reason is None


def test_error_chunk_keeps_payload() -> None:
    chunk = parse_stream_chunk({"type": "error", "error": {"message": "boom"}})

    assert isinstance(chunk, ErrorChunk)
    assert chunk.error == {"message": "boom"}


@pytest.mark.parametrize("kind", ["start", "start-step", "finish-step", "text-end", "reasoning-delta", "tool-input-delta"])
def test_lifecycle_chunks(kind: str) -> None:
    assert isinstance(parse_stream_chunk({"type": kind}), LifecycleChunk)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "text-delta",
        3.5,
        {},
        {"type": "mystery"},
        {"type": "text-delta", "text": None},
        {"type": "tool-call", "toolCallId": "c1"},
    ],
)
def test_unrecognized_chunks_return_none(raw) -> None:
    assert parse_stream_chunk(raw) is None


def test_attribute_objects_are_parsed() -> None:
    chunk = parse_stream_chunk(SimpleNamespace(type="text-delta", text="x"))

    assert isinstance(chunk, TextDeltaChunk)


def test_completed_result_aliases() -> None:
    result = parse_completed_result(
        {
            "text": "ok",
            "toolCalls": [{"toolCallId": "1", "toolName": "n", "input": {}}],
            "usage": {"inputTokens": 1, "outputTokens": 2, "totalTokens": 3},
            "finishReason": "stop",
            "response": {"id": "resp-1"},
        }
    )

    assert isinstance(result, CompletedResult)
    assert result.tool_calls[0].tool_call_id == "1"
    assert result.usage.total_tokens == 3
    assert result.finish_reason == "stop"


def test_completed_result_rejects_bad_shapes() -> None:
    assert parse_completed_result(None) is None
    assert parse_completed_result({"toolCalls": {"toolCallId": "1"}}) is None


def test_parse_usage() -> None:
    usage = Usage(input_tokens=1)

    assert parse_usage(usage) is usage
    assert parse_usage({"inputTokens": 4, "outputTokens": 6}) == Usage(inputTokens=4, outputTokens=6)
    assert parse_usage({"inputTokens": "lots"}) is None
    assert parse_usage({"outputTokens": -1}) is None
    assert parse_usage(12) is None
