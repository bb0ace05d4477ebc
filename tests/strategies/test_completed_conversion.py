from __future__ import annotations

from types import SimpleNamespace

import pytest

from turnstream.config import NormalizerConfig
from turnstream.core.response import FinishReason, UsageMetadata
from turnstream.core.schema import CompletedResult, Usage
from turnstream.core.strategies.response import convert_usage, estimate_usage, map_finish_reason

from tests.harness import build_strategy


def test_text_and_tool_calls_are_converted_in_order() -> None:
    strategy = build_strategy()
    result = {
        "text": "Opening the page.",
        "toolCalls": [
            {"toolCallId": "c1", "toolName": "navigate", "input": {"url": "https://example.com"}},
            {"toolCallId": "c2", "toolName": "screenshot", "input": None},
        ],
        "usage": {"inputTokens": 12, "outputTokens": 8, "totalTokens": 20},
        "finishReason": "tool-calls",
    }

    response = strategy.convert_completed(result)

    text_part, first, second = response.candidates[0].content.parts
    assert text_part.text == "Opening the page."
    assert first.function_call is response.function_calls[0]
    assert second.function_call is response.function_calls[1]
    assert [call.name for call in response.function_calls] == ["navigate", "screenshot"]
    assert dict(second.function_call.args) == {}
    assert response.finish_reason is FinishReason.STOP
    assert response.usage_metadata == UsageMetadata(12, 8, 20)


def test_text_only_result_has_no_function_calls() -> None:
    response = build_strategy().convert_completed({"text": "done", "finishReason": "stop"})

    assert response.text == "done"
    assert response.function_calls is None
    assert response.usage_metadata is None
    assert response.finish_reason is FinishReason.STOP


def test_empty_result_has_no_parts_and_stops() -> None:
    response = build_strategy().convert_completed({})

    assert response.candidates[0].content.parts == ()
    assert response.finish_reason is FinishReason.STOP
    assert response.function_calls is None


def test_pydantic_result_is_accepted() -> None:
    result = CompletedResult.model_validate({"text": "hi", "finishReason": "length"})

    response = build_strategy().convert_completed(result)

    assert response.text == "hi"
    assert response.finish_reason is FinishReason.MAX_TOKENS


def test_attribute_result_is_accepted() -> None:
    result = SimpleNamespace(text="hi", toolCalls=None, usage=None, finishReason="content-filter")

    response = build_strategy().convert_completed(result)

    assert response.finish_reason is FinishReason.SAFETY


@pytest.mark.parametrize(
    "result",
    [
        None,
        "plain text",
        42,
        {"text": 123},
        {"toolCalls": "not-a-list"},
        {"toolCalls": [{"toolName": "missing-id"}]},
        {"usage": {"inputTokens": -5}},
    ],
)
def test_invalid_results_become_empty_response(result, caplog) -> None:
    strategy = build_strategy(config=NormalizerConfig(response_role="assistant"))

    with caplog.at_level("WARNING", logger="turnstream.core.strategies.response"):
        response = strategy.convert_completed(result)

    [part] = response.candidates[0].content.parts
    assert part.text == ""
    assert response.candidates[0].content.role == "assistant"
    assert response.finish_reason is FinishReason.OTHER
    assert response.function_calls is None
    assert response.usage_metadata is None
    assert "failed validation" in caplog.text


def test_string_tool_input_is_decoded() -> None:
    result = {"toolCalls": [{"toolCallId": "c1", "toolName": "type", "input": '{"text": "hello"}'}]}

    response = build_strategy().convert_completed(result)

    assert dict(response.function_calls[0].args) == {"text": "hello"}


@pytest.mark.parametrize(
    ("reason", "expected"),
    [
        ("stop", FinishReason.STOP),
        ("tool-calls", FinishReason.STOP),
        ("length", FinishReason.MAX_TOKENS),
        ("max-tokens", FinishReason.MAX_TOKENS),
        ("content-filter", FinishReason.SAFETY),
        ("error", FinishReason.OTHER),
        ("other", FinishReason.OTHER),
        ("unknown", FinishReason.OTHER),
        ("something-new", FinishReason.STOP),
        (None, FinishReason.STOP),
        (7, FinishReason.STOP),
    ],
)
def test_map_finish_reason(reason, expected) -> None:
    assert map_finish_reason(reason) is expected


def test_convert_usage_defaults_missing_members() -> None:
    assert convert_usage(None) is None
    assert convert_usage(Usage(inputTokens=2)) == UsageMetadata(2, 0, 0)


@pytest.mark.parametrize(
    ("text", "divisor", "expected"),
    [("", 4, 0), ("a", 4, 1), ("abcd", 4, 1), ("abcde", 4, 2), ("abcdefg", 3, 3)],
)
def test_estimate_usage_rounds_up(text, divisor, expected) -> None:
    usage = estimate_usage(text, chars_per_token=divisor)

    assert usage.input_tokens == 0
    assert usage.output_tokens == expected
    assert usage.total_tokens == expected
