"""Canonical model-turn response shared by every conversion path."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

ProviderMetadata = Mapping[str, Any]


class FinishReason(str, Enum):
    """Canonical reasons a model turn ended."""

    STOP = "STOP"
    MAX_TOKENS = "MAX_TOKENS"
    SAFETY = "SAFETY"
    OTHER = "OTHER"


@dataclass(frozen=True, slots=True)
class FunctionCall:
    """Vendor-neutral function invocation requested by the model."""

    id: str
    name: str
    args: Mapping[str, Any]

    def __post_init__(self) -> None:
        if not isinstance(self.id, str):
            msg = "function call id must be a string"
            raise TypeError(msg)
        if not isinstance(self.name, str):
            msg = "function call name must be a string"
            raise TypeError(msg)
        if not isinstance(self.args, Mapping):
            msg = "function call args must be a mapping"
            raise TypeError(msg)
        object.__setattr__(self, "args", freeze_json(dict(self.args)))


@dataclass(frozen=True, slots=True)
class Part:
    """A single content part: either text or a function call."""

    text: str | None = None
    function_call: FunctionCall | None = None
    provider_metadata: ProviderMetadata | None = None

    def __post_init__(self) -> None:
        if (self.text is None) == (self.function_call is None):
            msg = "a part must carry exactly one of text or function_call"
            raise ValueError(msg)
        if self.text is not None and not isinstance(self.text, str):
            msg = "part text must be a string"
            raise TypeError(msg)
        if self.function_call is not None and not isinstance(self.function_call, FunctionCall):
            msg = "part function_call must be a FunctionCall"
            raise TypeError(msg)
        if self.provider_metadata is not None:
            if self.function_call is None:
                msg = "provider metadata may only be attached to function call parts"
                raise ValueError(msg)
            if not isinstance(self.provider_metadata, Mapping):
                msg = "provider metadata must be a mapping"
                raise TypeError(msg)
            object.__setattr__(self, "provider_metadata", freeze_json(dict(self.provider_metadata)))


@dataclass(frozen=True, slots=True)
class Content:
    """Role-tagged sequence of parts."""

    role: str = "model"
    parts: tuple[Part, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.parts, Sequence) or isinstance(self.parts, (str, bytes, bytearray)):
            msg = "content parts must be a sequence of Part instances"
            raise TypeError(msg)
        parts = tuple(self.parts)
        for part in parts:
            if not isinstance(part, Part):
                msg = "content parts must contain Part instances"
                raise TypeError(msg)
        object.__setattr__(self, "parts", parts)


@dataclass(frozen=True, slots=True)
class Candidate:
    """One candidate completion within a response."""

    content: Content
    index: int = 0
    finish_reason: FinishReason | None = None


@dataclass(frozen=True, slots=True)
class UsageMetadata:
    """Token accounting in canonical naming."""

    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0


@dataclass(frozen=True, slots=True)
class CanonicalResponse:
    """Normalized model turn read by downstream consumers.

    When ``function_calls`` is present every entry is the very same object held
    by a function-call part of the first candidate, so consumers may read
    either view.
    """

    candidates: tuple[Candidate, ...]
    function_calls: tuple[FunctionCall, ...] | None = None
    usage_metadata: UsageMetadata | None = None

    def __post_init__(self) -> None:
        candidates = tuple(self.candidates)
        if not candidates:
            msg = "a response must contain at least one candidate"
            raise ValueError(msg)
        object.__setattr__(self, "candidates", candidates)

        parts = candidates[0].content.parts
        tagged = [part for part in parts if part.provider_metadata is not None]
        if len(tagged) > 1:
            msg = "provider metadata may be attached to at most one part"
            raise ValueError(msg)

        if self.function_calls is None:
            return

        calls = tuple(self.function_calls)
        if not calls:
            object.__setattr__(self, "function_calls", None)
            return

        inline = [part.function_call for part in parts if part.function_call is not None]
        for call in calls:
            matches = sum(1 for candidate in inline if candidate is call)
            if matches != 1:
                msg = f"function call {call.id!r} must appear in exactly one content part"
                raise ValueError(msg)
        object.__setattr__(self, "function_calls", calls)

    @property
    def text(self) -> str:
        """Concatenated text parts of the first candidate."""

        return "".join(part.text for part in self.candidates[0].content.parts if part.text is not None)

    @property
    def finish_reason(self) -> FinishReason | None:
        return self.candidates[0].finish_reason

    def to_dict(self) -> dict[str, Any]:
        """Render the response in its camelCase wire form."""

        payload: dict[str, Any] = {
            "candidates": [_candidate_to_dict(candidate) for candidate in self.candidates],
        }
        if self.function_calls:
            payload["functionCalls"] = [_function_call_to_dict(call) for call in self.function_calls]
        if self.usage_metadata is not None:
            payload["usageMetadata"] = {
                "promptTokenCount": self.usage_metadata.prompt_token_count,
                "candidatesTokenCount": self.usage_metadata.candidates_token_count,
                "totalTokenCount": self.usage_metadata.total_token_count,
            }
        return payload


def text_response(text: str, *, role: str = "model") -> CanonicalResponse:
    """Single-candidate response carrying one text part and nothing else."""

    content = Content(role=role, parts=(Part(text=text),))
    return CanonicalResponse(candidates=(Candidate(content=content, index=0),))


def empty_response(*, role: str = "model") -> CanonicalResponse:
    """Minimal well-formed response used when a result cannot be read."""

    content = Content(role=role, parts=(Part(text=""),))
    candidate = Candidate(content=content, index=0, finish_reason=FinishReason.OTHER)
    return CanonicalResponse(candidates=(candidate,))


def _candidate_to_dict(candidate: Candidate) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "content": {
            "role": candidate.content.role,
            "parts": [_part_to_dict(part) for part in candidate.content.parts],
        },
        "index": candidate.index,
    }
    if candidate.finish_reason is not None:
        payload["finishReason"] = candidate.finish_reason.value
    return payload


def _part_to_dict(part: Part) -> dict[str, Any]:
    if part.function_call is None:
        return {"text": part.text}
    payload: dict[str, Any] = {"functionCall": _function_call_to_dict(part.function_call)}
    if part.provider_metadata is not None:
        payload["providerMetadata"] = thaw_json(part.provider_metadata)
    return payload


def _function_call_to_dict(call: FunctionCall) -> dict[str, Any]:
    return {"id": call.id, "name": call.name, "args": thaw_json(call.args)}


def freeze_json(value: Any) -> Any:
    """Recursively convert dicts and lists into read-only equivalents."""

    if isinstance(value, Mapping):
        frozen = {key: freeze_json(inner) for key, inner in value.items()}
        return MappingProxyType(frozen)

    if isinstance(value, list):
        return tuple(freeze_json(inner) for inner in value)

    return value


def thaw_json(value: Any) -> Any:
    """Inverse of :func:`freeze_json`, producing plain dicts and lists."""

    if isinstance(value, Mapping):
        return {key: thaw_json(inner) for key, inner in value.items()}

    if isinstance(value, tuple):
        return [thaw_json(inner) for inner in value]

    return value
