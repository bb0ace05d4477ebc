"""Helpers for draining and folding streamed canonical responses."""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator, Iterable
from typing import List

from .response import (
    CanonicalResponse,
    Candidate,
    Content,
    FinishReason,
    FunctionCall,
    Part,
    UsageMetadata,
    empty_response,
)


async def collect_responses(responses: AsyncIterator[CanonicalResponse]) -> List[CanonicalResponse]:
    """Collect every response yielded by a stream conversion.

    The iterator is closed even when iteration raises, so an abandoned
    conversion releases its accumulator immediately.
    """

    collected: List[CanonicalResponse] = []
    try:
        async for response in responses:
            collected.append(response)
    finally:
        closer = getattr(responses, "aclose", None)
        if closer is not None and callable(closer):
            result = closer()
            if inspect.isawaitable(result):
                await result
    return collected


def merge_responses(
    responses: Iterable[CanonicalResponse],
    *,
    role: str = "model",
) -> CanonicalResponse:
    """Fold incremental responses into the complete model turn.

    Text parts are concatenated in order into one leading text part. Function
    call parts keep their identity so the merged response still satisfies the
    dual representation. The last finish reason and usage seen win.
    """

    fragments: list[str] = []
    call_parts: list[Part] = []
    function_calls: list[FunctionCall] = []
    finish_reason: FinishReason | None = None
    usage: UsageMetadata | None = None
    seen_any = False

    for response in responses:
        seen_any = True
        candidate = response.candidates[0]
        role = candidate.content.role
        for part in candidate.content.parts:
            if part.function_call is not None:
                call_parts.append(part)
            elif part.text:
                fragments.append(part.text)
        if response.function_calls:
            function_calls.extend(response.function_calls)
        if candidate.finish_reason is not None:
            finish_reason = candidate.finish_reason
        if response.usage_metadata is not None:
            usage = response.usage_metadata

    if not seen_any:
        return empty_response(role=role)

    parts: list[Part] = []
    text = "".join(fragments)
    if text:
        parts.append(Part(text=text))
    parts.extend(call_parts)

    metadata_parts = [part for part in call_parts if part.provider_metadata is not None]
    if len(metadata_parts) > 1:
        # keep the earliest metadata only
        keep = metadata_parts[0]
        parts = [
            part
            if part is keep or part.provider_metadata is None
            else Part(function_call=part.function_call)
            for part in parts
        ]

    candidate = Candidate(
        content=Content(role=role, parts=tuple(parts) if parts else (Part(text=""),)),
        index=0,
        finish_reason=finish_reason,
    )
    return CanonicalResponse(
        candidates=(candidate,),
        function_calls=tuple(function_calls) or None,
        usage_metadata=usage,
    )
