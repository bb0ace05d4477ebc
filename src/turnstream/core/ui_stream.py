"""UI message stream writer interface and an SSE frame implementation."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, runtime_checkable

from .response import thaw_json

LOGGER = logging.getLogger(__name__)

DONE_FRAME = "data: [DONE]\n\n"


@runtime_checkable
class UIMessageStreamWriter(Protocol):
    """Sink receiving incremental UI events in call order."""

    async def write_text_delta(self, delta: str) -> None:
        """Append assistant text to the message being rendered."""

    async def write_tool_call(self, tool_call_id: str, tool_name: str, input: Any) -> None:
        """Announce a tool invocation with its complete input."""

    async def write_error(self, message: str) -> None:
        """Surface an error state to the user."""

    async def finish(self, reason: str | None = None) -> None:
        """Close the message stream."""


def format_sse(payload: dict[str, Any]) -> str:
    """Format a payload as a single server-sent event frame."""

    body = json.dumps(thaw_json(payload), separators=(",", ":"), default=str)
    return f"data: {body}\n\n"


class SSEMessageStreamWriter:
    """Emit AI SDK UI message stream frames through an async ``write`` callable.

    Text deltas are grouped into text blocks that are opened lazily and closed
    before any non-text event. Frames are serialized by a lock so they reach
    the transport in call order. Transport failures are logged and dropped:
    the UI channel is best-effort and must never abort the model stream.
    """

    def __init__(
        self,
        write: Callable[[str], Awaitable[None]],
        *,
        message_id: str | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._write = write
        self._id_factory = id_factory or _default_id
        self.message_id = message_id or self._id_factory()
        self._lock = asyncio.Lock()
        self._text_id: str | None = None
        self._started = False
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    async def start(self) -> None:
        """Open the message and its first step. Subsequent calls are no-ops.

        Calling it is optional: the first frame written opens the message.
        """

        async with self._lock:
            if self._finished:
                return
            await self._open()

    async def write_text_delta(self, delta: str) -> None:
        async with self._lock:
            if self._finished:
                return
            await self._open()
            if self._text_id is None:
                self._text_id = self._id_factory()
                await self._emit({"type": "text-start", "id": self._text_id})
            await self._emit({"type": "text-delta", "id": self._text_id, "delta": delta})

    async def write_tool_call(self, tool_call_id: str, tool_name: str, input: Any) -> None:
        async with self._lock:
            if self._finished:
                return
            await self._open()
            await self._close_text()
            await self._emit(
                {
                    "type": "tool-input-available",
                    "toolCallId": tool_call_id,
                    "toolName": tool_name,
                    "input": input,
                }
            )

    async def write_tool_result(self, tool_call_id: str, output: Any) -> None:
        """Report the output of a previously announced tool call."""

        async with self._lock:
            if self._finished:
                return
            await self._open()
            await self._close_text()
            await self._emit(
                {"type": "tool-output-available", "toolCallId": tool_call_id, "output": output}
            )

    async def write_error(self, message: str) -> None:
        async with self._lock:
            if self._finished:
                return
            await self._open()
            await self._close_text()
            await self._emit({"type": "error", "errorText": message})

    async def finish_step(self) -> None:
        """Close the current step and open the next one."""

        async with self._lock:
            if self._finished:
                return
            await self._open()
            await self._close_text()
            await self._emit({"type": "finish-step"})
            await self._emit({"type": "start-step"})

    async def finish(self, reason: str | None = None) -> None:
        async with self._lock:
            if self._finished:
                return
            self._finished = True
            await self._open()
            await self._close_text()
            await self._emit({"type": "finish-step"})
            payload: dict[str, Any] = {"type": "finish"}
            if reason is not None:
                payload["finishReason"] = reason
            await self._emit(payload)
            await self._send(DONE_FRAME)

    async def _open(self) -> None:
        if self._started:
            return
        self._started = True
        await self._emit({"type": "start", "messageId": self.message_id})
        await self._emit({"type": "start-step"})

    async def _close_text(self) -> None:
        if self._text_id is None:
            return
        text_id = self._text_id
        self._text_id = None
        await self._emit({"type": "text-end", "id": text_id})

    async def _emit(self, payload: dict[str, Any]) -> None:
        await self._send(format_sse(payload))

    async def _send(self, frame: str) -> None:
        try:
            await self._write(frame)
        except Exception:
            LOGGER.warning("dropping UI stream frame message_id=%s", self.message_id, exc_info=True)


def _default_id() -> str:
    return f"msg_{uuid.uuid4().hex}"


__all__ = [
    "DONE_FRAME",
    "SSEMessageStreamWriter",
    "UIMessageStreamWriter",
    "format_sse",
]
