"""Typed editor events and the channel that carries them."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Union


class SelectionAction(str, Enum):
    CLEAN = "clean"
    INPAINT = "inpaint"


@dataclass(frozen=True)
class SelectionStarted:
    """User started drawing a new selection."""


@dataclass(frozen=True)
class SelectionCommitted:
    """User released a selection tagged with the tool that drew it."""

    action: SelectionAction
    selection: tuple[Any, ...]


@dataclass(frozen=True)
class PromptConfirmed:
    """Prompt entered for a pending inpaint selection (or an existing shape)."""

    prompt: str
    selection: tuple[Any, ...] = ()
    shape_id: str | None = None


@dataclass(frozen=True)
class PromptCancelled:
    error: str | None = None


@dataclass(frozen=True)
class RegenerateRequested:
    """Generate more results with the shape's stored prompt and selection."""

    shape_id: str


EditorEvent = Union[
    SelectionStarted,
    SelectionCommitted,
    PromptConfirmed,
    PromptCancelled,
    RegenerateRequested,
]


class _Closed:
    pass


_CLOSED = _Closed()


class EventChannel:
    """FIFO of editor events; iterate with ``async for`` until closed."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, event: EditorEvent) -> None:
        if self._closed:
            raise RuntimeError("Event channel is closed")
        self._queue.put_nowait(event)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[EditorEvent]:
        while True:
            event = await self._queue.get()
            if event is _CLOSED:
                return
            yield event
