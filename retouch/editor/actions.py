"""Editor actions: route committed selections and prompts to retouch jobs.

The editor publishes typed events on an ``EventChannel``; ``RetouchActions``
consumes them, asks the injected draft factory for image/mask bytes and runs
the matching job through the orchestrator. Each in-flight job owns a
``CancellationToken`` keyed by shape id.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

from retouch.editor.events import (
    EditorEvent,
    EventChannel,
    PromptCancelled,
    PromptConfirmed,
    RegenerateRequested,
    SelectionAction,
    SelectionCommitted,
    SelectionStarted,
)
from retouch.editor.shapes import InpaintState, RetouchShape, ShapeStatus
from retouch.errors import JobCancelled
from retouch.orchestrator import CancellationToken, JobOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraftOptions:
    """How the draft factory should cut the image/mask pair."""

    padding: int = 0
    target_size: tuple[int, int] | None = None
    force_square_canvas: bool = False
    # Existing shapes, so the new result blends with earlier retouches
    retouches: tuple[RetouchShape, ...] = ()


CLEAN_DRAFT = DraftOptions(padding=40)
INPAINT_DRAFT = DraftOptions(padding=0, target_size=(512, 512), force_square_canvas=True)


class DraftFactory(Protocol):
    """Produces (image_bytes, mask_bytes) for a selection."""

    def __call__(self, selection: Sequence[Any], options: DraftOptions) -> Awaitable[tuple[bytes, bytes]]: ...


@dataclass
class ActionCallbacks:
    on_shape_updated: Optional[Callable[[RetouchShape], None]] = None
    on_shape_removed: Optional[Callable[[RetouchShape], None]] = None
    on_error: Optional[Callable[[Optional[RetouchShape], BaseException | str], None]] = None


@dataclass
class _PendingPrompt:
    selection: tuple[Any, ...] = field(default_factory=tuple)


class RetouchActions:
    """Consumes editor events and keeps the resulting shapes."""

    def __init__(
        self,
        orchestrator: JobOrchestrator,
        draft_factory: DraftFactory,
        callbacks: ActionCallbacks | None = None,
        output_count: int = 4,
    ):
        self._orchestrator = orchestrator
        self._draft_factory = draft_factory
        self._callbacks = callbacks or ActionCallbacks()
        self._output_count = output_count
        self._tokens: dict[str, CancellationToken] = {}
        self._tasks: set[asyncio.Task] = set()
        self._pending: _PendingPrompt | None = None
        self.shapes: dict[str, RetouchShape] = {}

    @property
    def awaiting_prompt(self) -> bool:
        return self._pending is not None

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    async def run(self, channel: EventChannel) -> None:
        """Handle events until the channel closes."""
        async for event in channel:
            self.handle(event)

    def handle(self, event: EditorEvent) -> asyncio.Task | None:
        """Dispatch one event. Returns the spawned job task, if any.

        Shapes (and their cancellation tokens) are registered before this
        returns, so ``cancel(shape_id)`` works immediately.
        """
        if isinstance(event, SelectionStarted):
            # A new selection hides any open prompt.
            self._pending = None
            return None

        if isinstance(event, SelectionCommitted):
            if not event.selection:
                return None
            if event.action == SelectionAction.CLEAN:
                return self._start_clean(event.selection)
            self._pending = _PendingPrompt(selection=event.selection)
            return None

        if isinstance(event, PromptConfirmed):
            return self._confirm_prompt(event)

        if isinstance(event, PromptCancelled):
            self._pending = None
            if event.error:
                self._report(None, event.error)
            return None

        if isinstance(event, RegenerateRequested):
            shape = self.shapes.get(event.shape_id)
            if shape is None or shape.inpaint is None or shape.status == ShapeStatus.LOADING:
                return None
            return self._start_inpaint(shape.inpaint.prompt, shape.inpaint.selection, target=shape)

        raise TypeError(f"Unknown editor event: {event!r}")

    def _confirm_prompt(self, event: PromptConfirmed) -> asyncio.Task | None:
        target = self.shapes.get(event.shape_id) if event.shape_id else None
        if target is not None and target.inpaint is not None:
            if target.status == ShapeStatus.LOADING:
                return None
            selection = event.selection or target.inpaint.selection
            return self._start_inpaint(event.prompt, selection, target=target)

        selection = event.selection or (self._pending.selection if self._pending else ())
        self._pending = None
        if not selection:
            return None
        return self._start_inpaint(event.prompt, selection)

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _notify(self, shape: RetouchShape) -> None:
        if self._callbacks.on_shape_updated:
            self._callbacks.on_shape_updated(shape)

    def _report(self, shape: RetouchShape | None, error: BaseException | str) -> None:
        if self._callbacks.on_error:
            self._callbacks.on_error(shape, error)
        else:
            logger.error("Retouch failed%s: %s", f" for shape {shape.id}" if shape else "", error)

    def _retouches(self, exclude: RetouchShape | None = None) -> tuple[RetouchShape, ...]:
        return tuple(s for s in self.shapes.values() if exclude is None or s.id != exclude.id)

    def _start_clean(self, selection: tuple[Any, ...]) -> asyncio.Task:
        options = replace(CLEAN_DRAFT, retouches=self._retouches())
        shape = RetouchShape()
        self.shapes[shape.id] = shape
        token = self._tokens[shape.id] = CancellationToken()
        self._notify(shape)
        return self._spawn(self._run_clean(shape, token, selection, options))

    async def _run_clean(
        self,
        shape: RetouchShape,
        token: CancellationToken,
        selection: tuple[Any, ...],
        options: DraftOptions,
    ) -> None:
        try:
            image, mask = await self._draft_factory(selection, options)
            artifact = await self._orchestrator.cleanup(image, mask, token=token)
        except JobCancelled:
            self._remove(shape)
            return
        except Exception as e:
            self._fail(shape, e)
            return
        finally:
            self._tokens.pop(shape.id, None)

        shape.background_image = artifact
        shape.status = ShapeStatus.READY
        self._notify(shape)

    def _start_inpaint(
        self,
        prompt: str,
        selection: tuple[Any, ...],
        target: RetouchShape | None = None,
    ) -> asyncio.Task:
        options = replace(INPAINT_DRAFT, retouches=self._retouches(exclude=target))
        if target is None:
            shape = RetouchShape(inpaint=InpaintState(prompt=prompt, selection=tuple(selection)))
            self.shapes[shape.id] = shape
        else:
            shape = target
            shape.inpaint.prompt = prompt
            shape.inpaint.selection = tuple(selection)
            shape.status = ShapeStatus.LOADING
        token = self._tokens[shape.id] = CancellationToken()
        self._notify(shape)
        return self._spawn(
            self._run_inpaint(shape, token, prompt, selection, options, is_new=target is None)
        )

    async def _run_inpaint(
        self,
        shape: RetouchShape,
        token: CancellationToken,
        prompt: str,
        selection: tuple[Any, ...],
        options: DraftOptions,
        is_new: bool,
    ) -> None:
        try:
            image, mask = await self._draft_factory(selection, options)
            results = await self._orchestrator.inpaint(
                image, mask, prompt, output_count=self._output_count, token=token
            )
            shape.add_results(results)
        except JobCancelled:
            if is_new:
                self._remove(shape)
            else:
                shape.status = ShapeStatus.READY
                self._notify(shape)
            return
        except Exception as e:
            self._fail(shape, e)
            return
        finally:
            self._tokens.pop(shape.id, None)

        shape.status = ShapeStatus.READY
        self._notify(shape)

    def _fail(self, shape: RetouchShape, error: BaseException) -> None:
        shape.status = ShapeStatus.ERROR
        self._notify(shape)
        self._report(shape, error)

    def _remove(self, shape: RetouchShape) -> None:
        if self.shapes.pop(shape.id, None) is not None and self._callbacks.on_shape_removed:
            self._callbacks.on_shape_removed(shape)

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self, shape_id: str, reason: str | None = None) -> bool:
        token = self._tokens.get(shape_id)
        return token.cancel(reason) if token else False

    async def wait_idle(self) -> None:
        """Wait for all running jobs to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        for token in list(self._tokens.values()):
            token.cancel("Editor closed")
        await self.wait_idle()
