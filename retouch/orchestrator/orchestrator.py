"""Job orchestrator: turns the gateway's create + poll pair into one awaitable result."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Protocol

from retouch.jobs.models import Artifact, JobHandle, JobKind, JobSnapshot
from retouch.orchestrator.cancellation import CancellationToken
from retouch.orchestrator.config import OrchestratorCallbacks, OrchestratorConfig
from retouch.orchestrator.session import PollSession

logger = logging.getLogger(__name__)


class JobGatewayLike(Protocol):
    """What the orchestrator needs from a gateway (in-process or over HTTP)."""

    async def submit_cleanup_job(self, image: bytes, mask: bytes) -> Artifact: ...

    async def submit_inpaint_job(
        self, image: bytes, mask: bytes, prompt: str | None, desired_output_count: int = 1
    ) -> JobHandle: ...

    async def poll_inpaint_job(self, job_id: str) -> JobSnapshot: ...


def _new_job_id() -> str:
    return f"clean_{uuid.uuid4().hex[:16]}"


class JobOrchestrator:
    """Submits jobs and drives each to a single settled result.

    Holds no per-job state: every call gets its own ``PollSession``, so
    concurrent jobs never share timers or attempt counters.
    """

    def __init__(
        self,
        gateway: JobGatewayLike,
        config: OrchestratorConfig | None = None,
        callbacks: OrchestratorCallbacks | None = None,
    ):
        self._gateway = gateway
        self.config = config or OrchestratorConfig()
        self.callbacks = callbacks or OrchestratorCallbacks()

    # ------------------------------------------------------------------
    # Asynchronous path (inpaint)
    # ------------------------------------------------------------------

    async def submit_inpaint(
        self,
        image: bytes,
        mask: bytes,
        prompt: str | None,
        *,
        output_count: int | None = None,
        token: CancellationToken | None = None,
    ) -> PollSession:
        """Create the remote job and start polling; returns the live session.

        A submission failure settles the session immediately with that error.
        """
        session = PollSession(self.config, self.callbacks, kind=JobKind.ASYNCHRONOUS)
        session.bind(token)
        if session.settled:
            return session

        count = output_count or self.config.output_count
        if self.config.debug:
            logger.debug("Submitting inpaint: image=%d bytes, mask=%d bytes, outputs=%d",
                         len(image), len(mask), count)

        session.begin_submit()
        try:
            handle = await self._gateway.submit_inpaint_job(image, mask, prompt, count)
        except asyncio.CancelledError:
            session.abandon("Caller cancelled")
            raise
        except Exception as e:
            session.fail(e)
            return session

        # Cancelled while the creation request was in flight.
        if session.settled:
            return session

        session.attach(handle.id, handle.status)
        if self.callbacks.on_submitted:
            try:
                self.callbacks.on_submitted(handle)
            except Exception as e:
                session.fail(e)
                return session
        session.start_polling(self._gateway.poll_inpaint_job)
        return session

    async def inpaint(
        self,
        image: bytes,
        mask: bytes,
        prompt: str | None,
        *,
        output_count: int | None = None,
        token: CancellationToken | None = None,
    ) -> list[str]:
        """Submit, poll to a terminal state and return the output references.

        Raises the gateway error, ``JobTimedOut`` or ``JobCancelled``.
        """
        session = await self.submit_inpaint(
            image, mask, prompt, output_count=output_count, token=token
        )
        return await session.wait()

    # ------------------------------------------------------------------
    # Synchronous path (cleanup)
    # ------------------------------------------------------------------

    async def cleanup(
        self,
        image: bytes,
        mask: bytes,
        *,
        token: CancellationToken | None = None,
    ) -> Artifact:
        """Single call and settle, no polling."""
        session = PollSession(self.config, self.callbacks, kind=JobKind.SYNCHRONOUS)
        session.attach(_new_job_id())
        session.bind(token)
        if session.settled:
            return await session.wait()

        session.begin_submit()
        call = asyncio.ensure_future(self._gateway.submit_cleanup_job(image, mask))

        def _settle_from_call(task: asyncio.Future) -> None:
            if task.cancelled():
                return
            error = task.exception()
            if error is not None:
                session.fail(error)
            else:
                session.succeed(task.result())

        call.add_done_callback(_settle_from_call)
        try:
            return await session.wait()
        finally:
            # Settled by cancellation first: drop the request.
            if not call.done():
                call.cancel()
