"""Poll session: bookkeeping and timer lifecycle for one orchestration.

Runs on a single asyncio event loop. The only suspension points are the
poll timer and the gateway call. Two invariants hold for every session:

* at most one pending timer exists at any time, and it is cleared
  synchronously on cancel and on settle;
* the session future settles exactly once; later events (a stray timer,
  a late response, a late cancel) are no-ops.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from retouch.errors import JobCancelled, JobTimedOut, UpstreamError
from retouch.jobs.models import Job, JobKind, JobSnapshot, JobStatus
from retouch.orchestrator.cancellation import CancellationToken
from retouch.orchestrator.config import OrchestratorCallbacks, OrchestratorConfig

logger = logging.getLogger(__name__)

PollFn = Callable[[str], Awaitable[JobSnapshot]]


class SessionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


def _outcome(error: BaseException | None) -> tuple[SessionState, JobStatus]:
    if error is None:
        return SessionState.SUCCEEDED, JobStatus.SUCCEEDED
    if isinstance(error, JobCancelled):
        return SessionState.CANCELLED, JobStatus.CANCELLED
    if isinstance(error, JobTimedOut):
        return SessionState.TIMED_OUT, JobStatus.TIMED_OUT
    return SessionState.FAILED, JobStatus.FAILED


class PollSession:
    """Drives one job from submission to a single settled result."""

    def __init__(
        self,
        config: OrchestratorConfig,
        callbacks: OrchestratorCallbacks | None = None,
        kind: JobKind = JobKind.ASYNCHRONOUS,
    ):
        self._loop = asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._config = config
        self._callbacks = callbacks or OrchestratorCallbacks()
        self._kind = kind
        self._timer: asyncio.TimerHandle | None = None
        self._inflight: asyncio.Task | None = None
        self._poll: PollFn | None = None
        self._unbind: Callable[[], None] | None = None

        self.job: Job | None = None
        self.state = SessionState.IDLE
        self.attempt = 0
        self.polls = 0
        self.cancelled = False

    # -- introspection -----------------------------------------------------

    @property
    def settled(self) -> bool:
        return self._future.done()

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    @property
    def job_id(self) -> str | None:
        return self.job.id if self.job else None

    # -- lifecycle ---------------------------------------------------------

    def bind(self, token: CancellationToken | None) -> None:
        """Cancel this session when ``token`` fires; released on settle."""
        if token is None:
            return
        unbind = token.register(self.cancel)
        if self.settled:
            unbind()
        else:
            self._unbind = unbind

    def begin_submit(self) -> None:
        if self.state == SessionState.IDLE:
            self.state = SessionState.SUBMITTING

    def attach(self, job_id: str, status: JobStatus = JobStatus.PENDING) -> None:
        """Bind the provider-assigned job id once submission returns."""
        self.job = Job(id=job_id, kind=self._kind)
        if status != JobStatus.PENDING and not status.is_terminal:
            self.job.transition(status)

    def start_polling(self, poll: PollFn) -> None:
        """Enter the poll loop: first poll fires after one interval."""
        if self.settled or self.cancelled:
            return
        self._poll = poll
        self.state = SessionState.POLLING
        self._schedule()

    def cancel(self, reason: str | None = None) -> bool:
        """Latch cancellation, clear the timer and settle as cancelled.

        An in-flight gateway call is not interrupted; its result is
        discarded when it arrives.
        """
        if self.cancelled or self.settled:
            return False
        self.cancelled = True
        self._clear_timer()
        logger.info("Cancelling job %s", self.job_id or "(not yet submitted)")
        self.fail(JobCancelled(self.job_id, reason))
        return True

    def succeed(self, result: Any) -> bool:
        return self._settle(result=result)

    def fail(self, error: BaseException) -> bool:
        return self._settle(error=error)

    async def wait(self) -> Any:
        """Await the settled result; cancelling the waiter cancels the session."""
        try:
            return await asyncio.shield(self._future)
        except asyncio.CancelledError:
            self.abandon("Caller cancelled")
            raise

    def abandon(self, reason: str | None = None) -> None:
        """Cancel on behalf of a waiter that will never read the result."""
        self.cancel(reason)
        if self._future.done() and not self._future.cancelled():
            self._future.exception()

    # -- internals ---------------------------------------------------------

    def _clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule(self) -> None:
        self._clear_timer()
        if self.cancelled or self.settled:
            return
        self._timer = self._loop.call_later(self._config.poll_interval, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self.cancelled or self.settled:
            return
        self._inflight = self._loop.create_task(self._poll_once())

    async def _poll_once(self) -> None:
        try:
            await self._poll_step()
        except Exception as e:
            logger.exception("Poll for job %s failed unexpectedly", self.job_id)
            self.fail(e)

    async def _poll_step(self) -> None:
        if self._poll is None or self.job is None:
            raise RuntimeError("Poll fired before a job was attached")
        job_id = self.job.id
        self.polls += 1
        logger.debug("Poll #%d for job %s", self.polls, job_id)

        try:
            snapshot = await self._poll(job_id)
        except Exception as e:
            self.fail(e)
            return
        finally:
            self._inflight = None

        # Cancelled (and therefore settled) while the request was in flight.
        if self.cancelled or self.settled:
            return

        if self._callbacks.on_poll:
            self._callbacks.on_poll(job_id, self.polls, snapshot)

        if snapshot.has_output:
            output = list(snapshot.output or [])
            logger.info("Got results %d for job %s", len(output), job_id)
            if self._config.debug:
                for ref in output:
                    logger.debug("Output %s", ref[:120])
            self.succeed(output)
            return

        if snapshot.status in (JobStatus.FAILED, JobStatus.CANCELLED):
            self.fail(UpstreamError(job_id, f"Job ended with status {snapshot.status.value}"))
            return

        if not snapshot.status.is_terminal and snapshot.status != self.job.status:
            self.job.transition(snapshot.status)

        self.attempt += 1
        if self.attempt >= self._config.max_attempts:
            self.fail(JobTimedOut(job_id, self.attempt))
            return
        self._schedule()

    def _settle(self, result: Any = None, error: BaseException | None = None) -> bool:
        if self._future.done():
            return False
        self._clear_timer()
        if self._unbind is not None:
            self._unbind()
            self._unbind = None

        state, status = _outcome(error)
        self.state = state
        if self.job is not None and not self.job.status.is_terminal:
            self.job.transition(status, result=result, error=str(error) if error else None)

        if error is None:
            self._future.set_result(result)
        else:
            self._future.set_exception(error)

        if self._callbacks.on_settled:
            try:
                self._callbacks.on_settled(self.job_id or "", status, error)
            except Exception:
                # The outcome is already on the future; the hook cannot change it.
                logger.exception("on_settled hook failed for job %s", self.job_id)
        return True
