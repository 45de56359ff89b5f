"""Provider protocols for the two job paths."""

from typing import Protocol

from retouch.jobs.models import Artifact, JobHandle, JobPayload, JobSnapshot


class CleanupProvider(Protocol):
    """Synchronous provider: blocks until the result is ready."""

    async def cleanup(self, payload: JobPayload) -> Artifact:
        """Return the cleaned image for the masked region."""
        ...


class InpaintProvider(Protocol):
    """Asynchronous provider: creation returns a ticket that must be polled."""

    async def create(self, payload: JobPayload) -> JobHandle:
        """Start a job and return its provider-assigned id."""
        ...

    async def get(self, job_id: str) -> JobSnapshot:
        """Return the current status (and output once succeeded)."""
        ...
