"""Job schema and status."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from retouch.errors import InvalidTransition


class JobKind(str, Enum):
    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self not in (JobStatus.PENDING, JobStatus.PROCESSING)

    @classmethod
    def from_provider(cls, value: str | None) -> "JobStatus":
        """Map provider status vocabulary (e.g. Replicate's) onto ours."""
        normalized = (value or "").strip().lower()
        return _PROVIDER_STATUS.get(normalized, cls.PROCESSING)


_PROVIDER_STATUS: dict[str, JobStatus] = {
    "starting": JobStatus.PENDING,
    "pending": JobStatus.PENDING,
    "queued": JobStatus.PENDING,
    "processing": JobStatus.PROCESSING,
    "running": JobStatus.PROCESSING,
    "succeeded": JobStatus.SUCCEEDED,
    "failed": JobStatus.FAILED,
    "canceled": JobStatus.CANCELLED,
    "cancelled": JobStatus.CANCELLED,
}


class JobPayload(BaseModel):
    """Input image, selection mask and optional prompt. Read-only once built."""

    model_config = ConfigDict(frozen=True)

    image: bytes
    mask: bytes
    prompt: str | None = None
    image_content_type: str = "image/jpeg"
    mask_content_type: str = "image/png"
    output_count: int = Field(default=1, ge=1)


class Artifact(BaseModel):
    """Binary output of a synchronous job."""

    content: bytes
    media_type: str = "image/png"


class JobHandle(BaseModel):
    """Returned by job creation on the asynchronous path."""

    id: str
    status: JobStatus = JobStatus.PENDING


class JobSnapshot(BaseModel):
    """Current provider view of an asynchronous job."""

    id: str
    status: JobStatus
    output: list[str] | None = None

    @property
    def has_output(self) -> bool:
        return bool(self.output)


class Job(BaseModel):
    """One remote inference request. Never persisted."""

    id: str
    kind: JobKind
    status: JobStatus = JobStatus.PENDING
    result: Any = None
    error: str | None = None

    def transition(self, status: JobStatus, result: Any = None, error: str | None = None) -> None:
        if self.status.is_terminal:
            raise InvalidTransition(
                f"Job {self.id} is {self.status.value}; cannot move to {status.value}"
            )
        self.status = status
        if status == JobStatus.SUCCEEDED:
            self.result = result
        elif status in (JobStatus.FAILED, JobStatus.TIMED_OUT):
            self.error = error
