"""Orchestrator options and named callback slots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from retouch.config import Settings
    from retouch.jobs.models import JobHandle, JobSnapshot, JobStatus


class OrchestratorConfig(BaseModel):
    """Validated poll-loop options. Fixed interval, no backoff."""

    model_config = ConfigDict(frozen=True)

    poll_interval: float = Field(default=1.0, gt=0, description="Seconds between polls")
    max_attempts: int = Field(default=20, ge=1, description="Polls without output before timing out")
    output_count: int = Field(default=1, ge=1, description="Results requested per inpaint job")
    debug: bool = Field(default=False, description="Log payload and result sizes")

    @classmethod
    def from_settings(cls, settings: "Settings", **overrides) -> "OrchestratorConfig":
        values = {
            "poll_interval": settings.poll_interval,
            "max_attempts": settings.poll_max_attempts,
            "output_count": settings.inpaint_outputs,
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class OrchestratorCallbacks:
    """Optional hooks. Each slot is called synchronously on the event loop."""

    on_submitted: Optional[Callable[["JobHandle"], None]] = None
    on_poll: Optional[Callable[[str, int, "JobSnapshot"], None]] = None
    on_settled: Optional[Callable[[str, "JobStatus", Optional[BaseException]], None]] = None
