"""Job state model shared by gateway and orchestrator."""

from retouch.jobs.models import Artifact, Job, JobHandle, JobKind, JobPayload, JobSnapshot, JobStatus

__all__ = ["Artifact", "Job", "JobHandle", "JobKind", "JobPayload", "JobSnapshot", "JobStatus"]
