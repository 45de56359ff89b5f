"""Error taxonomy shared by the gateway and the orchestrator."""

from __future__ import annotations


class RetouchError(Exception):
    """Base class for all retouch errors."""


class ConfigurationError(RetouchError):
    """A required setting (credential, model id) is missing."""


class InvalidTransition(RetouchError):
    """A job was asked to leave a terminal state."""


# ---------------------------------------------------------------------------
# Gateway (provider-side) failures
# ---------------------------------------------------------------------------

class GatewayError(RetouchError):
    """Provider failure surfaced through the gateway.

    ``detail`` carries the provider's own message or body, untranslated.
    """

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.detail = detail


class UpstreamRejected(GatewayError):
    """Provider answered with a non-success status (or could not be reached).

    ``status_code`` is ``None`` for transport failures.
    """

    def __init__(self, status_code: int | None, detail: str | None = None):
        if status_code is None:
            message = "Upstream unreachable"
        else:
            message = f"Upstream rejected request with status {status_code}"
        super().__init__(message, detail)
        self.status_code = status_code


class UpstreamError(GatewayError):
    """Provider answered successfully but flagged an error on the job."""

    def __init__(self, job_id: str, detail: str | None = None):
        super().__init__(f"Job {job_id} reported an error", detail)
        self.job_id = job_id


# ---------------------------------------------------------------------------
# Orchestration outcomes
# ---------------------------------------------------------------------------

class OrchestrationError(RetouchError):
    """Terminal outcome produced by the orchestrator itself."""


class JobTimedOut(OrchestrationError):
    def __init__(self, job_id: str, attempts: int):
        super().__init__(f"Timed out after {attempts} poll attempts (job {job_id})")
        self.job_id = job_id
        self.attempts = attempts


class JobCancelled(OrchestrationError):
    def __init__(self, job_id: str | None = None, reason: str | None = None):
        super().__init__(reason or "Aborted")
        self.job_id = job_id
        self.reason = reason
