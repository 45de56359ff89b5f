"""Client-side job orchestration: bounded polling with cooperative cancellation."""

from retouch.orchestrator.cancellation import CancellationToken
from retouch.orchestrator.client import GatewayClient
from retouch.orchestrator.config import OrchestratorCallbacks, OrchestratorConfig
from retouch.orchestrator.orchestrator import JobGatewayLike, JobOrchestrator
from retouch.orchestrator.session import PollSession, SessionState

__all__ = [
    "CancellationToken",
    "GatewayClient",
    "JobGatewayLike",
    "JobOrchestrator",
    "OrchestratorCallbacks",
    "OrchestratorConfig",
    "PollSession",
    "SessionState",
]
