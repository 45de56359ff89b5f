"""Pytest configuration and shared fixtures."""

import asyncio

import pytest

from retouch.jobs import Artifact, JobHandle, JobSnapshot, JobStatus
from retouch.orchestrator import OrchestratorConfig

# Smallest valid PNG (1x1 transparent pixel)
PNG_1PX = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
    b"\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f\x00\x00\x01\x01\x00\x05\x18\xd8N\x00"
    b"\x00\x00\x00IEND\xaeB`\x82"
)


class FakeGateway:
    """Scripted gateway: records every call and replays queued poll results.

    ``snapshots`` maps job id -> list of ``JobSnapshot`` or exceptions; once a
    script is exhausted the job keeps reporting ``processing``.
    """

    def __init__(
        self,
        snapshots: dict[str, list] | None = None,
        submit_error: Exception | None = None,
        cleanup_error: Exception | None = None,
        poll_gate: asyncio.Event | None = None,
        cleanup_gate: asyncio.Event | None = None,
    ):
        self._scripts = {k: list(v) for k, v in (snapshots or {}).items()}
        self._job_ids = list(self._scripts) or ["pred-1"]
        self.submit_error = submit_error
        self.cleanup_error = cleanup_error
        self.poll_gate = poll_gate
        self.cleanup_gate = cleanup_gate
        self.submit_calls: list[dict] = []
        self.poll_calls: list[str] = []
        self.cleanup_calls: list[tuple[bytes, bytes]] = []

    async def submit_inpaint_job(self, image, mask, prompt, desired_output_count=1, **kwargs):
        self.submit_calls.append(
            {"image": image, "mask": mask, "prompt": prompt, "outputs": desired_output_count}
        )
        if self.submit_error is not None:
            raise self.submit_error
        job_id = self._job_ids[(len(self.submit_calls) - 1) % len(self._job_ids)]
        return JobHandle(id=job_id, status=JobStatus.PENDING)

    async def poll_inpaint_job(self, job_id):
        self.poll_calls.append(job_id)
        if self.poll_gate is not None:
            await self.poll_gate.wait()
        script = self._scripts.get(job_id, [])
        item = script.pop(0) if script else JobSnapshot(id=job_id, status=JobStatus.PROCESSING)
        if isinstance(item, Exception):
            raise item
        return item

    async def submit_cleanup_job(self, image, mask):
        self.cleanup_calls.append((image, mask))
        if self.cleanup_gate is not None:
            await self.cleanup_gate.wait()
        if self.cleanup_error is not None:
            raise self.cleanup_error
        return Artifact(content=PNG_1PX, media_type="image/png")


def processing(job_id: str = "pred-1") -> JobSnapshot:
    return JobSnapshot(id=job_id, status=JobStatus.PROCESSING)


def succeeded(job_id: str = "pred-1", output: list[str] | None = None) -> JobSnapshot:
    return JobSnapshot(
        id=job_id,
        status=JobStatus.SUCCEEDED,
        output=output if output is not None else [f"https://cdn.example/{job_id}/0.png"],
    )


async def wait_until(predicate, timeout: float = 2.0) -> None:
    """Spin the event loop until ``predicate()`` holds."""
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.001)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_1PX


@pytest.fixture
def fast_config() -> OrchestratorConfig:
    """Poll quickly so tests finish in milliseconds."""
    return OrchestratorConfig(poll_interval=0.01, max_attempts=5, output_count=2)
