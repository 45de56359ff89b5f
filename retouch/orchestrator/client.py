"""HTTP client for the gateway API (the browser-side view of the gateway)."""

from __future__ import annotations

import logging
import time

import httpx

from retouch.errors import UpstreamError, UpstreamRejected
from retouch.jobs.models import Artifact, JobHandle, JobSnapshot

logger = logging.getLogger(__name__)


class GatewayClient:
    """Speaks ``/api/inpaint`` and ``/api/clean``. One request per call, no retries."""

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise UpstreamRejected(None, str(e)) from e
        if not response.is_success:
            raise UpstreamRejected(response.status_code, response.text)
        return response

    async def submit_inpaint_job(
        self, image: bytes, mask: bytes, prompt: str | None, desired_output_count: int = 1
    ) -> JobHandle:
        files = {
            "image": ("image", image, "image/jpeg"),
            "mask": ("mask", mask, "image/png"),
        }
        data = {"prompt": prompt or "", "outputs": str(desired_output_count)}
        response = await self._send("POST", "/api/inpaint", files=files, data=data)
        return JobHandle.model_validate(response.json())

    async def poll_inpaint_job(self, job_id: str) -> JobSnapshot:
        """Fetch the job status.

        The gateway answers a job that reported an error with an empty 500,
        and a failed status fetch with a 500 carrying a message. The first
        becomes ``UpstreamError``, the second ``UpstreamRejected``.
        """
        # Cache-busting parameter keeps intermediaries from replaying a stale status.
        try:
            response = await self._send(
                "GET", f"/api/inpaint/{job_id}", params={"bust": int(time.time() * 1000)}
            )
        except UpstreamRejected as e:
            if e.status_code == 500 and not e.detail:
                raise UpstreamError(job_id, "Job reported an error") from e
            raise
        return JobSnapshot.model_validate(response.json())

    async def submit_cleanup_job(self, image: bytes, mask: bytes) -> Artifact:
        files = {
            "image": ("image", image, "image/jpeg"),
            "mask": ("mask", mask, "image/png"),
        }
        response = await self._send("POST", "/api/clean", files=files)
        return Artifact(
            content=response.content,
            media_type=response.headers.get("content-type", "image/png"),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GatewayClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
