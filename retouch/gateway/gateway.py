"""Job gateway: provider-agnostic submit/poll over the two provider paths.

Stateless. Every operation makes exactly one outbound call and keeps
nothing between calls; all job state lives with the remote provider.
"""

from __future__ import annotations

import logging

import httpx

from retouch.config import Settings
from retouch.gateway.base import CleanupProvider, InpaintProvider
from retouch.gateway.clipdrop_provider import ClipdropCleanupProvider
from retouch.gateway.replicate_provider import ReplicateInpaintProvider
from retouch.jobs.models import Artifact, JobHandle, JobPayload, JobSnapshot

logger = logging.getLogger(__name__)


class JobGateway:
    """Holds the provider credentials and translates generic job calls."""

    def __init__(
        self,
        cleanup_provider: CleanupProvider,
        inpaint_provider: InpaintProvider,
        client: httpx.AsyncClient | None = None,
    ):
        self._cleanup = cleanup_provider
        self._inpaint = inpaint_provider
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> "JobGateway":
        client = client or httpx.AsyncClient(timeout=settings.request_timeout)
        return cls(
            cleanup_provider=ClipdropCleanupProvider(
                client,
                api_token=settings.clipdrop_api_token,
                base_url=settings.clipdrop_api_url,
            ),
            inpaint_provider=ReplicateInpaintProvider(
                client,
                api_token=settings.replicate_api_token,
                model=settings.replicate_inpaint_model,
                base_url=settings.replicate_api_url,
            ),
            client=client,
        )

    async def submit_cleanup_job(self, image: bytes, mask: bytes) -> Artifact:
        """Synchronous path: forward image + mask, return the output artifact."""
        logger.info("clean request")
        return await self._cleanup.cleanup(JobPayload(image=image, mask=mask))

    async def submit_inpaint_job(
        self,
        image: bytes,
        mask: bytes,
        prompt: str | None,
        desired_output_count: int = 1,
        image_content_type: str = "image/jpeg",
        mask_content_type: str = "image/png",
    ) -> JobHandle:
        """Asynchronous path: create the remote job and return its handle."""
        logger.info("inpaint request")
        payload = JobPayload(
            image=image,
            mask=mask,
            prompt=prompt,
            output_count=desired_output_count,
            image_content_type=image_content_type,
            mask_content_type=mask_content_type,
        )
        return await self._inpaint.create(payload)

    async def poll_inpaint_job(self, job_id: str) -> JobSnapshot:
        logger.info("inpaint status request %s", job_id)
        return await self._inpaint.get(job_id)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()

    async def __aenter__(self) -> "JobGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
