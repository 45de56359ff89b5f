"""Replicate inpainting: prediction create + status fetch."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from retouch.errors import ConfigurationError, UpstreamError, UpstreamRejected
from retouch.jobs.models import JobHandle, JobPayload, JobSnapshot, JobStatus

logger = logging.getLogger(__name__)


def image_to_data_url(content: bytes, mime_type: str) -> str:
    """Encode raw image bytes as a base64 data URI."""
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ReplicateInpaintProvider:
    """Asynchronous inpainting through the Replicate predictions API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_token: str | None,
        model: str | None,
        base_url: str = "https://api.replicate.com/v1",
    ):
        self._client = client
        self._api_token = api_token
        self._model = model
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        if not self._api_token:
            raise ConfigurationError("REPLICATE_API_TOKEN is not configured")
        return {
            "Authorization": f"Token {self._api_token}",
            "Content-Type": "application/json",
        }

    async def create(self, payload: JobPayload) -> JobHandle:
        if not self._model:
            raise ConfigurationError("REPLICATE_INPAINT_MODEL is not configured")

        body = {
            "version": self._model,
            "input": {
                "prompt": payload.prompt or "",
                "num_outputs": payload.output_count,
                "image": image_to_data_url(payload.image, payload.image_content_type),
                "mask": image_to_data_url(payload.mask, payload.mask_content_type),
            },
        }
        try:
            response = await self._client.post(
                f"{self._base_url}/predictions", headers=self._headers(), json=body
            )
        except httpx.HTTPError as e:
            raise UpstreamRejected(None, str(e)) from e

        data = _body(response)
        if response.status_code != 201:
            logger.error("Prediction failed to run: %s", data)
            raise UpstreamRejected(response.status_code, str(data))
        if not isinstance(data, dict) or "id" not in data:
            raise UpstreamRejected(response.status_code, f"Unexpected prediction body: {data!r}")

        handle = JobHandle(id=data["id"], status=JobStatus.from_provider(data.get("status")))
        logger.info("Started running prediction %s", handle.id)
        return handle

    async def get(self, job_id: str) -> JobSnapshot:
        try:
            response = await self._client.get(
                f"{self._base_url}/predictions/{job_id}", headers=self._headers()
            )
        except httpx.HTTPError as e:
            raise UpstreamRejected(None, str(e)) from e

        data = _body(response)
        if response.status_code != 200:
            logger.error("Prediction status request failed: %s", data)
            raise UpstreamRejected(response.status_code, str(data))
        if not isinstance(data, dict):
            raise UpstreamRejected(response.status_code, f"Unexpected prediction body: {data!r}")

        if data.get("error"):
            logger.error("Prediction %s reported error: %s", job_id, data["error"])
            raise UpstreamError(job_id, str(data["error"]))

        status = JobStatus.from_provider(data.get("status"))
        if status != JobStatus.SUCCEEDED:
            logger.info("processing... %s", job_id)
            return JobSnapshot(id=data.get("id", job_id), status=status)

        output = data.get("output")
        if isinstance(output, str):
            output = [output]
        return JobSnapshot(id=data.get("id", job_id), status=status, output=output)
