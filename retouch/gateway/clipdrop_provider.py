"""ClipDrop cleanup: one multipart request, binary image back."""

import logging

import httpx

from retouch.errors import ConfigurationError, UpstreamRejected
from retouch.jobs.models import Artifact, JobPayload

logger = logging.getLogger(__name__)


class ClipdropCleanupProvider:
    """Synchronous object removal through the ClipDrop cleanup API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_token: str | None,
        base_url: str = "https://clipdrop-api.co",
    ):
        self._client = client
        self._api_token = api_token
        self._base_url = base_url.rstrip("/")

    async def cleanup(self, payload: JobPayload) -> Artifact:
        if not self._api_token:
            raise ConfigurationError("CLIPDROP_API_TOKEN is not configured")

        files = {
            "image_file": ("image.jpeg", payload.image, "image/jpeg"),
            "mask_file": ("mask.png", payload.mask, "image/png"),
        }
        try:
            response = await self._client.post(
                f"{self._base_url}/cleanup/v1",
                headers={"x-api-key": self._api_token},
                files=files,
            )
        except httpx.HTTPError as e:
            raise UpstreamRejected(None, str(e)) from e

        if response.status_code != 200:
            logger.warning("Cleanup rejected (%s): %s", response.status_code, response.text[:300])
            raise UpstreamRejected(response.status_code, response.text)

        return Artifact(content=response.content, media_type="image/png")
