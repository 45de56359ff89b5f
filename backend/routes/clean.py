"""Cleanup API route: synchronous object removal."""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from backend.deps import get_gateway
from backend.routes.uploads import read_upload
from retouch.errors import ConfigurationError, UpstreamRejected
from retouch.gateway import JobGateway

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/clean",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}, "description": "Cleaned image"}},
)
async def clean(
    image: UploadFile = File(..., description="Source image"),
    mask: UploadFile = File(..., description="Area to remove"),
    gateway: JobGateway = Depends(get_gateway),
):
    """Remove the masked object; returns the PNG or the provider's status code."""
    image_bytes = await read_upload(image)
    mask_bytes = await read_upload(mask)

    try:
        artifact = await gateway.submit_cleanup_job(image_bytes, mask_bytes)
    except UpstreamRejected as e:
        # Transport failures have no upstream status to forward.
        return Response(status_code=e.status_code or 502)
    except ConfigurationError as e:
        logger.error("Cleanup not configured: %s", e)
        return Response(status_code=500)

    return Response(content=artifact.content, media_type="image/png")
