"""Inpaint API routes: create a remote prediction, then poll it."""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from backend.deps import get_gateway
from backend.routes.uploads import read_upload
from retouch.errors import ConfigurationError, UpstreamError, UpstreamRejected
from retouch.gateway import JobGateway
from retouch.jobs import JobStatus

logger = logging.getLogger(__name__)
router = APIRouter()


class InpaintJobResponse(BaseModel):
    id: str
    status: JobStatus


class InpaintStatusResponse(BaseModel):
    id: str
    status: JobStatus
    output: list[str] | None = None


@router.post(
    "/inpaint",
    response_model=InpaintJobResponse,
    status_code=status.HTTP_201_CREATED,
    responses={500: {"description": "Provider refused to start the job", "content": {"text/plain": {}}}},
)
async def start_inpaint(
    image: UploadFile = File(..., description="Source image"),
    mask: UploadFile = File(..., description="Selection mask"),
    prompt: str = Form("", description="Text prompt; empty uses the background"),
    outputs: int = Form(1, ge=1, description="Number of results to generate"),
    gateway: JobGateway = Depends(get_gateway),
):
    """Start an inpaint job and return its id for polling."""
    image_bytes = await read_upload(image)
    mask_bytes = await read_upload(mask)

    try:
        handle = await gateway.submit_inpaint_job(
            image_bytes,
            mask_bytes,
            prompt,
            outputs,
            image_content_type=image.content_type or "image/jpeg",
            mask_content_type=mask.content_type or "image/png",
        )
    except (UpstreamRejected, ConfigurationError) as e:
        logger.error("Prediction failed to run: %s", getattr(e, "detail", None) or e)
        return PlainTextResponse("Failed to run", status_code=500)

    return InpaintJobResponse(id=handle.id, status=handle.status)


@router.get(
    "/inpaint/{job_id}",
    response_model=InpaintStatusResponse,
    responses={500: {"description": "Status fetch failed or job errored", "content": {"text/plain": {}}}},
)
async def get_inpaint_status(job_id: str, gateway: JobGateway = Depends(get_gateway)):
    """Return job status; ``output`` is present once the job succeeded."""
    try:
        snapshot = await gateway.poll_inpaint_job(job_id)
    except UpstreamError as e:
        logger.error("Prediction status %s: %s", job_id, e.detail)
        return PlainTextResponse("", status_code=500)
    except (UpstreamRejected, ConfigurationError) as e:
        logger.error("Prediction status request failed: %s", getattr(e, "detail", None) or e)
        return PlainTextResponse("Failed to get prediction status", status_code=500)

    return InpaintStatusResponse(id=snapshot.id, status=snapshot.status, output=snapshot.output)
