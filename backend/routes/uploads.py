"""Upload helpers shared by the routes."""

from fastapi import HTTPException, UploadFile

from retouch.config import get_settings


async def read_upload(upload: UploadFile) -> bytes:
    """Read an uploaded file, enforcing the configured size limit."""
    max_bytes = get_settings().max_upload_bytes
    content = await upload.read()
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {max_bytes // (1024 * 1024)} MB.",
        )
    return content
