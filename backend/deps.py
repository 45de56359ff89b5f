"""Shared FastAPI dependencies."""

import logging

from retouch.config import get_settings
from retouch.gateway import JobGateway

logger = logging.getLogger(__name__)

_gateway: JobGateway | None = None


def get_gateway() -> JobGateway:
    """Return the process-wide gateway (one pooled HTTP client)."""
    global _gateway
    if _gateway is None:
        _gateway = JobGateway.from_settings(get_settings())
        logger.info("Job gateway initialised")
    return _gateway


async def close_gateway() -> None:
    global _gateway
    if _gateway is not None:
        await _gateway.aclose()
        _gateway = None
