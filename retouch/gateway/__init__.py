"""Gateway layer: provider adapters behind a common submit/poll facade."""

from retouch.gateway.base import CleanupProvider, InpaintProvider
from retouch.gateway.clipdrop_provider import ClipdropCleanupProvider
from retouch.gateway.gateway import JobGateway
from retouch.gateway.replicate_provider import ReplicateInpaintProvider, image_to_data_url

__all__ = [
    "CleanupProvider",
    "InpaintProvider",
    "ClipdropCleanupProvider",
    "ReplicateInpaintProvider",
    "JobGateway",
    "image_to_data_url",
]
