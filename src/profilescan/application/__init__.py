"""Application layer: use cases, ports, and DTOs. Depends only on domain."""

from profilescan.application.dto import (
    INVALID_PHONE_FORMAT,
    PHONE_REQUIRED,
    LookupRejected,
    UpstreamReply,
)
from profilescan.application.photo_lookup_service import (
    PhotoLookupService,
    interpret_reply,
)
from profilescan.application.ports import ContactLookupClient

__all__ = [
    "INVALID_PHONE_FORMAT",
    "PHONE_REQUIRED",
    "ContactLookupClient",
    "LookupRejected",
    "PhotoLookupService",
    "UpstreamReply",
    "interpret_reply",
]
