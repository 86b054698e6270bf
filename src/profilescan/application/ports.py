"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from profilescan.application.dto import UpstreamReply
from profilescan.domain import NormalizedPhone


class ContactLookupClient(Protocol):
    """Fetches a contact profile from the third-party lookup service."""

    def fetch_contact(self, phone: NormalizedPhone) -> UpstreamReply:
        """Return the upstream status and raw body. Raises on transport failure."""
        ...

    def close(self) -> None:
        """Release pooled connections. Called once on app shutdown."""
        ...
