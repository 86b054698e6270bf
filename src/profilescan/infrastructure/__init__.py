"""Infrastructure layer: concrete implementations of application ports."""

from profilescan.infrastructure.phone import compose_phone, format_international
from profilescan.infrastructure.static_client import StaticContactLookupClient
from profilescan.infrastructure.upstream_client import (
    DEFAULT_TIMEOUT_SECONDS,
    RequestsContactLookupClient,
)

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "RequestsContactLookupClient",
    "StaticContactLookupClient",
    "compose_phone",
    "format_international",
]
