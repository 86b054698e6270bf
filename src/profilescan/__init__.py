"""
profilescan core: clean-architecture layout.

- domain: value objects (NormalizedPhone, LookupResult, InvestigationTarget). No outer dependencies.
- application: use cases (PhotoLookupService), ports (ContactLookupClient), DTOs.
- infrastructure: adapters (RequestsContactLookupClient, StaticContactLookupClient), phone helpers.
"""

from profilescan.application import (
    ContactLookupClient,
    LookupRejected,
    PhotoLookupService,
    UpstreamReply,
)
from profilescan.domain import InvestigationTarget, LookupResult, NormalizedPhone
from profilescan.infrastructure import (
    RequestsContactLookupClient,
    StaticContactLookupClient,
)

__all__ = [
    "ContactLookupClient",
    "InvestigationTarget",
    "LookupRejected",
    "LookupResult",
    "NormalizedPhone",
    "PhotoLookupService",
    "RequestsContactLookupClient",
    "StaticContactLookupClient",
    "UpstreamReply",
]
