"""HTTP adapter for the contact lookup service (requests)."""

import logging

import requests

from profilescan.application.dto import UpstreamReply
from profilescan.domain import NormalizedPhone

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class RequestsContactLookupClient:
    """GET <base_url>/contacts/<digits>. One attempt, bounded by timeout."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def contact_url(self, phone: NormalizedPhone) -> str:
        return f"{self.base_url}/contacts/{phone.digits}"

    def fetch_contact(self, phone: NormalizedPhone) -> UpstreamReply:
        url = self.contact_url(phone)
        logger.info("Fetching contact profile for %s", phone.digits)
        response = self.session.get(
            url,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
        )
        return UpstreamReply(status_code=response.status_code, text=response.text)

    def close(self) -> None:
        self.session.close()
