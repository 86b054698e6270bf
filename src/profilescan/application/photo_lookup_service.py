"""Profile photo lookup. Validates the phone, asks upstream, never raises."""

import json
import logging

from profilescan.application.dto import (
    INVALID_PHONE_FORMAT,
    PHONE_REQUIRED,
    LookupRejected,
    UpstreamReply,
)
from profilescan.application.ports import ContactLookupClient
from profilescan.domain import LookupResult, NormalizedPhone

logger = logging.getLogger(__name__)


def parse_reply_body(text: str):
    """Parse an upstream body as JSON. Returns None when it is not JSON."""
    stripped = (text or "").strip()
    if not stripped.startswith(("{", "[")):
        logger.info("Upstream body is not JSON, using fallback")
        return None
    try:
        return json.loads(stripped)
    except ValueError as e:
        logger.error("Could not parse upstream JSON: %s", e)
        return None


def profile_image(data) -> str | None:
    """Return data["profile"]["image"] if present, else None."""
    if not isinstance(data, dict):
        return None
    profile = data.get("profile")
    if not isinstance(profile, dict):
        return None
    return profile.get("image")


def interpret_reply(reply: UpstreamReply) -> LookupResult:
    """Map an upstream reply to a LookupResult. Every failure becomes the fallback."""
    if not reply.ok:
        logger.error("Upstream returned status: %s", reply.status_code)
        return LookupResult.fallback()
    logger.debug("Upstream raw body: %s", reply.text)
    data = parse_reply_body(reply.text)
    if data is None:
        return LookupResult.fallback()
    return LookupResult.from_image(profile_image(data))


class PhotoLookupService:
    """Core flow: raw phone -> validated digits -> upstream -> photo URL or placeholder."""

    def __init__(self, client: ContactLookupClient) -> None:
        self._client = client

    def validate(self, phone) -> NormalizedPhone | LookupRejected:
        """Return the normalized phone, or the rejection to send back to the caller."""
        if not phone:
            return LookupRejected(error=PHONE_REQUIRED)
        try:
            return NormalizedPhone.from_raw(phone)
        except ValueError:
            return LookupRejected(error=INVALID_PHONE_FORMAT)

    def lookup(self, phone) -> LookupResult | LookupRejected:
        """Look up the profile photo for phone.

        Only a missing or too-short phone is reported as an error. Anything
        that goes wrong after validation (bad status, non-JSON body, timeout,
        connection failure) yields LookupResult.fallback().
        """
        if phone and not isinstance(phone, str):
            logger.error("Phone must be a string, got %s", type(phone).__name__)
            return LookupResult.fallback()
        validated = self.validate(phone)
        if isinstance(validated, LookupRejected):
            return validated
        try:
            reply = self._client.fetch_contact(validated)
            return interpret_reply(reply)
        except Exception as e:
            logger.error("Photo lookup failed for %s: %s", validated, e)
            return LookupResult.fallback()
