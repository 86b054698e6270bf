"""In-memory implementation of ContactLookupClient (no network)."""

import json

from profilescan.application.dto import UpstreamReply
from profilescan.domain import NormalizedPhone


class StaticContactLookupClient:
    """Answers from canned replies keyed by digits.
    Falls back to `default` for unknown numbers; raises `error` when set.
    """

    def __init__(
        self,
        replies: dict[str, UpstreamReply] | None = None,
        *,
        default: UpstreamReply | None = None,
        error: Exception | None = None,
    ) -> None:
        self._replies: dict[str, UpstreamReply] = dict(replies or {})
        self._default = default or UpstreamReply(status_code=404, text="Not Found")
        self._error = error
        self.calls: list[str] = []
        self.closed = False

    def add_profile(self, digits: str, image: str | None) -> None:
        """Register a JSON profile reply for digits. image=None omits the field."""
        profile = {} if image is None else {"image": image}
        self._replies[digits] = UpstreamReply(
            status_code=200, text=json.dumps({"profile": profile})
        )

    def fetch_contact(self, phone: NormalizedPhone) -> UpstreamReply:
        self.calls.append(phone.digits)
        if self._error is not None:
            raise self._error
        return self._replies.get(phone.digits, self._default)

    def close(self) -> None:
        self.closed = True
