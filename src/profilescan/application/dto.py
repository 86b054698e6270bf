"""Data transfer objects for the lookup use case."""

from dataclasses import dataclass

PHONE_REQUIRED = "Phone number is required"
INVALID_PHONE_FORMAT = "Invalid phone number format"


@dataclass(frozen=True)
class UpstreamReply:
    """Raw answer from the contact lookup service."""

    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class LookupRejected:
    """The phone number failed validation; the caller must fix its input."""

    error: str
    success: bool = False

    def to_dict(self) -> dict:
        return {"success": self.success, "error": self.error}
