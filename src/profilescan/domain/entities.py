"""Domain entities: NormalizedPhone, LookupResult, and the investigation target."""

import re
from dataclasses import dataclass

# Minimum digit count for a phone number the upstream can resolve.
MIN_PHONE_DIGITS = 10

# Placeholder shown whenever the real profile photo cannot be determined.
FALLBACK_IMAGE_URL = (
    "https://i0.wp.com/digitalhealthskills.com/wp-content/uploads/2022/11/"
    "3da39-no-user-image-icon-27.png?fit=500%2C500&ssl=1"
)

# Substring the upstream uses in its own "no photo" placeholder URL.
PRIVATE_PHOTO_MARKER = "no-user-image-icon"

DEFAULT_COUNTRY_CODE = "+34"

_NON_DIGITS = re.compile(r"[^0-9]")


def digits_only(raw: str) -> str:
    """Return raw with every non-digit character removed."""
    return _NON_DIGITS.sub("", raw or "")


@dataclass(frozen=True)
class NormalizedPhone:
    """
    Digit-only phone number, country code included.
    A NormalizedPhone always has at least MIN_PHONE_DIGITS digits.
    """

    digits: str

    def __post_init__(self):
        if not self.digits or not self.digits.isdigit():
            raise ValueError("NormalizedPhone must contain only digits.")
        if len(self.digits) < MIN_PHONE_DIGITS:
            raise ValueError(
                f"NormalizedPhone must have at least {MIN_PHONE_DIGITS} digits."
            )

    @classmethod
    def from_raw(cls, raw: str) -> "NormalizedPhone":
        return cls(digits=digits_only(raw))

    def __str__(self) -> str:
        return self.digits


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a photo lookup. Same shape on every non-validation path."""

    result: str
    is_photo_private: bool
    success: bool = True

    @classmethod
    def fallback(cls) -> "LookupResult":
        return cls(result=FALLBACK_IMAGE_URL, is_photo_private=True)

    @classmethod
    def from_image(cls, image: str | None) -> "LookupResult":
        """Private when the image is missing or is the upstream's own placeholder."""
        if not isinstance(image, str) or not image or PRIVATE_PHOTO_MARKER in image:
            return cls.fallback()
        return cls(result=image, is_photo_private=False)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "result": self.result,
            "is_photo_private": self.is_photo_private,
        }


@dataclass(frozen=True)
class InvestigationTarget:
    """What the user typed about the person being investigated."""

    age: str = ""
    gender: str = ""
    location: str = ""
    country_code: str = DEFAULT_COUNTRY_CODE
    phone_number: str = ""
    handle: str = ""
    file_name: str | None = None

    def missing(self, fields: list[str] | tuple[str, ...]) -> list[str]:
        """Return the names in fields that are still empty."""
        return [f for f in fields if not (getattr(self, f, None) or "").strip()]
