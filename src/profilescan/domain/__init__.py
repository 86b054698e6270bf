"""Domain layer: entities and value objects. No dependencies on outer layers."""

from profilescan.domain.entities import (
    DEFAULT_COUNTRY_CODE,
    FALLBACK_IMAGE_URL,
    MIN_PHONE_DIGITS,
    PRIVATE_PHOTO_MARKER,
    InvestigationTarget,
    LookupResult,
    NormalizedPhone,
    digits_only,
)

__all__ = [
    "DEFAULT_COUNTRY_CODE",
    "FALLBACK_IMAGE_URL",
    "MIN_PHONE_DIGITS",
    "PRIVATE_PHOTO_MARKER",
    "InvestigationTarget",
    "LookupResult",
    "NormalizedPhone",
    "digits_only",
]
