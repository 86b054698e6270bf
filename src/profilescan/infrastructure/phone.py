"""Phone number helpers for the client side: compose and display."""

import phonenumbers


def compose_phone(country_code: str, local_number: str) -> str:
    """Join country code and local number, dropping all whitespace."""
    return "".join(f"{country_code or ''}{local_number or ''}".split())


def format_international(raw: str, default_region: str | None = None) -> str | None:
    """Return the number in international format (e.g. "+34 612 34 56 78"), or None if invalid.

    Use default_region when the input has no leading +. If the number already
    includes a country code, default_region is ignored.
    """
    if not raw or not str(raw).strip():
        return None
    raw = str(raw).strip()
    try:
        parsed = phonenumbers.parse(raw, default_region)
    except phonenumbers.NumberParseException:
        return None
    if not phonenumbers.is_valid_number(parsed):
        return None
    return phonenumbers.format_number(
        parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL
    )
