"""Unit tests for PhotoLookupService. No network; StaticContactLookupClient only."""

import requests

from profilescan.application import (
    INVALID_PHONE_FORMAT,
    PHONE_REQUIRED,
    LookupRejected,
    PhotoLookupService,
    UpstreamReply,
    interpret_reply,
)
from profilescan.domain import FALLBACK_IMAGE_URL, LookupResult
from profilescan.infrastructure import StaticContactLookupClient

PHONE = "+55 11 98765-4321"
DIGITS = "5511987654321"

FALLBACK = {
    "success": True,
    "result": FALLBACK_IMAGE_URL,
    "is_photo_private": True,
}


def _service(client: StaticContactLookupClient) -> PhotoLookupService:
    return PhotoLookupService(client)


def _reply(status: int, text: str) -> StaticContactLookupClient:
    return StaticContactLookupClient(default=UpstreamReply(status_code=status, text=text))


def test_missing_phone_is_rejected_without_calling_upstream() -> None:
    client = StaticContactLookupClient()
    service = _service(client)
    for phone in (None, ""):
        result = service.lookup(phone)
        assert isinstance(result, LookupRejected)
        assert result.to_dict() == {"success": False, "error": PHONE_REQUIRED}
    assert client.calls == []


def test_short_phone_is_rejected() -> None:
    client = StaticContactLookupClient()
    result = _service(client).lookup("12345")
    assert isinstance(result, LookupRejected)
    assert result.error == INVALID_PHONE_FORMAT
    assert _service(client).lookup("(12) 345-67").error == INVALID_PHONE_FORMAT
    assert client.calls == []


def test_upstream_receives_digits_only() -> None:
    client = StaticContactLookupClient()
    client.add_profile(DIGITS, "https://cdn.example/real.jpg")
    _service(client).lookup(PHONE)
    assert client.calls == [DIGITS]


def test_real_photo_is_returned() -> None:
    client = StaticContactLookupClient()
    client.add_profile(DIGITS, "https://cdn.example/real.jpg")
    result = _service(client).lookup(PHONE)
    assert result.to_dict() == {
        "success": True,
        "result": "https://cdn.example/real.jpg",
        "is_photo_private": False,
    }


def test_placeholder_image_is_private() -> None:
    client = StaticContactLookupClient()
    client.add_profile(DIGITS, "https://x.example/no-user-image-icon-27.png")
    result = _service(client).lookup(PHONE)
    assert result.to_dict() == FALLBACK


def test_missing_image_is_private() -> None:
    client = StaticContactLookupClient()
    client.add_profile(DIGITS, None)
    assert _service(client).lookup(PHONE).to_dict() == FALLBACK

    no_profile = _reply(200, '{"name": "someone"}')
    assert _service(no_profile).lookup(PHONE).to_dict() == FALLBACK


def test_server_error_returns_fallback() -> None:
    result = _service(_reply(500, "Internal Server Error")).lookup(PHONE)
    assert isinstance(result, LookupResult)
    assert result.to_dict() == FALLBACK


def test_plain_text_body_returns_fallback() -> None:
    assert _service(_reply(200, "Not Found")).lookup(PHONE).to_dict() == FALLBACK


def test_broken_json_returns_fallback() -> None:
    assert _service(_reply(200, '{"profile": ')).lookup(PHONE).to_dict() == FALLBACK


def test_json_array_returns_fallback() -> None:
    assert _service(_reply(200, "[1, 2]")).lookup(PHONE).to_dict() == FALLBACK


def test_non_string_image_is_private() -> None:
    client = _reply(200, '{"profile": {"image": 42}}')
    assert _service(client).lookup(PHONE).to_dict() == FALLBACK


def test_timeout_returns_fallback() -> None:
    client = StaticContactLookupClient(error=requests.Timeout("timed out"))
    assert _service(client).lookup(PHONE).to_dict() == FALLBACK


def test_any_exception_returns_fallback() -> None:
    client = StaticContactLookupClient(error=RuntimeError("boom"))
    assert _service(client).lookup(PHONE).to_dict() == FALLBACK


def test_non_string_phone_returns_fallback() -> None:
    client = StaticContactLookupClient()
    assert _service(client).lookup(5511987654321).to_dict() == FALLBACK
    assert client.calls == []


def test_repeated_lookups_give_same_result() -> None:
    client = StaticContactLookupClient()
    client.add_profile(DIGITS, "https://cdn.example/real.jpg")
    service = _service(client)
    results = [service.lookup(PHONE).to_dict() for _ in range(3)]
    assert results[0] == results[1] == results[2]


def test_interpret_reply_accepts_whitespace_around_json() -> None:
    reply = UpstreamReply(
        status_code=200, text='  \n{"profile": {"image": "https://cdn.example/a.jpg"}}\n'
    )
    assert interpret_reply(reply).result == "https://cdn.example/a.jpg"
