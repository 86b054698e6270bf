"""Tests for the requests-backed contact lookup client. Session is faked."""

import pytest
import requests

from profilescan.domain import NormalizedPhone
from profilescan.infrastructure import RequestsContactLookupClient


class FakeResponse:
    def __init__(self, status_code: int, text: str) -> None:
        self.status_code = status_code
        self.text = text


class FakeSession:
    def __init__(self, response=None, error: Exception | None = None) -> None:
        self.response = response or FakeResponse(200, "{}")
        self.error = error
        self.calls: list[dict] = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def test_get_contact_url_headers_and_timeout():
    session = FakeSession(FakeResponse(200, '{"profile": {}}'))
    client = RequestsContactLookupClient("https://wa.example/abc/", session=session)

    reply = client.fetch_contact(NormalizedPhone.from_raw("+34 612 345 678"))

    assert reply.status_code == 200
    assert reply.text == '{"profile": {}}'
    assert session.calls == [
        {
            "url": "https://wa.example/abc/contacts/34612345678",
            "headers": {"Accept": "application/json"},
            "timeout": 10.0,
        }
    ]


def test_custom_timeout_is_passed():
    session = FakeSession()
    client = RequestsContactLookupClient("https://wa.example", timeout=2.5, session=session)
    client.fetch_contact(NormalizedPhone(digits="1234567890"))
    assert session.calls[0]["timeout"] == 2.5


def test_non_success_status_is_returned_not_raised():
    session = FakeSession(FakeResponse(503, "unavailable"))
    client = RequestsContactLookupClient("https://wa.example", session=session)
    reply = client.fetch_contact(NormalizedPhone(digits="1234567890"))
    assert reply.status_code == 503
    assert reply.ok is False


def test_transport_errors_propagate_to_caller():
    session = FakeSession(error=requests.ConnectionError("refused"))
    client = RequestsContactLookupClient("https://wa.example", session=session)
    with pytest.raises(requests.ConnectionError):
        client.fetch_contact(NormalizedPhone(digits="1234567890"))
