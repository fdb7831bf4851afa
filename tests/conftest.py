"""Shared fixtures for pwnguard tests."""

import pytest

from pwnguard.pwned import PwnedConfig, PwnedPasswordsClient

# SHA-1("password1234") = E6B6A FBD6D76BB5D2041542D7D2E3FAC5BB05593
PASSWORD = "password1234"
RANGE_KEY = "E6B6A"
SELECTOR = "FBD6D76BB5D2041542D7D2E3FAC5BB05593"


class FakeTransport:
    """In-memory transport recording every fetch."""

    def __init__(self, body: str | bytes = "", error: Exception | None = None):
        self.body = body
        self.error = error
        self.calls: list[dict] = []

    async def fetch(self, url, headers, connect_timeout, response_timeout):
        self.calls.append({
            "url": url,
            "headers": headers,
            "connect_timeout": connect_timeout,
            "response_timeout": response_timeout,
        })
        if self.error is not None:
            raise self.error
        return self.body


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PWNGUARD_* variables from the host out of every test."""
    for name in PwnedConfig.option_names():
        monkeypatch.delenv(f"PWNGUARD_{name.upper()}", raising=False)


@pytest.fixture
def fake_transport():
    """Factory for FakeTransport instances."""
    return FakeTransport


@pytest.fixture
def range_body():
    """Range response containing the test password with 42 occurrences."""
    return (
        "0018A45C4D1DEF81644B54AB7F969B88D65:1\r\n"
        f"{SELECTOR}:42\r\n"
        "00D4F6E8FA6EECAD2A3AA415EEC418D38EC:2\r\n"
    )


@pytest.fixture
def make_client(fake_transport):
    """Build a client around a fake transport: make_client(body=..., error=..., config=...)."""
    def _make(body: str | bytes = "", error: Exception | None = None, config=None):
        transport = fake_transport(body=body, error=error)
        return PwnedPasswordsClient(config, transport=transport), transport

    return _make
