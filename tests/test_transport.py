"""Tests for the aiohttp transport against an in-process server."""

import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from pwnguard.pwned import (
    AiohttpTransport,
    ConnectionFailedError,
    MalformedResponseError,
    PwnedPasswordsClient,
)

from conftest import PASSWORD, RANGE_KEY, SELECTOR


def make_app(seen: dict, body: str | bytes = "", status: int = 200, delay: float = 0, headers=None) -> web.Application:
    payload = body.encode("utf-8") if isinstance(body, str) else body

    async def handler(request: web.Request) -> web.Response:
        seen["prefix"] = request.match_info["prefix"]
        seen["user_agent"] = request.headers.get("User-Agent")
        if delay:
            await asyncio.sleep(delay)
        return web.Response(body=payload, status=status, headers=headers)

    app = web.Application()
    app.router.add_get("/range/{prefix}", handler)
    return app


@pytest.mark.asyncio
async def test_fetch_returns_body_and_sends_headers():
    seen: dict = {}
    async with test_utils.TestServer(make_app(seen, body="AAA:1\r\nBBB:2")) as server:
        async with AiohttpTransport() as transport:
            body = await transport.fetch(
                str(server.make_url("/range/ABCDE")),
                {"User-Agent": "transport-test"},
                None,
                None,
            )

    assert body == b"AAA:1\r\nBBB:2"
    assert seen == {"prefix": "ABCDE", "user_agent": "transport-test"}


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404, 500, 503])
async def test_error_status_is_connection_failure(status):
    async with test_utils.TestServer(make_app({}, body="oops", status=status)) as server:
        async with AiohttpTransport() as transport:
            with pytest.raises(ConnectionFailedError) as exc:
                await transport.fetch(str(server.make_url("/range/ABCDE")), {}, None, None)

    assert f"HTTP {status}" in exc.value.detail


@pytest.mark.asyncio
async def test_rate_limited_reports_retry_after():
    app = make_app({}, status=429, headers={"Retry-After": "2"})
    async with test_utils.TestServer(app) as server:
        async with AiohttpTransport() as transport:
            with pytest.raises(ConnectionFailedError) as exc:
                await transport.fetch(str(server.make_url("/range/ABCDE")), {}, None, None)

    assert "Retry after 2s" in exc.value.detail


@pytest.mark.asyncio
async def test_response_timeout_is_connection_failure():
    async with test_utils.TestServer(make_app({}, body="AAA:1", delay=1)) as server:
        async with AiohttpTransport() as transport:
            with pytest.raises(ConnectionFailedError):
                await transport.fetch(str(server.make_url("/range/ABCDE")), {}, None, 0.2)


@pytest.mark.asyncio
async def test_refused_connection_is_connection_failure():
    async with AiohttpTransport() as transport:
        with pytest.raises(ConnectionFailedError):
            await transport.fetch("http://127.0.0.1:1/range/ABCDE", {}, 1, 2)


@pytest.mark.asyncio
async def test_client_end_to_end():
    seen: dict = {}
    body = f"0018A45C4D1DEF81644B54AB7F969B88D65:1\r\n{SELECTOR}:3861493\r\n"
    async with test_utils.TestServer(make_app(seen, body=body)) as server:
        config = {
            "endpoint": str(server.make_url("/range/")),
            "user_agent": "e2e",
            "remote_processing_timeout": 5,
        }
        async with PwnedPasswordsClient(config) as client:
            assert await client.count_for(PASSWORD) == 3861493

    assert seen == {"prefix": RANGE_KEY, "user_agent": "e2e"}


@pytest.mark.asyncio
async def test_invalid_utf8_body_is_malformed():
    body = b"AAA\xff\xfeBBB:1\nCCC:2"
    async with test_utils.TestServer(make_app({}, body=body)) as server:
        config = {"endpoint": str(server.make_url("/range/"))}
        async with PwnedPasswordsClient(config) as client:
            with pytest.raises(MalformedResponseError):
                await client.get_range("ABCDE")


@pytest.mark.asyncio
async def test_injected_session_left_open():
    import aiohttp

    async with aiohttp.ClientSession() as session:
        transport = AiohttpTransport(session)
        await transport.close()
        assert not session.closed


def test_sync_wrappers_raise_connection_failure():
    from pwnguard.pwned import count_for_sync, is_compromised_sync

    config = {"endpoint": "http://127.0.0.1:1/range/", "connection_timeout": 1}

    with pytest.raises(ConnectionFailedError):
        count_for_sync(PASSWORD, config)
    with pytest.raises(ConnectionFailedError):
        is_compromised_sync(PASSWORD, 0, config)
