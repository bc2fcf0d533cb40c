"""
Contract tests for heartbeat write/read calls

Network is replaced with httpx.MockTransport; no real requests are made.
"""

import asyncio
import json

import httpx

from keepalive.heartbeat import read_heartbeat, write_heartbeat
from keepalive.model import Target

TARGET = Target(name="PROD", endpoint="https://prod.supabase.test/", credential="prod-key")


def _run(handler, call, **kwargs):
    async def _go():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await call(client, TARGET, **kwargs)

    return asyncio.run(_go())


def test_write_request_shape() -> None:
    """
    POST to the heartbeat resource with both auth headers and a timestamp body
    """
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=[{"id": 1, "created_at": "2026-01-01T00:00:00+00:00"}])

    result = _run(handler, write_heartbeat, now=lambda: "2026-01-01T00:00:00+00:00")

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://prod.supabase.test/rest/v1/heartbeat"
    assert request.headers["Authorization"] == "Bearer prod-key"
    assert request.headers["apikey"] == "prod-key"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Prefer"] == "return=representation"
    assert json.loads(request.content) == {"created_at": "2026-01-01T00:00:00+00:00"}

    assert result.ok
    assert result.status_code == 201
    assert result.body == [{"id": 1, "created_at": "2026-01-01T00:00:00+00:00"}]


def test_write_malformed_2xx_body_still_succeeds() -> None:
    """
    Success is classified by status alone
    """
    result = _run(lambda request: httpx.Response(201, content=b"<not json>"), write_heartbeat)

    assert result.ok
    assert result.body is None
    assert result.outcome == "ok"


def test_write_non_2xx_fails() -> None:
    result = _run(lambda request: httpx.Response(500, json={"message": "boom"}), write_heartbeat)

    assert not result.ok
    assert result.status_code == 500
    assert result.outcome == "failed"


def test_write_transport_error_is_absorbed() -> None:
    """
    Connection errors become a failed result, not an exception
    """

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _run(handler, write_heartbeat)

    assert not result.ok
    assert result.status_code is None
    assert result.error_type == "ConnectError"
    assert result.outcome == "error"


def test_write_timeout_is_aborted_and_counted_as_failure() -> None:
    """
    A call exceeding the bound is cancelled and reported as TimeoutError
    """

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(201)

    result = _run(handler, write_heartbeat, timeout_s=0.05)

    assert not result.ok
    assert result.error_type == "TimeoutError"
    assert result.elapsed_ms < 5000


def test_read_request_shape_and_count() -> None:
    """
    GET with both auth headers and no body; count reflects the list length
    """
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}, {"id": 2}])

    result = _run(handler, read_heartbeat)

    request = seen[0]
    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer prod-key"
    assert request.headers["apikey"] == "prod-key"
    assert request.content == b""

    assert result.ok
    assert result.count == 2


def test_read_non_list_body_fails() -> None:
    result = _run(lambda request: httpx.Response(200, json={"rows": []}), read_heartbeat)

    assert not result.ok
    assert result.records is None
    assert result.error_type == "ValueError"


def test_read_timeout_uses_same_bound() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json=[])

    result = _run(handler, read_heartbeat, timeout_s=0.05)

    assert not result.ok
    assert result.error_type == "TimeoutError"
