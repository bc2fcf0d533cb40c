"""
keepalive.heartbeat
AUTHOR: carter-vin

Heartbeat calls against a project's REST endpoint:
- write: POST {endpoint}/rest/v1/heartbeat (insert one row)
- read:  GET  {endpoint}/rest/v1/heartbeat (list rows)

Failure semantics:
- both calls return a CallResult and never raise
- each call is bounded by timeout_s; on expiry the request is cancelled
- success = HTTP 2xx (read additionally needs a JSON list body)
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

import httpx

from keepalive.config import DEFAULT_TIMEOUT_S
from keepalive.logging import utc_now_iso
from keepalive.model import CallResult, Target


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _error_result(target: Target, operation: str, start: float, e: BaseException, timeout_s: float) -> CallResult:
    if isinstance(e, asyncio.TimeoutError):
        error_type = "TimeoutError"
        message = f"no response within {timeout_s:g}s"
    else:
        error_type = type(e).__name__
        message = str(e) or repr(e)
    return CallResult(
        target=target.name,
        operation=operation,
        ok=False,
        elapsed_ms=_elapsed_ms(start),
        error_type=error_type,
        error_message=message,
    )


async def write_heartbeat(
    client: httpx.AsyncClient,
    target: Target,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    now: Callable[[], str] = utc_now_iso,
) -> CallResult:
    """
    Insert one heartbeat row

    The response body is decoded for logging only; an undecodable 2xx body
    still counts as success.
    """
    headers = {
        **target.auth_headers(),
        "Content-Type": "application/json",
        "Prefer": "return=representation",
    }
    payload = {"created_at": now()}

    start = time.monotonic()
    try:
        res = await asyncio.wait_for(
            client.post(target.heartbeat_url, headers=headers, json=payload),
            timeout=timeout_s,
        )
    except Exception as e:
        return _error_result(target, "write", start, e, timeout_s)

    elapsed_ms = _elapsed_ms(start)

    if not _is_success(res.status_code):
        return CallResult(
            target=target.name,
            operation="write",
            ok=False,
            elapsed_ms=elapsed_ms,
            status_code=res.status_code,
        )

    try:
        body = res.json()
    except ValueError:
        body = None

    return CallResult(
        target=target.name,
        operation="write",
        ok=True,
        elapsed_ms=elapsed_ms,
        status_code=res.status_code,
        body=body,
    )


async def read_heartbeat(
    client: httpx.AsyncClient,
    target: Target,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
) -> CallResult:
    """
    List heartbeat rows and report how many came back
    """
    start = time.monotonic()
    try:
        res = await asyncio.wait_for(
            client.get(target.heartbeat_url, headers=target.auth_headers()),
            timeout=timeout_s,
        )
    except Exception as e:
        return _error_result(target, "read", start, e, timeout_s)

    elapsed_ms = _elapsed_ms(start)

    if not _is_success(res.status_code):
        return CallResult(
            target=target.name,
            operation="read",
            ok=False,
            elapsed_ms=elapsed_ms,
            status_code=res.status_code,
        )

    try:
        records = res.json()
    except ValueError:
        records = None

    if not isinstance(records, list):
        return CallResult(
            target=target.name,
            operation="read",
            ok=False,
            elapsed_ms=elapsed_ms,
            status_code=res.status_code,
            error_type="ValueError",
            error_message="response body is not a JSON list",
        )

    return CallResult(
        target=target.name,
        operation="read",
        ok=True,
        elapsed_ms=elapsed_ms,
        status_code=res.status_code,
        records=records,
    )
