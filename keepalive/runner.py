"""
keepalive.runner
AUTHOR: carter-vin

One keepalive run:
1) assemble targets (credential resolution may prompt)
2) write heartbeats, all targets concurrently, join
3) read heartbeats, all targets concurrently, join
4) summarize and map to an exit code

Exit policy:
- 0 if any write or read succeeded
- 1 if no targets are configured (no network calls are made)
- 1 if nothing succeeded or the run failed unexpectedly
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

import httpx

from keepalive.config import AGENT_VERSION, CREDENTIAL_KEYS, RunConfig
from keepalive.heartbeat import read_heartbeat, write_heartbeat
from keepalive.logging import emit_event
from keepalive.model import CallResult, RunSummary, Target
from keepalive.projects import assemble_targets
from keepalive.sources.base import Prompter, SecretStore

ResultCallback = Callable[[CallResult], None]


async def _fan_out(
    targets: list[Target],
    call: Callable[[Target], Awaitable[CallResult]],
    on_result: Optional[ResultCallback],
) -> list[CallResult]:
    """
    One task per target; returns results in target order once all finish
    """

    async def _one(target: Target) -> CallResult:
        result = await call(target)
        if on_result is not None:
            on_result(result)
        return result

    async with asyncio.TaskGroup() as tg:
        tasks = [tg.create_task(_one(target)) for target in targets]

    return [task.result() for task in tasks]


async def run_heartbeats(
    targets: list[Target],
    *,
    timeout_s: float,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    on_result: Optional[ResultCallback] = None,
) -> RunSummary:
    """
    Write to every target, then read from every target

    Reads start only after every write has finished.
    """
    async with httpx.AsyncClient(transport=transport, timeout=timeout_s) as client:
        writes = await _fan_out(
            targets,
            lambda target: write_heartbeat(client, target, timeout_s=timeout_s),
            on_result,
        )
        reads = await _fan_out(
            targets,
            lambda target: read_heartbeat(client, target, timeout_s=timeout_s),
            on_result,
        )

    return RunSummary(writes=writes, reads=reads)


def execute_run(
    config: RunConfig,
    store: SecretStore,
    prompter: Optional[Prompter] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    agent_version: str = AGENT_VERSION,
) -> int:
    """
    Run the full pipeline and return the process exit code

    Never raises for run failures; they are logged as run_fatal.
    """

    def _emit(event_type: str, **fields) -> None:
        emit_event(event_type, agent_version=agent_version, fmt=config.fmt, **fields)

    def _on_credential_error(event_type: str, key: str, e: Exception) -> None:
        _emit(event_type, key=key, error_type=type(e).__name__, message=str(e))

    def _on_result(result: CallResult) -> None:
        event_type = "heartbeat_write" if result.operation == "write" else "heartbeat_read"
        _emit(event_type, **result.to_fields())

    _emit(
        "run_start",
        interactive=config.interactive,
        secret_service=config.secret_service,
        timeout_s=config.timeout_s,
    )

    try:
        targets = assemble_targets(config, store, prompter, on_error=_on_credential_error)

        if not targets:
            _emit("config_missing", keys=list(CREDENTIAL_KEYS))
            return 1

        summary = asyncio.run(
            run_heartbeats(
                targets,
                timeout_s=config.timeout_s,
                transport=transport,
                on_result=_on_result,
            )
        )

        _emit("summary_insert", succeeded=summary.writes_ok, total=len(summary.writes))
        _emit("summary_read", succeeded=summary.reads_ok, total=len(summary.reads))

        return summary.exit_code

    except Exception as e:
        _emit("run_fatal", error_type=type(e).__name__, message=str(e))
        return 1

    finally:
        _emit("run_shutdown")
