"""
keepalive.main
------------
AUTHOR: carter-vin

PURPOSE:
- Keep PROD and STAGE Supabase projects awake (write + read a heartbeat row)
- Manage locally stored credentials (OS keychain)

Usage:
- Local: `supabase-keepalive run` prompts for missing values and saves them to the keychain
- CI/cron: set SUPABASE_PROD_URL, SUPABASE_PROD_KEY, SUPABASE_STAGE_URL, SUPABASE_STAGE_KEY

Key contract:
- `supabase-keepalive run` exits 0 if any heartbeat call succeeded, else 1
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import typer

from keepalive.config import AGENT_VERSION, CREDENTIAL_KEYS, RunConfig
from keepalive.logging import emit_event
from keepalive.resolver import resolve_silent
from keepalive.runner import execute_run
from keepalive.sources.keychain import KeyringStore
from keepalive.sources.prompt import TerminalPrompter

# Explicit multi-command CLI
app = typer.Typer(
    add_completion=False,
    help="supabase-keepalive: keep hosted Supabase projects from pausing",
)

# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    """

    python_version: str
    os: str
    machine: str
    utc_now: str


def collect_environment_info() -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


def _build_config(
    *,
    timeout: Optional[float],
    secret_service: Optional[str],
    no_prompt: bool,
    fmt: str,
) -> RunConfig:
    try:
        return RunConfig.from_environ(
            timeout_s=timeout,
            secret_service=secret_service,
            prompt=not no_prompt,
            fmt=fmt,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: supabase-keepalive --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version() -> None:
    """
    Print version & runtime env
    """
    env = collect_environment_info()

    typer.echo(f"supabase-keepalive v{AGENT_VERSION}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("run")
def run(
    timeout: Optional[float] = typer.Option(
        None,
        help="Per-call timeout in seconds (default 10, or KEEPALIVE_TIMEOUT_S).",
        min=0.001,
    ),
    secret_service: Optional[str] = typer.Option(
        None,
        help="Keychain service name (default campuscup.cron-jobs.supabase, or KEEPALIVE_SECRET_SERVICE).",
    ),
    no_prompt: bool = typer.Option(
        False,
        "--no-prompt",
        help="Never prompt for missing credentials, even on a TTY.",
    ),
    fmt: str = typer.Option(
        "text",
        "--format",
        help="Log format: text or json.",
    ),
) -> None:
    """
    Write and read a heartbeat row on every configured project

    Exit codes:
    - 0: at least one write or read succeeded
    - 1: no projects configured, nothing succeeded, or a fatal error
    """
    if fmt not in ("text", "json"):
        raise typer.BadParameter("--format must be 'text' or 'json'")

    config = _build_config(
        timeout=timeout,
        secret_service=secret_service,
        no_prompt=no_prompt,
        fmt=fmt,
    )

    store = KeyringStore(config.secret_service)
    prompter = TerminalPrompter() if config.interactive else None

    code = execute_run(config, store, prompter)
    raise typer.Exit(code=code)


@app.command("sources")
def sources(
    secret_service: Optional[str] = typer.Option(
        None,
        help="Keychain service name.",
    ),
) -> None:
    """
    Show where each credential would come from (values are never printed)
    """
    config = _build_config(timeout=None, secret_service=secret_service, no_prompt=True, fmt="text")
    store = KeyringStore(config.secret_service)

    def _on_error(event_type: str, key: str, e: Exception) -> None:
        emit_event(
            event_type,
            agent_version=AGENT_VERSION,
            fmt=config.fmt,
            key=key,
            error_type=type(e).__name__,
            message=str(e),
        )

    missing = 0
    for key in CREDENTIAL_KEYS:
        resolution = resolve_silent(key, config, store, on_error=_on_error)
        if not resolution.resolved:
            missing += 1
        typer.echo(f"{key}: {resolution.source or 'missing'}")

    if missing == len(CREDENTIAL_KEYS):
        raise typer.Exit(code=1)


@app.command("forget")
def forget(
    keys: Optional[List[str]] = typer.Argument(
        None,
        help="Keys to remove from the keychain (default: all four).",
    ),
    secret_service: Optional[str] = typer.Option(
        None,
        help="Keychain service name.",
    ),
) -> None:
    """
    Delete stored credentials from the keychain
    """
    selected = list(keys) if keys else list(CREDENTIAL_KEYS)
    unknown = [key for key in selected if key not in CREDENTIAL_KEYS]
    if unknown:
        raise typer.BadParameter(f"unknown key(s): {', '.join(unknown)}")

    config = _build_config(timeout=None, secret_service=secret_service, no_prompt=True, fmt="text")
    store = KeyringStore(config.secret_service)

    failed = 0
    for key in selected:
        try:
            removed = store.delete(key)
        except Exception as e:
            # Keychain unavailable or locked: report and keep going
            failed += 1
            emit_event(
                "credential_store_failed",
                agent_version=AGENT_VERSION,
                fmt=config.fmt,
                key=key,
                error_type=type(e).__name__,
                message=str(e),
            )
            continue

        emit_event(
            "credential_forgotten",
            agent_version=AGENT_VERSION,
            fmt=config.fmt,
            key=key,
            removed=removed,
            secret_service=config.secret_service,
        )

    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
