"""
keepalive.logging
AUTHOR: carter-vin

Event logging for keepalive runs

Contract:
- One line per event to stdout
- Stable event vocabulary (allowlist)
- UTC timestamps only
- Two renderings: compact JSON (ops ingestion) and text (operators / cron mail)
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

# Event types
VALID_EVENT_TYPES = {
    "run_start",
    "credential_store_failed",
    "credential_prompt_failed",
    "credential_persist_failed",
    "credential_forgotten",
    "config_missing",
    "heartbeat_write",
    "heartbeat_read",
    "summary_insert",
    "summary_read",
    "run_fatal",
    "run_shutdown",
}

VALID_FORMATS = {"text", "json"}


def _truncate_message(value: str, *, limit: int = 200) -> str:
    """
    Cap message length to keep events compact
    """
    if len(value) <= limit:
        return value
    return value[:limit] + f"...[truncated {len(value) - limit} chars]"


# Time: current in UTC ISO 8601
def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _call_line(payload: dict[str, Any], verb: str) -> str:
    prefix = f"[{payload['utc_now']}] [{payload.get('target', '?')}] {verb}"
    outcome = payload.get("outcome", "error")
    elapsed = f"time={payload.get('elapsed_ms')}ms"

    if outcome == "error":
        status = payload.get("status_code")
        status_part = f"status={status} " if status is not None else ""
        return f"{prefix} error {status_part}{elapsed}: {payload.get('error_type')}: {payload.get('message', '')}"

    line = f"{prefix} {outcome} status={payload.get('status_code')} {elapsed}"
    if outcome == "ok" and "body" in payload:
        line += " body=" + json.dumps(payload["body"], separators=(",", ":"))
    if outcome == "ok" and "count" in payload:
        line += f" count={payload['count']}"
    return line


def render_text(payload: dict[str, Any]) -> str | None:
    """
    Render an event payload as a single operator-readable line

    Returns None for events that have no text form (lifecycle noise)
    """
    event_type = payload["event_type"]

    if event_type == "heartbeat_write":
        return _call_line(payload, "write")
    if event_type == "heartbeat_read":
        return _call_line(payload, "read")
    if event_type == "summary_insert":
        return f"Summary Insert:\t{payload['succeeded']}/{payload['total']} succeeded"
    if event_type == "summary_read":
        return f"Summary Read:\t{payload['succeeded']}/{payload['total']} succeeded"
    if event_type == "config_missing":
        return (
            "Error: No projects configured. "
            "Set SUPABASE_PROD_URL/KEY and/or SUPABASE_STAGE_URL/KEY."
        )
    if event_type == "credential_store_failed":
        return f"Error accessing secrets for {payload.get('key')}: {payload.get('message', '')}"
    if event_type == "credential_prompt_failed":
        return f"Error prompting for {payload.get('key')}: {payload.get('message', '')}"
    if event_type == "credential_persist_failed":
        return f"Could not save {payload.get('key')} to keychain: {payload.get('message', '')}"
    if event_type == "credential_forgotten":
        state = "removed" if payload.get("removed") else "not stored"
        return f"{payload.get('key')}: {state}"
    if event_type == "run_fatal":
        return f"Fatal error: {payload.get('error_type')}: {payload.get('message', '')}"
    return None


def emit_event(event_type: str, *, agent_version: str, fmt: str = "json", **fields: Any) -> None:
    """
    Emit event line to stdout

    Rules:
    - event_type in VALID_EVENT_TYPES
    - event_type, agent_version, timestamp always present
    - json: sort_keys + compact separators for format
    - text: see render_text; events without a text form print nothing
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"invalid event_type: {event_type}")
    if fmt not in VALID_FORMATS:
        raise ValueError(f"invalid format: {fmt}")

    if "message" in fields and isinstance(fields["message"], str):
        # Avoid emitting long strings in event fields
        fields["message"] = _truncate_message(fields["message"])

    payload: dict[str, Any] = {
        "event_type": event_type,
        "utc_now": utc_now_iso(),
        "agent_version": agent_version,
        **fields,
    }

    if fmt == "text":
        line = render_text(payload)
        if line is not None:
            print(line)
        return

    print(
        json.dumps(
            payload,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
    )
