"""
keepalive.resolver
AUTHOR: carter-vin

Credential resolution with three tiers:
1) environment snapshot (RunConfig.env)
2) OS keychain (SecretStore)
3) interactive prompt, saved back to the keychain best-effort

First hit wins. Each tier is tried at most once; no retries.
Store/prompt failures are reported through on_error and treated as a miss.
"""

from __future__ import annotations

from typing import Callable, Optional

from keepalive.config import RunConfig
from keepalive.sources.base import (
    RESOLVED_NOT_PERSISTED,
    RESOLVED_PERSISTED,
    Prompter,
    Resolution,
    SecretStore,
)

# (event_type, key, exception)
ErrorCallback = Callable[[str, str, Exception], None]


def _report(on_error: Optional[ErrorCallback], event_type: str, key: str, e: Exception) -> None:
    if on_error is not None:
        on_error(event_type, key, e)


def resolve_silent(
    key: str,
    config: RunConfig,
    store: SecretStore,
    *,
    on_error: Optional[ErrorCallback] = None,
) -> Resolution:
    """
    Tiers 1 and 2 only; never blocks on the operator
    """
    from_env = config.env.get(key)
    if from_env:
        return Resolution(key=key, value=from_env, source="env", status=RESOLVED_NOT_PERSISTED)

    try:
        stored = store.get(key)
    except Exception as e:
        _report(on_error, "credential_store_failed", key, e)
        stored = None

    if stored:
        return Resolution(key=key, value=stored, source="store", status=RESOLVED_PERSISTED)

    return Resolution(key=key)


def resolve_credential(
    key: str,
    config: RunConfig,
    store: SecretStore,
    prompter: Optional[Prompter] = None,
    *,
    on_error: Optional[ErrorCallback] = None,
) -> Resolution:
    """
    Resolve one key through all tiers
    """
    silent = resolve_silent(key, config, store, on_error=on_error)
    if silent.resolved:
        return silent

    # Non-interactive runs (CI, cron) must never block
    if not config.interactive or prompter is None:
        return silent

    try:
        entered = prompter(key)
    except Exception as e:
        _report(on_error, "credential_prompt_failed", key, e)
        return silent

    if not entered:
        return silent

    try:
        store.set(key, entered)
    except Exception as e:
        _report(on_error, "credential_persist_failed", key, e)
        return Resolution(
            key=key,
            value=entered,
            source="prompt",
            status=RESOLVED_NOT_PERSISTED,
            error_type=type(e).__name__,
            error_message=str(e),
        )

    return Resolution(key=key, value=entered, source="prompt", status=RESOLVED_PERSISTED)
