"""
keepalive.projects
AUTHOR: carter-vin

Assemble the run's targets from resolved credentials
"""

from __future__ import annotations

from typing import Optional

from keepalive.config import (
    PROD_KEY_KEY,
    PROD_URL_KEY,
    STAGE_KEY_KEY,
    STAGE_URL_KEY,
    RunConfig,
)
from keepalive.model import Target
from keepalive.resolver import ErrorCallback, resolve_credential
from keepalive.sources.base import Prompter, SecretStore

# (name, url key, api key key) in run order
PROJECT_KEYS = (
    ("PROD", PROD_URL_KEY, PROD_KEY_KEY),
    ("STAGE", STAGE_URL_KEY, STAGE_KEY_KEY),
)


def assemble_targets(
    config: RunConfig,
    store: SecretStore,
    prompter: Optional[Prompter] = None,
    *,
    on_error: Optional[ErrorCallback] = None,
) -> list[Target]:
    """
    Resolve url + key per project, sequentially, and build Targets

    A project missing either value is skipped (not an error here;
    the caller decides what zero targets means).
    """
    targets: list[Target] = []

    for name, url_key, api_key_key in PROJECT_KEYS:
        url = resolve_credential(url_key, config, store, prompter, on_error=on_error)
        api_key = resolve_credential(api_key_key, config, store, prompter, on_error=on_error)

        if url.value and url.value.strip() and api_key.value and api_key.value.strip():
            targets.append(Target(name=name, endpoint=url.value, credential=api_key.value))

    return targets
