"""
keepalive.config
AUTHOR: carter-vin

Run configuration, built once at startup and passed explicitly.

Nothing below the CLI reads os.environ directly; the environment snapshot
lives on RunConfig.env so resolution can be tested without mutating the
process environment.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Mapping, Optional

from keepalive.logging import VALID_FORMATS

AGENT_VERSION = "0.1.0"

SECRET_SERVICE = "campuscup.cron-jobs.supabase"
DEFAULT_TIMEOUT_S = 10.0

SECRET_SERVICE_ENV = "KEEPALIVE_SECRET_SERVICE"
TIMEOUT_ENV = "KEEPALIVE_TIMEOUT_S"

# Resolution order is also target order: PROD first, then STAGE
PROD_URL_KEY = "SUPABASE_PROD_URL"
PROD_KEY_KEY = "SUPABASE_PROD_KEY"
STAGE_URL_KEY = "SUPABASE_STAGE_URL"
STAGE_KEY_KEY = "SUPABASE_STAGE_KEY"

CREDENTIAL_KEYS = (PROD_URL_KEY, PROD_KEY_KEY, STAGE_URL_KEY, STAGE_KEY_KEY)


@dataclass(frozen=True)
class RunConfig:
    """
    Inputs for one run.

    env:
    - snapshot of the process environment (tier 1 of credential resolution)
    interactive:
    - True only when attached to a TTY and prompting is not disabled
    fmt:
    - "text" | "json" event rendering
    """

    env: Mapping[str, str] = field(default_factory=dict)
    secret_service: str = SECRET_SERVICE
    timeout_s: float = DEFAULT_TIMEOUT_S
    interactive: bool = False
    fmt: str = "text"

    def __post_init__(self) -> None:
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if not self.secret_service:
            raise ValueError("secret_service must be non-empty")
        if self.fmt not in VALID_FORMATS:
            raise ValueError(f"fmt must be one of {sorted(VALID_FORMATS)}")

    @staticmethod
    def from_environ(
        *,
        environ: Optional[Mapping[str, str]] = None,
        timeout_s: Optional[float] = None,
        secret_service: Optional[str] = None,
        prompt: bool = True,
        fmt: str = "text",
        stdin_isatty: Optional[bool] = None,
    ) -> "RunConfig":
        """
        Build config from the process environment plus CLI overrides

        Precedence for tunables: explicit argument > env var > default
        """
        env = dict(os.environ if environ is None else environ)

        if timeout_s is None:
            raw_timeout = env.get(TIMEOUT_ENV, "").strip()
            try:
                timeout_s = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_S
            except ValueError:
                raise ValueError(f"{TIMEOUT_ENV} must be a number, got {raw_timeout!r}") from None

        if not secret_service:
            secret_service = env.get(SECRET_SERVICE_ENV) or SECRET_SERVICE

        if stdin_isatty is None:
            stdin_isatty = sys.stdin is not None and sys.stdin.isatty()

        return RunConfig(
            env=env,
            secret_service=secret_service,
            timeout_s=timeout_s,
            interactive=bool(prompt and stdin_isatty),
            fmt=fmt,
        )
