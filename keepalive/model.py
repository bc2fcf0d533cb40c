"""
keepalive.model
AUTHOR: carter-vin

Run data model: targets, per-call results, run summary.

Design goals:
- Targets are immutable and validated on construction
- Call failures are data (CallResult), never exceptions
- Explicit serialization (no accidental __dict__ dumps, never the credential)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

HEARTBEAT_PATH = "/rest/v1/heartbeat"

VALID_TARGET_NAMES = ("PROD", "STAGE")
VALID_OPERATIONS = {"write", "read"}


@dataclass(frozen=True)
class Target:
    """
    One hosted Supabase project to keep warm
    - name: "PROD" | "STAGE"
    - endpoint: project base URL (trailing slash stripped)
    - credential: API key, sent as bearer token and apikey header
    """

    name: str
    endpoint: str
    credential: str = field(repr=False)

    def __post_init__(self) -> None:
        if self.name not in VALID_TARGET_NAMES:
            raise ValueError(f"target name must be one of {list(VALID_TARGET_NAMES)}")
        if not self.endpoint or not self.endpoint.strip():
            raise ValueError(f"{self.name}: endpoint is empty")
        if not self.credential or not self.credential.strip():
            raise ValueError(f"{self.name}: credential is empty")

        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "endpoint", self.endpoint.strip().rstrip("/"))

    @property
    def heartbeat_url(self) -> str:
        return f"{self.endpoint}{HEARTBEAT_PATH}"

    def auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.credential}",
            "apikey": self.credential,
        }


@dataclass(frozen=True)
class CallResult:
    """
    Outcome of one heartbeat call

    ok=False with status_code set -> non-2xx response
    ok=False with status_code None -> transport error / timeout
    """

    target: str
    operation: str
    ok: bool
    elapsed_ms: int
    status_code: Optional[int] = None
    body: Any = None
    records: Optional[list[Any]] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.operation not in VALID_OPERATIONS:
            raise ValueError(f"operation must be: {sorted(VALID_OPERATIONS)}")

    @property
    def count(self) -> Optional[int]:
        if self.records is None:
            return None
        return len(self.records)

    @property
    def outcome(self) -> str:
        if self.ok:
            return "ok"
        if self.error_type is not None:
            return "error"
        return "failed"

    def to_fields(self) -> dict[str, Any]:
        """
        Event fields for this call (see keepalive.logging)
        """
        fields: dict[str, Any] = {
            "target": self.target,
            "outcome": self.outcome,
            "status_code": self.status_code,
            "elapsed_ms": self.elapsed_ms,
        }
        if self.ok and self.operation == "write":
            fields["body"] = self.body
        if self.ok and self.operation == "read":
            fields["count"] = self.count
        if self.error_type is not None:
            fields["error_type"] = self.error_type
            fields["message"] = self.error_message or ""
        return fields


@dataclass(frozen=True)
class RunSummary:
    """
    Aggregated results for one run
    """

    writes: list[CallResult]
    reads: list[CallResult]

    @property
    def writes_ok(self) -> int:
        return sum(1 for result in self.writes if result.ok)

    @property
    def reads_ok(self) -> int:
        return sum(1 for result in self.reads if result.ok)

    @property
    def succeeded(self) -> int:
        return self.writes_ok + self.reads_ok

    @property
    def exit_code(self) -> int:
        # Any single successful call keeps the backend awake
        return 0 if self.succeeded > 0 else 1
