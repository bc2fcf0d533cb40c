"""
keepalive.sources.base
AUTHOR: carter-vin

Credential source contracts + resolution result
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol

RESOLVED_PERSISTED = "resolved_persisted"
RESOLVED_NOT_PERSISTED = "resolved_not_persisted"
UNRESOLVED = "unresolved"

VALID_STATUSES = {RESOLVED_PERSISTED, RESOLVED_NOT_PERSISTED, UNRESOLVED}


class SecretStore(Protocol):
    """
    Namespaced persistent secret storage (OS keychain in production)
    """

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> bool: ...


class Prompter(Protocol):
    """
    Interactive fallback; returns None or "" when nothing was entered
    """

    def __call__(self, key: str) -> Optional[str]: ...


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving one configuration key
    - source: "env" | "store" | "prompt" | None
    - status: persisted / not persisted / unresolved
    - error_*: set when a prompted value could not be saved
    """

    key: str
    value: Optional[str] = None
    source: Optional[str] = None
    status: str = UNRESOLVED
    error_type: Optional[str] = None
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status not in VALID_STATUSES:
            raise ValueError(f"status must be: {sorted(VALID_STATUSES)}")
        if (self.status == UNRESOLVED) != (self.value is None):
            raise ValueError("value must be set exactly when resolved")

    @property
    def resolved(self) -> bool:
        return self.status != UNRESOLVED

    @property
    def persisted(self) -> bool:
        return self.status == RESOLVED_PERSISTED
