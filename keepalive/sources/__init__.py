"""keepalive.sources package exports."""

from keepalive.sources.base import (
    RESOLVED_NOT_PERSISTED,
    RESOLVED_PERSISTED,
    UNRESOLVED,
    Prompter,
    Resolution,
    SecretStore,
)
from keepalive.sources.keychain import KeyringStore
from keepalive.sources.prompt import TerminalPrompter

__all__ = [
    "KeyringStore",
    "Prompter",
    "RESOLVED_NOT_PERSISTED",
    "RESOLVED_PERSISTED",
    "Resolution",
    "SecretStore",
    "TerminalPrompter",
    "UNRESOLVED",
]
