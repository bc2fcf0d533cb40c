"""
keepalive.sources.keychain
AUTHOR: carter-vin

OS keychain secret store
- backed by the `keyring` library (macOS Keychain, Secret Service, Windows Credential Locker)
- every entry lives under a single service name
- errors propagate; the resolver decides whether they are fatal
"""

from __future__ import annotations

from typing import Optional

import keyring
from keyring.errors import PasswordDeleteError


class KeyringStore:
    def __init__(self, service: str) -> None:
        if not service:
            raise ValueError("keyring service name is empty")
        self.service = service

    def get(self, key: str) -> Optional[str]:
        value = keyring.get_password(self.service, key)
        return value or None

    def set(self, key: str, value: str) -> None:
        keyring.set_password(self.service, key, value)

    def delete(self, key: str) -> bool:
        """
        Remove a stored entry

        Returns False when nothing was stored under key
        """
        try:
            keyring.delete_password(self.service, key)
        except PasswordDeleteError:
            return False
        return True

    def __repr__(self) -> str:
        return f"KeyringStore(service={self.service!r})"
