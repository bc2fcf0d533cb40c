"""
Shared fakes: in-memory secret store and scripted prompter
"""

from typing import Optional

import pytest


class MemoryStore:
    """
    SecretStore double that records every call
    """

    def __init__(
        self,
        values=None,
        *,
        fail_get: bool = False,
        fail_set: bool = False,
        fail_delete: bool = False,
    ) -> None:
        self.values = dict(values or {})
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.fail_delete = fail_delete
        self.get_calls: list[str] = []
        self.set_calls: list[str] = []

    def get(self, key: str) -> Optional[str]:
        self.get_calls.append(key)
        if self.fail_get:
            raise RuntimeError("keychain unavailable")
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_calls.append(key)
        if self.fail_set:
            raise PermissionError("keychain locked")
        self.values[key] = value

    def delete(self, key: str) -> bool:
        if self.fail_delete:
            raise RuntimeError("No recommended backend was available")
        return self.values.pop(key, None) is not None


class ScriptedPrompter:
    def __init__(self, answers=None, *, error: Optional[Exception] = None) -> None:
        self.answers = dict(answers or {})
        self.error = error
        self.calls: list[str] = []

    def __call__(self, key: str) -> Optional[str]:
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        return self.answers.get(key)


@pytest.fixture
def make_store():
    return MemoryStore


@pytest.fixture
def make_prompter():
    return ScriptedPrompter


@pytest.fixture
def full_env() -> dict[str, str]:
    return {
        "SUPABASE_PROD_URL": "https://prod.supabase.test",
        "SUPABASE_PROD_KEY": "prod-key",
        "SUPABASE_STAGE_URL": "https://stage.supabase.test/",
        "SUPABASE_STAGE_KEY": "stage-key",
    }
