"""
keepalive.sources.prompt
AUTHOR: carter-vin

Terminal prompt for missing credentials (local runs only)
"""

from __future__ import annotations

from typing import Optional

import typer

SECRET_SUFFIXES = ("_KEY",)


class TerminalPrompter:
    """
    Ask the operator for a value

    API keys are read with hidden input; URLs are echoed.
    Empty input means "skip".
    """

    def __call__(self, key: str) -> Optional[str]:
        entered = typer.prompt(
            f"Enter {key}",
            default="",
            show_default=False,
            hide_input=key.endswith(SECRET_SUFFIXES),
        )
        entered = entered.strip()
        return entered or None
