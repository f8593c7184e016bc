from __future__ import annotations

from abc import ABC, abstractmethod

import typer


class TokenPrompt(ABC):
    @abstractmethod
    def ask(self) -> str:
        """Return the raw token text entered by the user."""


class InteractiveTokenPrompt(TokenPrompt):
    """Masked terminal prompt for a Slack token."""

    def __init__(self, token_hint: str = "xoxp-…") -> None:
        self.label = f"Slack token ({token_hint})"

    def ask(self) -> str:
        return str(typer.prompt(self.label, hide_input=True))
