from __future__ import annotations

from typing import Any

UNKNOWN_ERROR = "unknown_error"


class SlackCliError(Exception):
    """Base error for slackcli."""


class RequestError(SlackCliError):
    """A single Slack Web API call failed."""


class TransportError(RequestError):
    pass


class HttpStatusError(RequestError):
    def __init__(self, status_code: int, message: str, *, body: str = "") -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.body = body


class DecodeError(RequestError):
    pass


class ApiError(RequestError):
    """Raised when a response envelope reports ``ok: false``."""

    def __init__(self, code: str | None, *, details: dict[str, Any] | None = None) -> None:
        self.code = code or UNKNOWN_ERROR
        self.details = details or {}
        super().__init__(f"Slack API error: {self.code}")


class CredentialError(SlackCliError):
    pass


class StoreError(SlackCliError):
    pass


class ConfigError(SlackCliError):
    pass
