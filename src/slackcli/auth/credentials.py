from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from ..clients.slack import SlackClient
from ..errors import ApiError, CredentialError, RequestError
from ..models.slack import Identity
from ..secrets import SecretStore
from .base import TokenPrompt

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "SLACK_TOKEN"
INIT_MAX_ATTEMPTS = 3

TokenSource = Literal["env", "store", "prompt", "argument"]


@dataclass(frozen=True)
class TokenResult:
    token: str = field(repr=False)
    source: TokenSource = "env"
    identity: Identity | None = None


def _normalize(raw: str) -> str:
    token = raw.strip()
    if not token:
        raise CredentialError("Token must not be empty")
    return token


class CredentialManager:
    """Obtain a working Slack token for one invocation.

    Resolution order:

    1. ``SLACK_TOKEN`` (trimmed, non-empty) is used as-is, without touching the
       store or the network.
    2. A stored token is validated with ``auth.test`` and returned when valid.
       A failed validation *request* propagates; only an ``ok: false`` answer
       falls through to prompting.
    3. The user is prompted, the answer is stored, then validated. This step is
       repeated up to ``max_attempts`` times.
    """

    def __init__(
        self,
        store: SecretStore,
        client: SlackClient,
        prompt: TokenPrompt,
        *,
        env_var: str = TOKEN_ENV_VAR,
        warn: Callable[[str], None] | None = None,
    ) -> None:
        self.store = store
        self.client = client
        self.prompt = prompt
        self.env_var = env_var
        self._warn = warn or (lambda message: logger.warning("%s", message))

    def env_override(self) -> str | None:
        value = os.getenv(self.env_var)
        if value is None:
            return None
        return value.strip() or None

    def reset(self) -> None:
        """Clear the stored token."""

        self.store.clear()
        logger.info("Cleared stored token")

    def ensure_token(self, *, max_attempts: int = 1) -> str:
        return self.resolve(max_attempts=max_attempts).token

    def resolve(self, *, max_attempts: int = 1) -> TokenResult:
        override = self.env_override()
        if override:
            logger.debug("Using token from %s; skipping validation", self.env_var)
            return TokenResult(override, "env")

        stored = self.store.get()
        if stored:
            identity = self.client.auth_test(stored)
            if identity.ok:
                logger.debug("Stored token is valid for team %s", identity.team_id)
                return TokenResult(stored, "store", identity)
            logger.info("Stored token was rejected: %s", identity.error or "invalid_auth")

        return self.acquire(max_attempts=max_attempts)

    def acquire(self, *, max_attempts: int = 1) -> TokenResult:
        """Prompt, store and validate a token, up to ``max_attempts`` times.

        With a single attempt the validation failure is raised unchanged. With
        more, each failure is reported through ``warn`` and a
        :class:`CredentialError` is raised once the attempts run out.
        """

        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        for attempt in range(1, max_attempts + 1):
            token = _normalize(self.prompt.ask())
            self.store.set(token)
            try:
                identity = self._validate(token)
            except RequestError as exc:
                if max_attempts == 1:
                    raise
                if isinstance(exc, ApiError):
                    self._warn(f"Token didn't validate: {exc.code}")
                else:
                    self._warn(f"Validation call failed: {exc}")
                logger.debug("Token attempt %d/%d failed", attempt, max_attempts)
                continue
            return TokenResult(token, "prompt", identity)

        raise CredentialError("Could not obtain a working token.")

    def force_set(self, token: str | None = None) -> TokenResult:
        """Store ``token`` (or a prompted one) and validate it exactly once."""

        if token is None:
            value = _normalize(self.prompt.ask())
            source: TokenSource = "prompt"
        else:
            value = _normalize(token)
            source = "argument"
        self.store.set(value)
        return TokenResult(value, source, self._validate(value))

    def initialize(
        self, *, token: str | None = None, force: bool = False, reset: bool = False
    ) -> TokenResult:
        if reset:
            self.reset()
        if force or token is not None:
            return self.force_set(token)
        return self.resolve(max_attempts=INIT_MAX_ATTEMPTS)

    def _validate(self, token: str) -> Identity:
        identity = self.client.auth_test(token)
        if not identity.ok:
            raise ApiError(identity.error or "invalid_auth")
        return identity
