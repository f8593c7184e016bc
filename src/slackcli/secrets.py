from __future__ import annotations

import logging
from typing import Protocol

import keyring
from keyring.errors import KeyringError

from .errors import StoreError

logger = logging.getLogger(__name__)


class SecretStore(Protocol):
    def get(self) -> str | None: ...

    def set(self, secret: str) -> None: ...

    def clear(self) -> None: ...


def build_keyring_ref(service: str, account: str) -> str:
    """Return the ``SERVICE:ACCOUNT`` reference shown to users."""

    return f"{service}:{account}"


class KeyringSecretStore:
    """One secret in the system keyring, addressed by ``service`` and ``account``."""

    def __init__(self, service: str, account: str) -> None:
        self.service = service
        self.account = account

    @property
    def ref(self) -> str:
        return build_keyring_ref(self.service, self.account)

    def get(self) -> str | None:
        """Return the stored secret, or ``None`` when there is no usable entry.

        A cleared entry holds an empty string and is reported as missing.
        """

        try:
            value = keyring.get_password(self.service, self.account)
        except KeyringError as exc:
            raise StoreError(f"keyring read error: {exc}") from exc
        if value is None or not value.strip():
            logger.debug("No secret stored for %s", self.ref)
            return None
        return value

    def set(self, secret: str) -> None:
        try:
            keyring.set_password(self.service, self.account, secret)
        except KeyringError as exc:
            raise StoreError(f"keyring write error: {exc}") from exc
        logger.debug("Stored secret for %s", self.ref)

    def clear(self) -> None:
        # Not every backend can delete entries, so clearing overwrites with "".
        try:
            keyring.set_password(self.service, self.account, "")
        except KeyringError as exc:
            raise StoreError(f"keyring delete/overwrite error: {exc}") from exc
        logger.debug("Cleared secret for %s", self.ref)
