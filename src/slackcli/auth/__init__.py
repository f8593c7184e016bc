from .base import InteractiveTokenPrompt, TokenPrompt
from .credentials import (
    INIT_MAX_ATTEMPTS,
    TOKEN_ENV_VAR,
    CredentialManager,
    TokenResult,
)

__all__ = [
    "CredentialManager",
    "INIT_MAX_ATTEMPTS",
    "InteractiveTokenPrompt",
    "TOKEN_ENV_VAR",
    "TokenPrompt",
    "TokenResult",
]
