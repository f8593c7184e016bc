from __future__ import annotations

import logging
import os
from types import TracebackType
from typing import Any

import httpx

from . import __version__
from .errors import HttpStatusError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://slack.com/api"
API_BASE_ENV_VAR = "SLACK_API_BASE"
USER_AGENT = f"slackcli/{__version__} (+https://example.local)"


def resolve_api_base(override: str | None = None) -> str:
    """Return the Web API root: ``override``, then ``SLACK_API_BASE``, then the default."""

    base = override or os.getenv(API_BASE_ENV_VAR) or DEFAULT_API_BASE
    return base.rstrip("/")


class HttpClient:
    """Thin httpx wrapper that sets the user agent and maps failures to slackcli errors."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        user_agent: str = USER_AGENT,
    ) -> None:
        self.base_url = resolve_api_base(base_url)
        self._client = httpx.Client(headers={"User-Agent": user_agent})

    def request(
        self,
        method: str,
        path: str,
        *,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            resp = self._client.request(method, url, data=data, headers=headers)
        except httpx.TransportError as e:
            raise TransportError(f"Transport error calling {url}: {e}") from e

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        if not resp.is_success:
            raise HttpStatusError(resp.status_code, resp.reason_phrase, body=resp.text)
        return resp

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def close(self) -> None:
        """Close the underlying :class:`httpx.Client`."""

        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
