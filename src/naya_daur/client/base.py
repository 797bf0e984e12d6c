"""Shared plumbing for clients of the generative-language REST API."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING, Any

import httpx

from naya_daur.config import FrozenConfig, resolve_config
from naya_daur.exceptions import MissingKeyError
from naya_daur.telemetry import TelemetryContext

from .backoff import fetch_with_backoff, redact_url

if TYPE_CHECKING:
    from naya_daur.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)


class BaseGeminiClient:
    """Holds the API key, frozen configuration and HTTP client for a caller.

    The API key is always passed explicitly; it is never looked up from
    ambient state, so two clients with different keys can run side by side.
    An ``httpx.AsyncClient`` may be injected. Otherwise a short-lived client
    is opened per operation and closed when it finishes.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        config: FrozenConfig | None = None,
        client: httpx.AsyncClient | None = None,
        telemetry: TelemetryContextProtocol | None = None,
        **config_overrides: Any,
    ) -> None:
        if not api_key or not api_key.strip():
            raise MissingKeyError(
                "An API key is required. Pass api_key explicitly or set GEMINI_API_KEY."
            )
        self._api_key = api_key.strip()
        if config is None:
            config = resolve_config(config_overrides).to_frozen()
        elif config_overrides:
            raise TypeError("Pass either config or keyword overrides, not both")
        self.config = config
        self._client = client
        self._tele: TelemetryContextProtocol = telemetry or TelemetryContext()

    def endpoint(self, model: str, method: str) -> httpx.URL:
        """URL for ``models/{model}:{method}`` with the key as query parameter."""
        return httpx.URL(
            f"{self.config.base_url}/models/{model}:{method}",
            params={"key": self._api_key},
        )

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self.config.request_timeout) as client:
            yield client

    async def _post(
        self, client: httpx.AsyncClient, url: httpx.URL, payload: Mapping[str, Any]
    ) -> Any:
        log.debug("POST %s", redact_url(url))
        return await fetch_with_backoff(
            client,
            url,
            payload=payload,
            retries=self.config.max_retries,
            initial_delay=self.config.retry_initial_delay,
            max_delay=self.config.retry_max_delay,
            telemetry=self._tele,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} config={self.config!r}>"
