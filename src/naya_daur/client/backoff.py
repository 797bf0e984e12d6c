"""HTTP fetch with exponential backoff for the generation API.

Only rate limiting (HTTP 429) and request-level httpx failures are retried.
Every other non-2xx status is surfaced at once as an ``APIError`` carrying
the richest message the response offers.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from typing import TYPE_CHECKING, Any

import httpx

from naya_daur.constants import MAX_RETRIES, RATE_LIMIT_STATUS, RETRY_INITIAL_DELAY
from naya_daur.exceptions import APIError, NetworkError, ResponseParseError
from naya_daur.telemetry import TelemetryContext

if TYPE_CHECKING:
    from naya_daur.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)

T_BACKOFF_FETCH = "backoff.fetch"


@dataclass(slots=True)
class RetryState:
    """Retry budget for one top-level fetch.

    Owned by a single call; never shared between concurrent requests.
    """

    attempts_remaining: int
    current_delay: float
    max_delay: float | None = None

    @property
    def exhausted(self) -> bool:
        return self.attempts_remaining <= 0

    def advance(self) -> float:
        """Consume one retry and return the delay to wait before it."""
        delay = self.current_delay
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        self.attempts_remaining -= 1
        self.current_delay *= 2
        return delay


def redact_url(url: httpx.URL | str) -> str:
    """Render a request URL without its ``key`` query parameter."""
    return str(httpx.URL(url).copy_remove_param("key"))


def extract_error_message(response: httpx.Response) -> str:
    """Best available human-readable message for an error response.

    Prefers ``{"error": {"message": ...}}`` from the body and falls back to
    the status text when the body is not JSON or carries no message.
    """
    detailed = response.reason_phrase
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None

    log.error("API error response body (%d): %s", response.status_code, body)

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            detailed = str(error["message"])
    return detailed


async def fetch_with_backoff(
    client: httpx.AsyncClient,
    url: httpx.URL | str,
    *,
    payload: Mapping[str, Any],
    retries: int = MAX_RETRIES,
    initial_delay: float = RETRY_INITIAL_DELAY,
    max_delay: float | None = None,
    telemetry: TelemetryContextProtocol | None = None,
) -> Any:
    """POST ``payload`` as JSON to ``url`` and return the decoded JSON body.

    Args:
        client: HTTP client used for the request.
        url: Full endpoint URL, including any query parameters.
        payload: JSON request body.
        retries: Retries allowed after the first attempt. ``0`` means exactly
            one attempt with no delay.
        initial_delay: Seconds to wait before the first retry. The delay
            doubles after each retry.
        max_delay: Optional cap on a single delay. ``None`` leaves the
            doubling uncapped.
        telemetry: Optional telemetry context.

    Raises:
        APIError: For a non-2xx response that is not retried, including a
            429 once retries are exhausted.
        NetworkError: When the request keeps failing (connection, timeout,
            decoding, redirects) after all retries.
        ResponseParseError: When a 2xx body is not valid JSON.
    """
    if retries < 0:
        raise ValueError("retries must be >= 0")

    tele = telemetry or TelemetryContext()
    state = RetryState(retries, initial_delay, max_delay)
    safe_url = redact_url(url)

    with tele(T_BACKOFF_FETCH, url=safe_url, retries=retries):
        while True:
            try:
                response = await client.post(url, json=payload)
            except httpx.RequestError as e:
                if state.exhausted:
                    log.error(
                        "Request to %s failed after %d retries: %s",
                        safe_url,
                        retries,
                        e,
                    )
                    raise NetworkError(
                        f"Request to {safe_url} failed: {e}"
                    ) from e
                await _wait_for_retry(state, tele, f"transport error ({e!r})")
                continue

            if response.status_code == RATE_LIMIT_STATUS and not state.exhausted:
                await _wait_for_retry(state, tele, "rate limited (429)")
                continue

            if not response.is_success:
                tele.count("api_errors", status=response.status_code)
                raise APIError(response.status_code, extract_error_message(response))

            try:
                return response.json()
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ResponseParseError(
                    f"Response body from {safe_url} is not valid JSON: {e}"
                ) from e


async def _wait_for_retry(
    state: RetryState, tele: TelemetryContextProtocol, reason: str
) -> None:
    delay = state.advance()
    tele.count("retries")
    log.warning(
        "Request %s. Retrying in %.2fs (%d retries left)",
        reason,
        delay,
        state.attempts_remaining,
    )
    await asyncio.sleep(delay)
