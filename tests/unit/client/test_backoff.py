import logging

import httpx
import pytest

from naya_daur.client.backoff import (
    RetryState,
    extract_error_message,
    fetch_with_backoff,
    redact_url,
)
from naya_daur.exceptions import APIError, NetworkError, ResponseParseError
from naya_daur.telemetry import SimpleReporter, TelemetryContext

from tests.fixtures.api_responses import error_response, text_response

URL = "https://generativelanguage.googleapis.com/v1beta/models/m:generateContent?key=secret-key"
PAYLOAD = {"contents": [{"parts": [{"text": "hi"}]}]}


def _delays(sleep_mock) -> list[float]:
    return [c.args[0] for c in sleep_mock.await_args_list]


@pytest.mark.unit
class TestRetryState:
    def test_delay_doubles_and_budget_shrinks(self):
        state = RetryState(attempts_remaining=3, current_delay=1.0)
        assert [state.advance() for _ in range(3)] == [1.0, 2.0, 4.0]
        assert state.exhausted

    def test_cap_limits_each_delay(self):
        state = RetryState(attempts_remaining=4, current_delay=1.0, max_delay=3.0)
        assert [state.advance() for _ in range(4)] == [1.0, 2.0, 3.0, 3.0]

    def test_zero_budget_is_exhausted_from_start(self):
        assert RetryState(attempts_remaining=0, current_delay=1.0).exhausted


@pytest.mark.unit
class TestRateLimitRetries:
    @pytest.mark.asyncio
    async def test_429_retried_with_doubling_delay_then_raised(
        self, scripted_client, no_sleep
    ):
        client, transport = scripted_client(
            *[error_response(429, "Resource has been exhausted") for _ in range(4)]
        )

        with pytest.raises(APIError) as exc_info:
            await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert exc_info.value.status_code == 429
        assert exc_info.value.is_rate_limited
        assert str(exc_info.value) == "API Error: 429 Resource has been exhausted"
        assert len(transport.requests) == 4
        assert _delays(no_sleep) == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_429_then_success_returns_body(
        self, scripted_client, no_sleep
    ):
        client, transport = scripted_client(
            error_response(429, "slow down"), text_response("ok")
        )

        body = await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert body["candidates"][0]["content"]["parts"][0]["text"] == "ok"
        assert len(transport.requests) == 2
        assert _delays(no_sleep) == [1.0]

    @pytest.mark.asyncio
    async def test_zero_retries_means_single_attempt(self, scripted_client, no_sleep):
        client, transport = scripted_client(error_response(429, "slow down"))

        with pytest.raises(APIError):
            await fetch_with_backoff(client, URL, payload=PAYLOAD, retries=0)

        assert len(transport.requests) == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_custom_initial_delay_and_cap(self, scripted_client, no_sleep):
        client, _ = scripted_client(*[error_response(429, "x") for _ in range(5)])

        with pytest.raises(APIError):
            await fetch_with_backoff(
                client,
                URL,
                payload=PAYLOAD,
                retries=4,
                initial_delay=0.5,
                max_delay=1.5,
            )

        assert _delays(no_sleep) == [0.5, 1.0, 1.5, 1.5]

    @pytest.mark.asyncio
    async def test_negative_retries_rejected(self, scripted_client):
        client, transport = scripted_client()
        with pytest.raises(ValueError, match="retries"):
            await fetch_with_backoff(client, URL, payload=PAYLOAD, retries=-1)
        assert transport.requests == []


@pytest.mark.unit
class TestTerminalErrors:
    @pytest.mark.asyncio
    async def test_server_error_not_retried(self, scripted_client, no_sleep):
        client, transport = scripted_client(error_response(500, "Internal error"))

        with pytest.raises(APIError) as exc_info:
            await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Internal error"
        assert len(transport.requests) == 1
        no_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_json_error_body_uses_reason_phrase(
        self, scripted_client, no_sleep
    ):
        client, _ = scripted_client(error_response(503))

        with pytest.raises(APIError) as exc_info:
            await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert str(exc_info.value) == "API Error: 503 Service Unavailable"

    @pytest.mark.asyncio
    async def test_json_error_without_message_uses_reason_phrase(
        self, scripted_client, no_sleep
    ):
        client, _ = scripted_client(httpx.Response(400, json={"error": {"code": 400}}))

        with pytest.raises(APIError) as exc_info:
            await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert exc_info.value.message == "Bad Request"

    @pytest.mark.asyncio
    async def test_success_with_invalid_json_body(self, scripted_client, no_sleep):
        client, transport = scripted_client(httpx.Response(200, text="<html>"))

        with pytest.raises(ResponseParseError):
            await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert len(transport.requests) == 1


@pytest.mark.unit
class TestTransportErrors:
    @pytest.mark.asyncio
    async def test_transport_error_retried_then_succeeds(
        self, scripted_client, no_sleep
    ):
        client, transport = scripted_client(
            httpx.ConnectError("connection refused"),
            httpx.ReadTimeout("timed out"),
            text_response("ok"),
        )

        body = await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert body["candidates"]
        assert len(transport.requests) == 3
        assert _delays(no_sleep) == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_transport_error_after_retries_raises_network_error(
        self, scripted_client, no_sleep
    ):
        client, transport = scripted_client(
            *[httpx.ConnectError("connection refused") for _ in range(3)]
        )

        with pytest.raises(NetworkError) as exc_info:
            await fetch_with_backoff(client, URL, payload=PAYLOAD, retries=2)

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert "secret-key" not in str(exc_info.value)
        assert len(transport.requests) == 3

    @pytest.mark.asyncio
    async def test_decoding_error_retried_then_succeeds(
        self, scripted_client, no_sleep
    ):
        client, transport = scripted_client(
            httpx.DecodingError("corrupt gzip stream"),
            text_response("ok"),
        )

        body = await fetch_with_backoff(client, URL, payload=PAYLOAD)

        assert body["candidates"]
        assert len(transport.requests) == 2
        assert _delays(no_sleep) == [1.0]

    @pytest.mark.asyncio
    async def test_redirect_loop_ends_in_network_error(
        self, scripted_client, no_sleep
    ):
        client, _ = scripted_client(
            httpx.TooManyRedirects("Exceeded maximum allowed redirects."),
            httpx.TooManyRedirects("Exceeded maximum allowed redirects."),
        )

        with pytest.raises(NetworkError) as exc_info:
            await fetch_with_backoff(client, URL, payload=PAYLOAD, retries=1)

        assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)
        assert _delays(no_sleep) == [1.0]


@pytest.mark.unit
class TestRequestShape:
    @pytest.mark.asyncio
    async def test_posts_json_payload_to_url(
        self, scripted_client
    ):
        client, transport = scripted_client(text_response("ok"))

        await fetch_with_backoff(client, URL, payload=PAYLOAD)

        request = transport.requests[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/json"
        assert request.url.params["key"] == "secret-key"
        assert transport.bodies[0] == PAYLOAD


@pytest.mark.unit
class TestHelpers:
    def test_redact_url_drops_key(self):
        redacted = redact_url(URL)
        assert "secret-key" not in redacted
        assert redacted.endswith("/models/m:generateContent")

    def test_error_message_prefers_body_message(self):
        response = error_response(403, "API key not valid")
        assert extract_error_message(response) == "API key not valid"

    def test_error_body_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="naya_daur.client.backoff"):
            extract_error_message(error_response(400, "bad schema"))
        assert "bad schema" in caplog.text


@pytest.mark.unit
class TestBackoffTelemetry:
    @pytest.mark.asyncio
    async def test_retries_and_errors_are_counted(self, scripted_client, no_sleep):
        reporter = SimpleReporter()
        tele = TelemetryContext(reporter, enabled=True)
        client, _ = scripted_client(*[error_response(429, "x") for _ in range(3)])

        with pytest.raises(APIError):
            await fetch_with_backoff(
                client, URL, payload=PAYLOAD, retries=2, telemetry=tele
            )

        assert reporter.metric_total("backoff.fetch.retries") == 2
        assert reporter.metric_total("backoff.fetch.api_errors") == 1
        assert len(reporter.timings["backoff.fetch"]) == 1
        _, metadata = reporter.timings["backoff.fetch"][0]
        assert "secret-key" not in metadata["url"]
