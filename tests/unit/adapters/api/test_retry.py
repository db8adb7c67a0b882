"""
Tests unitaires pour le mecanisme de retry avec backoff exponentiel.

Ces tests verifient:
- RateLimitError capture le header Retry-After
- with_retry relance sur les erreurs transitoires uniquement
- request_with_retry relance sur 429, 5xx et erreurs de transport
- Les 4xx remontent immediatement sans nouvelle tentative
"""

import httpx
import pytest
import respx

from src.adapters.api.retry import (
    RateLimitError,
    TransientHTTPError,
    request_with_retry,
    with_retry,
)

URL = "https://station.example.com/api.php/provide/vod/"


class TestExceptions:
    """Tests pour les exceptions transitoires."""

    def test_rate_limit_error_stores_retry_after(self) -> None:
        """RateLimitError stocke la valeur Retry-After."""
        error = RateLimitError(retry_after=60)
        assert error.retry_after == 60
        assert error.status_code == 429
        assert "60" in str(error)

    def test_rate_limit_is_transient(self) -> None:
        assert isinstance(RateLimitError(), TransientHTTPError)

    def test_transient_error_message(self) -> None:
        assert "503" in str(TransientHTTPError(503))


class TestWithRetryDecorator:
    """Tests pour le decorateur with_retry."""

    @pytest.mark.asyncio
    async def test_retries_on_transient_error(self) -> None:
        """with_retry relance quand une erreur transitoire est levee."""
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1, min_wait=0)
        async def flaky_function() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise TransientHTTPError(502)
            return "success"

        assert await flaky_function() == "success"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_stops_after_max_attempts(self) -> None:
        call_count = 0

        @with_retry(max_attempts=2, max_wait=1, min_wait=0)
        async def always_fails() -> str:
            nonlocal call_count
            call_count += 1
            raise httpx.ConnectTimeout("timeout")

        with pytest.raises(httpx.ConnectTimeout):
            await always_fails()
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_other_exceptions(self) -> None:
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1, min_wait=0)
        async def raises_value_error() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("pas transitoire")

        with pytest.raises(ValueError):
            await raises_value_error()
        assert call_count == 1  # Pas de retry


class TestRequestWithRetry:
    """Tests pour request_with_retry avec httpx."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_429_exhausts_attempts(self) -> None:
        route = respx.get(URL).mock(
            return_value=httpx.Response(429, headers={"Retry-After": "30"})
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(RateLimitError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=3, min_wait=0)

        assert exc_info.value.retry_after == 30
        assert route.call_count == 3

    @pytest.mark.asyncio
    @respx.mock
    async def test_5xx_then_success(self) -> None:
        route = respx.get(URL).mock(
            side_effect=[
                httpx.Response(503),
                httpx.Response(200, json={"list": []}),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, min_wait=0)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error_then_success(self) -> None:
        route = respx.get(URL).mock(
            side_effect=[
                httpx.ConnectError("refused"),
                httpx.Response(200, json={"list": []}),
            ]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, min_wait=0)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_4xx_is_not_retried(self) -> None:
        route = respx.get(URL).mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await request_with_retry(client, "GET", URL, min_wait=0)

        assert exc_info.value.response.status_code == 404
        assert route.call_count == 1
