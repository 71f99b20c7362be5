"""Tests for rate limiting (src/crm/core/rate_limit.py).

Tests cover:
- get_rate_limit_key: key derivation from the client IP
- check_rate_limit: token bucket refill, burst cap, retry-after and eviction
- global_rate_limit_middleware: request flow and exemptions
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from starlette.requests import Request
from starlette.responses import Response

from src.crm.core import rate_limit
from src.crm.core.rate_limit import (
    check_rate_limit,
    get_rate_limit_key,
    global_rate_limit_middleware,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _reset_rate_limit_state(reset_rate_limit_buckets):
    """Delegates to shared fixture in tests/conftest.py."""
    yield


@pytest.fixture
def mock_request() -> MagicMock:
    """Create a mock Starlette request."""
    request = MagicMock(spec=Request)
    request.headers = {}
    request.client = MagicMock()
    request.client.host = "192.168.1.100"
    request.url.path = "/api/horses"
    return request


@pytest.fixture
def mock_settings() -> MagicMock:
    """Mock settings with an active limiter: 4 requests per 4 seconds (1 token/s)."""
    settings = MagicMock()
    settings.is_testing = False
    settings.global_rate_limit_requests = 4
    settings.global_rate_limit_window_seconds = 4
    return settings


class TestGetRateLimitKey:
    def test_returns_ip(self, mock_request: MagicMock) -> None:
        with patch("src.crm.core.rate_limit.get_remote_address", return_value="192.168.1.100"):
            assert get_rate_limit_key(mock_request) == "192.168.1.100"

    def test_forwarding_headers_do_not_change_key(self, mock_request: MagicMock) -> None:
        """User-controlled headers must never create fresh buckets."""
        mock_request.headers = {"X-Forwarded-For": "1.2.3.4"}

        with patch("src.crm.core.rate_limit.get_remote_address", return_value="10.0.0.1"):
            assert get_rate_limit_key(mock_request) == "10.0.0.1"

    def test_returns_unknown_when_ip_not_available(self, mock_request: MagicMock) -> None:
        with patch("src.crm.core.rate_limit.get_remote_address", return_value=None):
            assert get_rate_limit_key(mock_request) == "unknown"


class TestCheckRateLimit:
    async def test_burst_then_denied(self, mock_settings: MagicMock) -> None:
        with patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings):
            results = [await check_rate_limit("client", now=100.0) for _ in range(5)]

        assert [allowed for allowed, _ in results] == [True, True, True, True, False]
        assert results[-1][1] == pytest.approx(1.0)

    async def test_refills_over_time(self, mock_settings: MagicMock) -> None:
        with patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings):
            for _ in range(4):
                await check_rate_limit("client", now=100.0)
            denied, _ = await check_rate_limit("client", now=100.5)
            allowed, _ = await check_rate_limit("client", now=101.5)

        assert denied is False
        assert allowed is True

    async def test_tokens_capped_at_burst(self, mock_settings: MagicMock) -> None:
        with patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings):
            await check_rate_limit("client", now=100.0)
            await check_rate_limit("client", now=10_000.0)

        assert rate_limit._rate_limit_buckets["client"]["tokens"] == pytest.approx(3)

    async def test_clients_have_separate_buckets(self, mock_settings: MagicMock) -> None:
        with patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings):
            for _ in range(4):
                await check_rate_limit("busy", now=100.0)
            allowed, _ = await check_rate_limit("quiet", now=100.0)

        assert allowed is True

    async def test_clock_going_backwards_does_not_add_tokens(
        self, mock_settings: MagicMock
    ) -> None:
        with patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings):
            await check_rate_limit("client", now=100.0)
            await check_rate_limit("client", now=50.0)

        assert rate_limit._rate_limit_buckets["client"]["tokens"] == pytest.approx(2)

    async def test_refilled_buckets_evicted_when_tracking_limit_reached(
        self, mock_settings: MagicMock
    ) -> None:
        with (
            patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings),
            patch("src.crm.core.rate_limit.MAX_TRACKED_CLIENTS", 3),
        ):
            for _ in range(4):
                await check_rate_limit("busy", now=100.0)
            await check_rate_limit("idle-1", now=100.0)
            await check_rate_limit("idle-2", now=100.0)
            await check_rate_limit("newcomer", now=101.0)
            allowed, _ = await check_rate_limit("busy", now=101.0)
            denied, _ = await check_rate_limit("busy", now=101.0)

        assert set(rate_limit._rate_limit_buckets) == {"busy", "newcomer"}
        assert allowed is True
        assert denied is False


class TestGlobalRateLimitMiddleware:
    async def test_skipped_in_testing(self, mock_request: MagicMock) -> None:
        settings = MagicMock(is_testing=True)
        call_next = AsyncMock(return_value=Response("ok"))

        with patch("src.crm.core.rate_limit.get_settings", return_value=settings):
            response = await global_rate_limit_middleware(mock_request, call_next)

        assert response.status_code == 200
        call_next.assert_awaited_once()

    async def test_non_api_paths_exempt(
        self, mock_request: MagicMock, mock_settings: MagicMock
    ) -> None:
        mock_request.url.path = "/health"
        call_next = AsyncMock(return_value=Response("ok"))

        with patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings):
            for _ in range(10):
                response = await global_rate_limit_middleware(mock_request, call_next)

        assert response.status_code == 200
        assert rate_limit._rate_limit_buckets == {}

    async def test_returns_429_with_retry_after(
        self, mock_request: MagicMock, mock_settings: MagicMock
    ) -> None:
        call_next = AsyncMock(return_value=Response("ok"))

        with (
            patch("src.crm.core.rate_limit.get_settings", return_value=mock_settings),
            patch("src.crm.core.rate_limit.get_remote_address", return_value="10.1.1.1"),
        ):
            for _ in range(4):
                await global_rate_limit_middleware(mock_request, call_next)
            response = await global_rate_limit_middleware(mock_request, call_next)

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        assert call_next.await_count == 4
