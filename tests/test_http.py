"""Tests for the JSON API client retry logic."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from aftership_voice.aftership.client import AfterShipClient
from aftership_voice.http import JsonApiClient


def response_context(payload=None, error=None):
    """Async context manager yielding a mock response."""
    response = MagicMock()
    response.raise_for_status = MagicMock(side_effect=error)
    response.json = AsyncMock(return_value=payload)
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


@pytest.fixture
def session():
    """Mock aiohttp session."""
    return MagicMock()


@pytest.mark.asyncio
class TestRequest:
    """Tests for JsonApiClient._request."""

    @patch("aftership_voice.http.asyncio.sleep", new_callable=AsyncMock)
    async def test_success(self, mock_sleep, session):
        session.request.return_value = response_context({"ok": True})
        client = JsonApiClient("https://api.example.test", headers={"x-key": "k"}, session=session)

        result = await client._request("GET", "/items", params={"limit": 1})

        assert result == {"ok": True}
        call_args = session.request.call_args
        assert call_args[0] == ("GET", "https://api.example.test/items")
        assert call_args[1]["headers"] == {"x-key": "k"}
        assert call_args[1]["params"] == {"limit": 1}
        mock_sleep.assert_not_awaited()
        session.close.assert_not_called()

    @patch("aftership_voice.http.asyncio.sleep", new_callable=AsyncMock)
    async def test_retries_transient_errors(self, mock_sleep, session):
        """Should back off and retry on timeouts."""
        session.request.side_effect = [aiohttp.ServerTimeoutError("timeout"), response_context({"ok": True})]
        client = JsonApiClient("https://api.example.test", session=session)

        result = await client._request("GET", "/items")

        assert result == {"ok": True}
        mock_sleep.assert_awaited_once_with(2)

    @patch("aftership_voice.http.asyncio.sleep", new_callable=AsyncMock)
    async def test_gives_up_after_retries(self, mock_sleep, session):
        session.request.side_effect = aiohttp.ServerTimeoutError("timeout")
        client = JsonApiClient("https://api.example.test", session=session)

        with pytest.raises(aiohttp.ServerTimeoutError):
            await client._request("GET", "/items")

        assert session.request.call_count == 3
        assert [call.args[0] for call in mock_sleep.await_args_list] == [2, 4]

    @patch("aftership_voice.http.asyncio.sleep", new_callable=AsyncMock)
    async def test_does_not_retry_client_errors(self, mock_sleep, session):
        """Should raise authentication errors immediately."""
        error = aiohttp.ClientResponseError(MagicMock(), (), status=401)
        session.request.return_value = response_context(error=error)
        client = JsonApiClient("https://api.example.test", session=session)

        with pytest.raises(aiohttp.ClientResponseError):
            await client._request("GET", "/items")

        assert session.request.call_count == 1
        mock_sleep.assert_not_awaited()


class TestIsRetryableError:
    """Tests for JsonApiClient._is_retryable_error."""

    def test_status_codes(self):
        assert JsonApiClient._is_retryable_error(aiohttp.ClientResponseError(MagicMock(), (), status=503))
        assert JsonApiClient._is_retryable_error(aiohttp.ClientResponseError(MagicMock(), (), status=429))
        assert not JsonApiClient._is_retryable_error(aiohttp.ClientResponseError(MagicMock(), (), status=404))

    def test_network_messages(self):
        assert JsonApiClient._is_retryable_error(aiohttp.ClientError("Connection reset by peer"))
        assert not JsonApiClient._is_retryable_error(aiohttp.ClientError("payload is invalid"))
        assert not JsonApiClient._is_retryable_error(ValueError("timeout"))


@pytest.mark.asyncio
class TestAfterShipClient:
    """Tests for AfterShipClient."""

    async def test_get_trackings(self, session):
        session.request.return_value = response_context({"meta": {"code": 200}, "data": {"trackings": [{"id": "1"}]}})
        client = AfterShipClient("secret", session=session)

        trackings = await client.get_trackings({"tag": "Delivered"})

        assert trackings == [{"id": "1"}]
        call_args = session.request.call_args
        assert call_args[0][1] == "https://api.aftership.com/v4/trackings"
        assert call_args[1]["headers"]["aftership-api-key"] == "secret"

    async def test_get_couriers(self, session):
        session.request.return_value = response_context({"data": {"couriers": [{"slug": "ups", "name": "UPS"}]}})
        client = AfterShipClient("secret", session=session)

        assert await client.get_couriers() == [{"slug": "ups", "name": "UPS"}]
        assert session.request.call_args[0][1] == "https://api.aftership.com/v4/couriers/all"
