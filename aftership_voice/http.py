"""Shared aiohttp plumbing for the remote API clients."""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

_LOGGER = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
RETRY_DELAY_BASE = 2  # Base delay in seconds for exponential backoff
REQUEST_TIMEOUT = 30  # Request timeout in seconds


class JsonApiClient:
    """Base client for JSON HTTP APIs with retry on transient network errors."""

    name = "API"

    def __init__(
        self,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize client.

        Args:
            base_url: Base URL every endpoint is appended to
            headers: Headers sent with every request
            session: Optional aiohttp session (will create one if not provided)
        """
        self._base_url = base_url
        self._headers = headers or {}
        self._session = session
        self._timeout = aiohttp.ClientTimeout(
            total=REQUEST_TIMEOUT,
            connect=10,  # Connection timeout (including DNS)
            sock_read=20,
        )

    @staticmethod
    def _is_retryable_error(err: Exception) -> bool:
        """Check if an error is a transient network error."""
        if isinstance(err, (aiohttp.ClientConnectorError, aiohttp.ServerTimeoutError, asyncio.TimeoutError)):
            return True
        if isinstance(err, aiohttp.ClientResponseError):
            return err.status in (429, 502, 503, 504)
        if isinstance(err, aiohttp.ClientError):
            error_str = str(err).lower()
            if any(keyword in error_str for keyword in ["timeout", "dns", "connection", "network", "resolve"]):
                return True
        return False

    async def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request with retry logic.

        Args:
            method: HTTP method (GET, POST, DELETE, etc.)
            endpoint: API endpoint path
            data: Request body data
            params: Query parameters

        Returns:
            Response JSON data

        Raises:
            aiohttp.ClientError: On HTTP errors after retries exhausted
        """
        url = f"{self._base_url}{endpoint}"
        use_temporary_session = self._session is None
        session = self._session or aiohttp.ClientSession()

        try:
            for attempt in range(MAX_RETRIES):
                try:
                    async with session.request(
                        method,
                        url,
                        headers=self._headers,
                        json=data,
                        params=params,
                        timeout=self._timeout,
                    ) as response:
                        response.raise_for_status()
                        return await response.json()
                except (aiohttp.ClientError, asyncio.TimeoutError) as err:
                    if self._is_retryable_error(err) and attempt < MAX_RETRIES - 1:
                        delay = RETRY_DELAY_BASE * (2 ** attempt)
                        _LOGGER.warning(
                            "%s request failed (attempt %d/%d): %s. Retrying in %d seconds...",
                            self.name,
                            attempt + 1,
                            MAX_RETRIES,
                            err,
                            delay,
                        )
                        await asyncio.sleep(delay)
                        continue
                    _LOGGER.error("%s request failed: %s", self.name, err)
                    raise
        finally:
            # Only close session if we created it
            if use_temporary_session:
                await session.close()
