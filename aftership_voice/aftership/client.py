"""AfterShip API client - Direct HTTP communication with AfterShip API."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

from ..const import (
    AFTERSHIP_API_BASE_URL,
    AFTERSHIP_API_COURIERS_ALL_ENDPOINT,
    AFTERSHIP_API_TRACKINGS_ENDPOINT,
)
from ..http import JsonApiClient


class AfterShipClient(JsonApiClient):
    """Client for interacting with AfterShip API."""

    name = "AfterShip API"

    def __init__(self, api_key: str, session: Optional[aiohttp.ClientSession] = None):
        """Initialize AfterShip client.

        Args:
            api_key: AfterShip API key
            session: Optional aiohttp session (will create one if not provided)
        """
        super().__init__(
            AFTERSHIP_API_BASE_URL,
            headers={
                "aftership-api-key": api_key,
                "Content-Type": "application/json",
            },
            session=session,
        )

    async def get_couriers(self) -> List[Dict[str, Any]]:
        """Get list of all couriers supported by AfterShip.

        Returns:
            List of courier objects (slug, name, ...)
        """
        response = await self._request("GET", AFTERSHIP_API_COURIERS_ALL_ENDPOINT)
        return response.get("data", {}).get("couriers", [])

    async def get_trackings(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Get list of trackings.

        Args:
            params: Query parameters (created_at_min, fields, slug, tag, keyword)

        Returns:
            List of tracking objects
        """
        response = await self._request("GET", AFTERSHIP_API_TRACKINGS_ENDPOINT, params=params)
        return response.get("data", {}).get("trackings", [])

    async def test_connection(self) -> bool:
        """Test API connection by making a simple request.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            await self._request("GET", AFTERSHIP_API_TRACKINGS_ENDPOINT, params={"limit": 1})
            return True
        except (aiohttp.ClientError, asyncio.TimeoutError):
            return False
