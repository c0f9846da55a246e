"""Google Maps API client - geocoding and timezone lookups."""

from typing import Any, Dict, Optional

import aiohttp

from ..const import (
    GOOGLE_MAPS_API_BASE_URL,
    GOOGLE_MAPS_GEOCODE_ENDPOINT,
    GOOGLE_MAPS_TIMEZONE_ENDPOINT,
)
from ..http import JsonApiClient


class GoogleMapsClient(JsonApiClient):
    """Client for the Google Maps web services."""

    name = "Google Maps API"

    def __init__(self, api_key: str, session: Optional[aiohttp.ClientSession] = None):
        """Initialize Google Maps client.

        Args:
            api_key: Google Maps API key
            session: Optional aiohttp session (will create one if not provided)
        """
        super().__init__(GOOGLE_MAPS_API_BASE_URL, session=session)
        self._api_key = api_key

    async def geocode(self, address: str) -> Dict[str, Any]:
        """Geocode a free-text address."""
        return await self._request(
            "GET", GOOGLE_MAPS_GEOCODE_ENDPOINT, params={"address": address, "key": self._api_key}
        )

    async def timezone(self, location: str, timestamp: int) -> Dict[str, Any]:
        """Get timezone information for a "lat,lng" location."""
        return await self._request(
            "GET",
            GOOGLE_MAPS_TIMEZONE_ENDPOINT,
            params={"location": location, "timestamp": timestamp, "key": self._api_key},
        )
