"""Google Maps response adapter - Converts geocoding responses to Location models."""

import asyncio
import logging
import time
from typing import Any, Dict, Optional

import aiohttp

from ..app.exceptions import GeocodeError
from ..app.models import Location

_LOGGER = logging.getLogger(__name__)

# Address component type to Location field
COMPONENT_FIELDS = {
    "postal_code": "zipcode",
    "locality": "city",
    "administrative_area_level_1": "state",
    "country": "country",
}

NO_RESULT_STATUSES = ("ZERO_RESULTS",)


class GoogleMapsAdapter:
    """Adapter for converting Google Maps responses."""

    @staticmethod
    def _check_status(response: Dict[str, Any]) -> bool:
        """Return False for an empty result, raise for an error status."""
        status = response.get("status", "OK")
        if status in NO_RESULT_STATUSES:
            return False
        if status != "OK":
            raise GeocodeError(f"{status}: {response.get('error_message', 'unknown error')}")
        return True

    @staticmethod
    def to_location(response: Dict[str, Any]) -> Optional[Location]:
        """Convert a geocode response to a Location.

        Args:
            response: Raw geocode API response

        Returns:
            Location of the first result, or None without results

        Raises:
            GeocodeError: If the API reported an error
        """
        if not GoogleMapsAdapter._check_status(response):
            return None
        results = response.get("results") or []
        if not results:
            return None

        fields: Dict[str, Any] = {}
        for component in results[0].get("address_components", []):
            types = component.get("types", [])
            name = component.get("long_name")
            if "sublocality" in types:
                # Locality takes precedence over sublocality
                fields.setdefault("city", name)
                continue
            for component_type, field_name in COMPONENT_FIELDS.items():
                if component_type in types:
                    fields[field_name] = name
                    break

        coordinates = results[0].get("geometry", {}).get("location", {})
        return Location(lat=coordinates.get("lat"), lng=coordinates.get("lng"), **fields)

    @staticmethod
    def to_timezone_id(response: Dict[str, Any]) -> Optional[str]:
        """Extract the timezone id of a timezone response."""
        if not GoogleMapsAdapter._check_status(response):
            return None
        return response.get("timeZoneId")


class GeocodingBackend:
    """Geocoding implementation that App Layer uses."""

    def __init__(self, client, adapter: GoogleMapsAdapter):
        """Initialize backend with client and adapter.

        Args:
            client: GoogleMapsClient instance
            adapter: GoogleMapsAdapter instance
        """
        self._client = client
        self._adapter = adapter

    async def resolve_address(self, text: str, ignore_errors: bool = False) -> Optional[Location]:
        """Resolve a free-text address.

        Args:
            text: Address to geocode
            ignore_errors: Return None instead of raising on failure

        Returns:
            Location or None if not found

        Raises:
            GeocodeError: If the lookup failed and errors are not ignored
        """
        try:
            response = await self._client.geocode(text)
            return self._adapter.to_location(response)
        except (aiohttp.ClientError, asyncio.TimeoutError, GeocodeError) as err:
            _LOGGER.error("Failed to get geocode data for %s: %s", text, err)
            if ignore_errors:
                return None
            if isinstance(err, GeocodeError):
                raise
            raise GeocodeError(str(err)) from err

    async def resolve_timezone(self, location: Location, ignore_errors: bool = False) -> Optional[str]:
        """Resolve the timezone id of a location."""
        try:
            response = await self._client.timezone(f"{location.lat},{location.lng}", int(time.time()))
            return self._adapter.to_timezone_id(response)
        except (aiohttp.ClientError, asyncio.TimeoutError, GeocodeError) as err:
            _LOGGER.error("Failed to get timezone data: %s", err)
            if ignore_errors:
                return None
            if isinstance(err, GeocodeError):
                raise
            raise GeocodeError(str(err)) from err
