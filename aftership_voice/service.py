"""Request-level entry points used by the voice skill handlers."""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import aiohttp

from .aftership.adapter import AfterShipAdapter, AfterShipBackend
from .aftership.client import AfterShipClient
from .app.api import PackageTrackingAPI
from .app.dates import parse_datetime, to_iso
from .app.device import DeviceContext
from .app.exceptions import ConfigurationError, GeocodeError, SourceFetchError
from .app.models import ProactiveEvent
from .config import Settings
from .config import settings as default_settings
from .const import (
    AFTERSHIP_API_KEY_MISSING,
    ATTR_DEVICE,
    ATTR_LAST_PROACTIVE_EVENT,
    DEVICE_LOCATION_NOT_FOUND,
    ERROR_MESSAGE,
    TIMESTAMP_DEFAULT_TIMEZONE,
)
from .geocoding.adapter import GeocodingBackend, GoogleMapsAdapter
from .geocoding.client import GoogleMapsClient

_LOGGER = logging.getLogger(__name__)


class TrackingSkillService:
    """Wires the tracking pipeline to persisted user attributes."""

    def __init__(self, api: PackageTrackingAPI, geocoder=None, settings: Optional[Settings] = None):
        """Initialize service.

        Args:
            api: PackageTrackingAPI instance
            geocoder: GeocodingBackend instance (None when geocoding is not configured)
            settings: Application settings
        """
        self.api = api
        self._geocoder = geocoder
        self._settings = settings or default_settings

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "TrackingSkillService":
        """Create a service with the AfterShip and Google Maps layers."""
        settings = settings or default_settings

        # Initialize AfterShip layers
        client = AfterShipClient(settings.aftership_api_key, session)
        backend = AfterShipBackend(client, AfterShipAdapter())

        # Initialize geocoding layers if configured
        geocoder = None
        if settings.google_maps_api_key:
            maps_client = GoogleMapsClient(settings.google_maps_api_key, session)
            geocoder = GeocodingBackend(maps_client, GoogleMapsAdapter())
        else:
            _LOGGER.warning(
                "The Google Maps API key is not configured. It is strongly recommended to use one."
            )

        api = PackageTrackingAPI(backend, geocoder, settings)
        return cls(api, geocoder, settings)

    def check_configuration(self) -> None:
        """Raise ConfigurationError if the tracking source cannot be queried."""
        if not self._settings.aftership_api_key:
            raise ConfigurationError("AfterShip API key is not configured")

    def get_device_context(
        self, attributes: Optional[Dict[str, Any]], now: Optional[datetime] = None
    ) -> DeviceContext:
        """Build the device context from persisted user attributes."""
        return DeviceContext.from_attributes(
            (attributes or {}).get(ATTR_DEVICE),
            now=now,
            default_timezone=self._settings.default_timezone,
        )

    async def update_device_location(
        self, country_code: str, postal_code: str, now: Optional[datetime] = None
    ) -> DeviceContext:
        """Resolve the device location and timezone from its country and postal code.

        Raises:
            GeocodeError: If the location or timezone cannot be determined
        """
        if self._geocoder is None:
            raise GeocodeError("Geocoding is not configured")

        location = await self._geocoder.resolve_address(f"{country_code},{postal_code}")
        if location is None:
            raise GeocodeError(f"No location found for {country_code},{postal_code}")
        timezone = await self._geocoder.resolve_timezone(location)
        return DeviceContext.create(
            timezone=timezone,
            location=location,
            now=now,
            default_timezone=self._settings.default_timezone,
        )

    async def get_speech_output(
        self,
        keyword: Optional[str],
        attributes: Optional[Dict[str, Any]] = None,
        country_code: Optional[str] = None,
        postal_code: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[str, Dict[str, Any]]:
        """Return the tracking speech output and the user attributes to persist.

        Args:
            keyword: Optional keyword filter from the voice request
            attributes: Persisted user attributes
            country_code: Device address country code, if permitted
            postal_code: Device address postal code, if permitted
            now: Reference clock (defaults to the current time)

        Returns:
            Tuple of (speech markup, updated attributes)
        """
        attributes = dict(attributes or {})
        try:
            self.check_configuration()
        except ConfigurationError as err:
            _LOGGER.error("%s", err)
            return AFTERSHIP_API_KEY_MISSING, attributes

        context = self.get_device_context(attributes, now)
        footnotes: List[str] = []
        located = False

        if country_code and postal_code:
            try:
                context = await self.update_device_location(country_code, postal_code, now)
                attributes[ATTR_DEVICE] = context.to_attributes()
                located = True
            except GeocodeError as err:
                _LOGGER.error("Unable to get device location information: %s", err)

        if not located and context.location:
            _LOGGER.warning("Using previously gathered device location information.")

        if context.timezone_defaulted:
            _LOGGER.warning("Timezone set to default value: %s", context.timezone)
            footnotes.append(TIMESTAMP_DEFAULT_TIMEZONE.format(default_timezone=context.timezone))

        if not located and not context.location:
            footnotes.append(DEVICE_LOCATION_NOT_FOUND)

        _LOGGER.info("Device timezone set to: %s", context.timezone)

        try:
            speech = await self.api.build_narrative(keyword, context, footnotes)
        except SourceFetchError as err:
            _LOGGER.error("Failed to get trackings speech output: %s", err)
            return ERROR_MESSAGE, attributes
        return speech, attributes

    async def get_proactive_events(
        self,
        attributes: Optional[Dict[str, Any]] = None,
        now: Optional[datetime] = None,
    ) -> Tuple[List[ProactiveEvent], Dict[str, Any]]:
        """Return proactive events since the last run and the attributes to persist once sent.

        The stored last event timestamp is the cutoff, falling back to the schedule rate interval.

        Raises:
            ConfigurationError: If the AfterShip API key is missing
            SourceFetchError: If the tracking source request fails
        """
        self.check_configuration()
        attributes = dict(attributes or {})
        context = self.get_device_context(attributes, now)

        cutoff = parse_datetime(attributes.get(ATTR_LAST_PROACTIVE_EVENT)) or timedelta(
            minutes=self._settings.schedule_rate
        )
        events = await self.api.build_proactive_events(cutoff, context)
        _LOGGER.info("Built %d proactive events", len(events))

        attributes[ATTR_LAST_PROACTIVE_EVENT] = to_iso(context.now)
        return events, attributes
