"""Device context threaded through the narration pipeline."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..const import ATTR_LOCATION, ATTR_TIMEZONE, DEFAULT_TIMEZONE
from .dates import get_zone, is_valid_zone, to_timezone
from .models import Location

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceContext:
    """Immutable view of the device: clock, timezone and resolved location."""

    timezone: str
    now: datetime
    location: Optional[Location] = None
    timezone_defaulted: bool = False

    @property
    def today(self) -> date:
        """Current calendar date in the device timezone."""
        return self.now.date()

    @classmethod
    def create(
        cls,
        timezone: Optional[str] = None,
        location: Optional[Location] = None,
        now: Optional[datetime] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
    ) -> "DeviceContext":
        """Build a context, using the default timezone when the given one is unknown.

        Args:
            timezone: Device timezone name
            location: Resolved device location
            now: Reference clock (defaults to the current time)
            default_timezone: Timezone used when the device one is missing or invalid

        Returns:
            DeviceContext with `now` expressed in the device timezone
        """
        defaulted = not is_valid_zone(timezone)
        if defaulted:
            if timezone:
                _LOGGER.warning("Invalid device timezone %s, defaulting to %s", timezone, default_timezone)
            timezone = default_timezone
        zone = get_zone(timezone, default_timezone)
        now = to_timezone(now or datetime.now(zone), zone)
        return cls(timezone=timezone, now=now, location=location, timezone_defaulted=defaulted)

    @classmethod
    def from_attributes(
        cls,
        attributes: Optional[Dict[str, Any]],
        now: Optional[datetime] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
    ) -> "DeviceContext":
        """Build a context from persisted device attributes."""
        attributes = attributes or {}
        return cls.create(
            timezone=attributes.get(ATTR_TIMEZONE),
            location=Location.from_dict(attributes.get(ATTR_LOCATION)),
            now=now,
            default_timezone=default_timezone,
        )

    def to_attributes(self) -> Dict[str, Any]:
        """Return device attributes for persistence."""
        return {
            ATTR_LOCATION: self.location.to_dict() if self.location else {},
            ATTR_TIMEZONE: self.timezone,
        }
