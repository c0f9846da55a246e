"""Tests for the device context."""

from aftership_voice.app.device import DeviceContext
from aftership_voice.app.models import Location
from conftest import at


class TestDeviceContext:
    """Tests for DeviceContext."""

    def test_now_in_device_timezone(self):
        context = DeviceContext.create(timezone="America/Chicago", now=at(19))

        assert context.now.hour == 11
        assert context.now == at(19)
        assert not context.timezone_defaulted

    def test_invalid_timezone_defaults(self):
        """Should fall back to the default timezone and flag it."""
        context = DeviceContext.create(timezone="Mars/Olympus", now=at(19), default_timezone="UTC")

        assert context.timezone == "UTC"
        assert context.timezone_defaulted
        assert context.now.hour == 16

    def test_today(self):
        context = DeviceContext.create(timezone="UTC", now=at(19, 22))

        assert context.today.day == 20

    def test_attributes_round_trip(self, context):
        restored = DeviceContext.from_attributes(context.to_attributes(), now=at(19))

        assert restored.location == context.location
        assert restored.timezone == "America/New_York"

    def test_empty_attributes(self):
        context = DeviceContext.from_attributes(None, now=at(19), default_timezone="UTC")

        assert context.location is None
        assert context.timezone_defaulted
        assert context.to_attributes() == {"location": {}, "timezone": "UTC"}

    def test_location_from_dict(self):
        location = Location.from_dict({"city": "Springfield", "lat": 39.78})

        assert location == Location(city="Springfield", lat=39.78)
        assert location.to_dict() == {"city": "Springfield", "lat": 39.78}
