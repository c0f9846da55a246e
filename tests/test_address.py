"""Tests for delivery address resolution."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from aftership_voice.app.address import describe_address, is_device_location, resolve_addresses
from aftership_voice.app.exceptions import GeocodeError
from aftership_voice.app.models import Location

SPRINGFIELD = Location(city="Springfield", state="Illinois", country="United States")
CHICAGO = Location(city="Chicago", state="Illinois", country="United States")
TORONTO = Location(city="Toronto", state="Ontario", country="Canada")


class TestDescribeAddress:
    """Tests for describe_address."""

    def test_device_location(self, device_location):
        """Should say "here" when every address field matches the device."""
        assert is_device_location(SPRINGFIELD, device_location)
        assert describe_address(SPRINGFIELD, device_location) == "here"

    def test_domestic(self, device_location):
        assert describe_address(CHICAGO, device_location) == "Chicago, Illinois"
        assert describe_address(Location(city="Chicago", country="United States"), device_location) == "Chicago"

    def test_domestic_without_city(self, device_location):
        """Should have nothing worth speaking for a domestic address without city."""
        assert describe_address(Location(state="Texas", country="United States"), device_location) == ""

    def test_foreign(self, device_location):
        assert describe_address(TORONTO, device_location) == "Toronto, Canada"
        assert describe_address(Location(country="Canada"), device_location) == "Canada"

    def test_without_device_location(self):
        assert not is_device_location(SPRINGFIELD, None)
        assert describe_address(SPRINGFIELD, None) == "Springfield, Illinois"

    def test_custom_default_country(self, device_location):
        assert describe_address(TORONTO, device_location, default_country="Canada") == "Toronto, Ontario"

    def test_unknown(self, device_location):
        assert describe_address(None, device_location) is None
        assert describe_address(Location(lat=1.0, lng=2.0), device_location) is None


@pytest.mark.asyncio
class TestResolveAddresses:
    """Tests for resolve_addresses."""

    async def test_geocodes_each_location_once(self, make_aggregate, device_location):
        """Should look up distinct locations once and attach descriptions."""
        results = {"Springfield, IL": SPRINGFIELD, "Toronto, ON": TORONTO}
        geocoder = MagicMock()
        geocoder.resolve_address = AsyncMock(side_effect=lambda text, ignore_errors: results[text])
        packages = [
            make_aggregate(title="a", delivery_location="Springfield, IL"),
            make_aggregate(title="b", delivery_location="Toronto, ON"),
            make_aggregate(title="c", delivery_location="Springfield, IL"),
            make_aggregate(title="d"),
        ]

        resolved = await resolve_addresses(packages, geocoder, device_location)

        assert [pkg.resolved_address for pkg in resolved] == ["here", "Toronto, Canada", "here", None]
        assert geocoder.resolve_address.await_count == 2
        assert packages[0].resolved_address is None

    async def test_failed_lookup(self, make_aggregate, device_location):
        """Should leave packages at a failed location without address."""

        def lookup(text, ignore_errors):
            if text == "Nowhere":
                raise GeocodeError("boom")
            return CHICAGO

        geocoder = MagicMock()
        geocoder.resolve_address = AsyncMock(side_effect=lookup)
        packages = [
            make_aggregate(title="a", delivery_location="Nowhere"),
            make_aggregate(title="b", delivery_location="Chicago"),
        ]

        resolved = await resolve_addresses(packages, geocoder, device_location)

        assert [pkg.resolved_address for pkg in resolved] == [None, "Chicago, Illinois"]

    async def test_no_locations(self, make_aggregate, device_location):
        geocoder = MagicMock()
        geocoder.resolve_address = AsyncMock()

        resolved = await resolve_addresses([make_aggregate()], geocoder, device_location)

        assert len(resolved) == 1
        geocoder.resolve_address.assert_not_awaited()
