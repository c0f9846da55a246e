"""Shared test fixtures."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from aftership_voice.app.device import DeviceContext
from aftership_voice.app.models import (
    AggregatedPackage,
    Checkpoint,
    Location,
    NormalizedPackage,
    RawTrackingRecord,
    TrackingStatus,
)
from aftership_voice.config import Settings

TZ = ZoneInfo("America/New_York")


def at(day: int, hour: int = 12, minute: int = 0) -> datetime:
    """Timestamp in October 2026, New York time."""
    return datetime(2026, 10, day, hour, minute, tzinfo=TZ)


@pytest.fixture
def device_location():
    """Resolved device location."""
    return Location(
        city="Springfield",
        state="Illinois",
        country="United States",
        zipcode="62701",
        lat=39.78,
        lng=-89.65,
    )


@pytest.fixture
def context(device_location):
    """Device context fixed on Monday 2026-10-19 at noon."""
    return DeviceContext.create(timezone="America/New_York", location=device_location, now=at(19))


@pytest.fixture
def settings():
    """Settings isolated from the environment."""
    return Settings(_env_file=None, aftership_api_key="test-key", google_maps_api_key="")


@pytest.fixture
def make_record():
    """Factory for raw tracking records."""

    def _make(
        tracking_id="T1",
        status=TrackingStatus.IN_TRANSIT,
        slug="ups",
        title="Shoes",
        note=None,
        last_updated_at=None,
        expected_delivery=None,
        checkpoints=(),
    ):
        return RawTrackingRecord(
            tracking_id=tracking_id,
            status=status,
            slug=slug,
            title=title,
            note=note,
            last_updated_at=last_updated_at or at(19, 8),
            expected_delivery=expected_delivery,
            checkpoints=list(checkpoints),
        )

    return _make


@pytest.fixture
def make_checkpoint():
    """Factory for checkpoints."""

    def _make(status, timestamp=None, city=None, state=None, country=None, zip=None):
        return Checkpoint(status=status, timestamp=timestamp, city=city, state=state, country=country, zip=zip)

    return _make


@pytest.fixture
def make_package():
    """Factory for normalized packages."""

    def _make(
        source_id="T1",
        status=TrackingStatus.IN_TRANSIT,
        slug="ups",
        courier_name="UPS",
        title="Shoes",
        last_updated=None,
        occurrence_count=1,
        delivery_date=None,
        delivery_location=None,
    ):
        return NormalizedPackage(
            source_id=source_id,
            status=status,
            slug=slug,
            courier_name=courier_name,
            title=title,
            last_updated=last_updated or at(19, 8),
            occurrence_count=occurrence_count,
            delivery_date=delivery_date,
            delivery_location=delivery_location,
        )

    return _make


@pytest.fixture
def make_aggregate():
    """Factory for aggregated packages."""

    def _make(
        status=TrackingStatus.IN_TRANSIT,
        delivery_date=None,
        title="Shoes",
        slug="ups",
        courier_name="UPS",
        member_ids=("1",),
        last_updated=None,
        occurrence_count=1,
        delivery_location=None,
        resolved_address=None,
    ):
        return AggregatedPackage(
            status=status,
            slug=slug,
            courier_name=courier_name,
            title=title,
            last_updated=last_updated or at(19, 8),
            occurrence_count=occurrence_count,
            delivery_date=delivery_date,
            delivery_location=delivery_location,
            member_ids=list(member_ids),
            resolved_address=resolved_address,
        )

    return _make
