"""Tests for the AfterShip adapter and backend."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from aftership_voice.aftership.adapter import AfterShipAdapter, AfterShipBackend
from aftership_voice.app.exceptions import MalformedRecordError, SourceFetchError
from aftership_voice.app.models import TrackingStatus
from aftership_voice.app.query import TrackingQuery
from conftest import at


@pytest.fixture
def tracking_payload():
    """Tracking object as returned by the /trackings endpoint."""
    return {
        "tracking_number": "1Z999AA10123456784",
        "slug": "ups",
        "tag": "Delivered",
        "title": "Shoes",
        "note": "#alexa",
        "last_updated_at": "2026-10-19T18:30:00+00:00",
        "expected_delivery": None,
        "checkpoints": [
            {
                "tag": "InTransit",
                "checkpoint_time": "2026-10-18T08:00:00-04:00",
                "city": "Chicago",
                "state": "IL",
                "country_name": "USA",
                "zip": "60601",
            },
            {
                "tag": "Delivered",
                "checkpoint_time": "2026-10-19T14:30:00-04:00",
                "city": "Springfield",
            },
        ],
    }


class TestAfterShipAdapter:
    """Tests for AfterShipAdapter."""

    def test_to_tracking_record(self, tracking_payload):
        record = AfterShipAdapter.to_tracking_record(tracking_payload)

        assert record.tracking_id == "1Z999AA10123456784"
        assert record.status is TrackingStatus.DELIVERED
        assert record.slug == "ups"
        assert record.title == "Shoes"
        assert record.note == "#alexa"
        assert record.last_updated_at == datetime(2026, 10, 19, 18, 30, tzinfo=timezone.utc)
        assert record.expected_delivery is None
        assert len(record.checkpoints) == 2
        assert record.checkpoints[0].location == "Chicago, IL, USA, 60601"
        assert record.checkpoints[1].status is TrackingStatus.DELIVERED
        assert record.checkpoints[1].timestamp == at(19, 14, 30)

    def test_title_defaults_to_tracking_number(self, tracking_payload):
        tracking_payload["title"] = None

        assert AfterShipAdapter.to_tracking_record(tracking_payload).title == "1Z999AA10123456784"

    def test_unknown_tag(self, tracking_payload):
        """Should put unknown tags in the expected bucket."""
        tracking_payload["tag"] = "Teleported"

        assert AfterShipAdapter.to_tracking_record(tracking_payload).status is TrackingStatus.EXPECTED

    def test_malformed(self, tracking_payload):
        del tracking_payload["slug"]

        with pytest.raises(MalformedRecordError):
            AfterShipAdapter.to_tracking_record(tracking_payload)
        with pytest.raises(MalformedRecordError):
            AfterShipAdapter.to_tracking_record("not a tracking")

    def test_to_tracking_records_skips_malformed(self, tracking_payload):
        records = AfterShipAdapter.to_tracking_records([{"slug": "ups"}, tracking_payload])

        assert [record.tracking_id for record in records] == ["1Z999AA10123456784"]

    def test_to_courier_names(self):
        couriers = [
            {"slug": "ups", "name": "UPS"},
            {"slug": "fedex", "name": "FedEx"},
            {"slug": "local", "name": None},
            {"name": "No Slug"},
        ]

        assert AfterShipAdapter.to_courier_names(couriers) == {"ups": "UPS", "fedex": "FedEx", "local": "local"}


@pytest.mark.asyncio
class TestAfterShipBackend:
    """Tests for AfterShipBackend."""

    async def test_fetch_trackings(self, tracking_payload):
        client = MagicMock()
        client.get_trackings = AsyncMock(return_value=[tracking_payload])
        backend = AfterShipBackend(client, AfterShipAdapter())
        query = TrackingQuery(keyword="ups", created_at_min=at(1), slug="ups")

        records = await backend.fetch_trackings(query)

        assert len(records) == 1
        client.get_trackings.assert_awaited_once_with(query.to_params())

    async def test_fetch_courier_names(self):
        client = MagicMock()
        client.get_couriers = AsyncMock(return_value=[{"slug": "ups", "name": "UPS"}])
        backend = AfterShipBackend(client, AfterShipAdapter())

        assert await backend.fetch_courier_names() == {"ups": "UPS"}

    async def test_errors_are_wrapped(self):
        """Should raise SourceFetchError on network failures."""
        client = MagicMock()
        client.get_couriers = AsyncMock(side_effect=aiohttp.ClientError("boom"))
        client.get_trackings = AsyncMock(side_effect=aiohttp.ClientError("boom"))
        backend = AfterShipBackend(client, AfterShipAdapter())

        with pytest.raises(SourceFetchError):
            await backend.fetch_courier_names()
        with pytest.raises(SourceFetchError):
            await backend.fetch_trackings(TrackingQuery(keyword=None, created_at_min=at(1)))
