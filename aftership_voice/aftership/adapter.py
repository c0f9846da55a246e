"""AfterShip response adapter - Converts AfterShip API responses to tracking records."""

import asyncio
import logging
from typing import Any, Dict, List

import aiohttp

from ..app.dates import parse_datetime
from ..app.exceptions import MalformedRecordError, SourceFetchError
from ..app.models import Checkpoint, RawTrackingRecord, TrackingStatus
from ..app.query import TrackingQuery

_LOGGER = logging.getLogger(__name__)


class AfterShipAdapter:
    """Adapter for converting AfterShip API responses to tracking records."""

    @staticmethod
    def to_checkpoint(data: Dict[str, Any]) -> Checkpoint:
        """Convert an AfterShip checkpoint."""
        return Checkpoint(
            status=TrackingStatus.from_tag(data.get("tag")),
            timestamp=parse_datetime(data.get("checkpoint_time") or data.get("created_at")),
            city=data.get("city"),
            state=data.get("state"),
            country=data.get("country_name"),
            zip=data.get("zip"),
        )

    @staticmethod
    def to_tracking_record(data: Dict[str, Any]) -> RawTrackingRecord:
        """Convert an AfterShip tracking object to a RawTrackingRecord.

        Args:
            data: Tracking object from the /trackings response

        Returns:
            RawTrackingRecord

        Raises:
            MalformedRecordError: If required fields are missing
        """
        if not isinstance(data, dict):
            raise MalformedRecordError(f"Unexpected tracking payload: {data!r}")

        tracking_id = data.get("tracking_number") or data.get("id")
        if not tracking_id:
            raise MalformedRecordError("Missing tracking number in AfterShip response")
        slug = data.get("slug")
        if not slug:
            raise MalformedRecordError(f"Missing courier slug for tracking {tracking_id}")

        checkpoints = data.get("checkpoints") or []
        return RawTrackingRecord(
            tracking_id=tracking_id,
            status=TrackingStatus.from_tag(data.get("tag")),
            slug=slug,
            # AfterShip defaults the title to the tracking number
            title=data.get("title") or tracking_id,
            note=data.get("note"),
            last_updated_at=parse_datetime(data.get("last_updated_at") or data.get("updated_at")),
            expected_delivery=parse_datetime(data.get("expected_delivery")),
            checkpoints=[
                AfterShipAdapter.to_checkpoint(item) for item in checkpoints if isinstance(item, dict)
            ],
        )

    @staticmethod
    def to_tracking_records(trackings: List[Dict[str, Any]]) -> List[RawTrackingRecord]:
        """Convert trackings, skipping malformed ones."""
        records = []
        for data in trackings or []:
            try:
                records.append(AfterShipAdapter.to_tracking_record(data))
            except MalformedRecordError as err:
                _LOGGER.warning("Skipping malformed AfterShip tracking: %s", err)
        return records

    @staticmethod
    def to_courier_names(couriers: List[Dict[str, Any]]) -> Dict[str, str]:
        """Convert the courier list to a slug to name mapping."""
        return {
            courier["slug"]: courier.get("name") or courier["slug"]
            for courier in couriers or []
            if isinstance(courier, dict) and courier.get("slug")
        }


class AfterShipBackend:
    """Tracking source implementation that App Layer uses."""

    def __init__(self, client, adapter: AfterShipAdapter):
        """Initialize backend with client and adapter.

        Args:
            client: AfterShipClient instance
            adapter: AfterShipAdapter instance
        """
        self._client = client
        self._adapter = adapter

    async def fetch_courier_names(self) -> Dict[str, str]:
        """Get courier display names by slug."""
        try:
            couriers = await self._client.get_couriers()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
            _LOGGER.error("Failed to get couriers data: %s", err)
            raise SourceFetchError(f"Failed to get couriers data: {err}") from err
        return self._adapter.to_courier_names(couriers)

    async def fetch_trackings(self, query: TrackingQuery) -> List[RawTrackingRecord]:
        """Get tracking records matching a query."""
        try:
            trackings = await self._client.get_trackings(query.to_params())
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as err:
            _LOGGER.error("Failed to get trackings data: %s", err)
            raise SourceFetchError(f"Failed to get trackings data: {err}") from err
        return self._adapter.to_tracking_records(trackings)
