"""Platform-agnostic API for package tracking narration."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple, Union

from ..config import Settings
from ..config import settings as default_settings
from .address import resolve_addresses
from .aggregator import GroupingPolicy, aggregate_packages
from .device import DeviceContext
from .events import build_events
from .models import AggregatedPackage, ProactiveEvent
from .narrative import build_speech
from .normalizer import normalize_records
from .query import TrackingQuery, build_query
from .ranker import rank_packages

_LOGGER = logging.getLogger(__name__)


class PackageTrackingAPI:
    """Turns tracking source records into speech output and proactive events."""

    def __init__(self, backend, geocoder=None, settings: Optional[Settings] = None):
        """Initialize with collaborator implementations.

        Args:
            backend: Tracking source exposing `fetch_courier_names()` and `fetch_trackings(query)`
            geocoder: Address resolver exposing `resolve_address(text, ignore_errors)`
            settings: Application settings
        """
        self._backend = backend
        self._geocoder = geocoder
        self._settings = settings or default_settings
        self._policy = GroupingPolicy(date_tolerance=self._settings.date_tolerance)

    async def get_packages(
        self, keyword: Optional[str], context: DeviceContext
    ) -> Tuple[TrackingQuery, List[AggregatedPackage]]:
        """Fetch, normalize, aggregate and rank trackings.

        Args:
            keyword: Optional keyword filter
            context: Device context

        Returns:
            Tuple of (query, ranked packages limited to the configured count)

        Raises:
            SourceFetchError: If the tracking source request fails
        """
        couriers = await self._backend.fetch_courier_names()
        query = build_query(keyword, couriers, context.now, self._settings.aftership_days_search)
        if self._settings.debug_mode:
            _LOGGER.debug("Aftership trackings query: %s", query.to_params())

        records = await self._backend.fetch_trackings(query)
        packages = normalize_records(
            records,
            couriers,
            context,
            note_filter=self._settings.aftership_note_tagging,
            days_past_delivered=self._settings.aftership_days_past_delivered,
        )
        aggregated = aggregate_packages(packages, self._policy)
        ranked = rank_packages(aggregated, context.today)
        _LOGGER.info(
            "Fetched %d trackings, %d kept, %d aggregated packages",
            len(records),
            len(packages),
            len(aggregated),
        )
        return query, ranked[: self._settings.aftership_tracking_count_limit]

    async def build_narrative(
        self,
        keyword: Optional[str],
        context: DeviceContext,
        footnotes: Optional[Sequence[str]] = None,
    ) -> str:
        """Build the speech output describing tracked packages.

        Args:
            keyword: Optional keyword filter (courier, status or free text)
            context: Device context
            footnotes: Notes appended after the narrative

        Returns:
            Speech markup string

        Raises:
            SourceFetchError: If the tracking source request fails
        """
        query, packages = await self.get_packages(keyword, context)
        if self._geocoder is not None:
            packages = await resolve_addresses(
                packages, self._geocoder, context.location, self._settings.default_country
            )
        if self._settings.mute_footnotes:
            footnotes = None
        return build_speech(packages, context, query, footnotes)

    async def build_proactive_events(
        self,
        cutoff: Union[datetime, timedelta],
        context: DeviceContext,
    ) -> List[ProactiveEvent]:
        """Build proactive events for status transitions newer than the cutoff.

        Args:
            cutoff: Last event timestamp, or a rolling interval before now
            context: Device context

        Returns:
            List of ProactiveEvent objects, possibly empty

        Raises:
            SourceFetchError: If the tracking source request fails
        """
        _, packages = await self.get_packages(None, context)
        events = build_events(packages, cutoff, context)
        if self._settings.debug_mode:
            _LOGGER.debug("Proactive events: %s", [event.to_dict() for event in events])
        return events
