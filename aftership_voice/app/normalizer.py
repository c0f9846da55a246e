"""Tracking record normalizer."""

import logging
import re
from typing import Iterable, List, Mapping, Optional, Pattern, Union

from ..const import DEFAULT_DAYS_PAST_DELIVERED
from .dates import days_to_today, to_timezone
from .device import DeviceContext
from .exceptions import MalformedRecordError
from .models import NormalizedPackage, RawTrackingRecord, TrackingStatus

_LOGGER = logging.getLogger(__name__)

# Statuses whose delivery information comes from the matching checkpoint
CHECKPOINT_STATUSES = frozenset(
    {
        TrackingStatus.AVAILABLE_FOR_PICKUP,
        TrackingStatus.OUT_FOR_DELIVERY,
        TrackingStatus.DELIVERED,
    }
)


def count_occurrences(record: RawTrackingRecord) -> int:
    """Number of checkpoints that reached the record status, unique by timestamp."""
    return len(
        {checkpoint.timestamp for checkpoint in record.checkpoints if checkpoint.status == record.status}
    )


def normalize_record(
    record: RawTrackingRecord,
    couriers: Mapping[str, str],
    context: DeviceContext,
) -> NormalizedPackage:
    """Derive delivery date, location and recency counters of a single record.

    Raises:
        MalformedRecordError: If the record misses required fields
    """
    if not record.tracking_id:
        raise MalformedRecordError("Missing tracking identifier")
    if record.last_updated_at is None:
        raise MalformedRecordError(f"Missing last updated timestamp for {record.tracking_id}")

    delivery_date = None
    delivery_location = None

    if record.status in CHECKPOINT_STATUSES:
        # Latest checkpoint that reached the current status
        checkpoint = next(
            (item for item in reversed(record.checkpoints) if item.status == record.status),
            None,
        )
        if checkpoint:
            if checkpoint.timestamp:
                delivery_date = to_timezone(checkpoint.timestamp, context.timezone)
            delivery_location = checkpoint.location
    elif record.expected_delivery:
        delivery_date = to_timezone(record.expected_delivery, context.timezone)

    return NormalizedPackage(
        source_id=record.tracking_id,
        status=record.status,
        slug=record.slug,
        courier_name=couriers.get(record.slug),
        title=record.title,
        last_updated=to_timezone(record.last_updated_at, context.timezone),
        occurrence_count=count_occurrences(record),
        delivery_date=delivery_date,
        delivery_location=delivery_location,
    )


def is_stale(package: NormalizedPackage, context: DeviceContext, days_past_delivered: int) -> bool:
    """Check if a delivered package is older than the configured number of days."""
    if package.status is not TrackingStatus.DELIVERED:
        return False
    reference = package.delivery_date or package.last_updated
    return days_to_today(reference, context.today) > days_past_delivered


def normalize_records(
    records: Iterable[RawTrackingRecord],
    couriers: Mapping[str, str],
    context: DeviceContext,
    note_filter: Union[str, Pattern, None] = None,
    days_past_delivered: int = DEFAULT_DAYS_PAST_DELIVERED,
) -> List[NormalizedPackage]:
    """Normalize tracking records, discarding untagged, stale and malformed ones.

    Args:
        records: Raw tracking records, in source order
        couriers: Mapping of courier slug to display name
        context: Device context
        note_filter: Regular expression the record note must match, if set
        days_past_delivered: Delivered packages older than this are discarded

    Returns:
        One NormalizedPackage per surviving record, in input order
    """
    # An empty expression matches every note, including a missing one
    if isinstance(note_filter, str):
        note_filter = re.compile(note_filter) if note_filter else None

    packages = []
    for record in records:
        # Ignore tracking for note not matching tagging regexp
        if note_filter is not None and not (record.note and note_filter.search(record.note)):
            continue

        try:
            package = normalize_record(record, couriers, context)
        except MalformedRecordError as err:
            _LOGGER.warning("Skipping malformed tracking record: %s", err)
            continue

        if is_stale(package, context, days_past_delivered):
            _LOGGER.debug("Skipping delivered tracking %s older than %d days", package.source_id, days_past_delivered)
            continue

        packages.append(package)

    return packages
