"""Urgency ranking of aggregated packages."""

from datetime import date
from typing import Iterable, List

from .dates import days_from_today
from .models import AggregatedPackage, TrackingStatus

# Highest priority first; other statuses rank lowest among ties
STATUS_PRIORITY = (
    TrackingStatus.DELIVERED,
    TrackingStatus.ATTEMPT_FAIL,
    TrackingStatus.EXCEPTION,
    TrackingStatus.OUT_FOR_DELIVERY,
    TrackingStatus.AVAILABLE_FOR_PICKUP,
)


def status_priority(status: TrackingStatus) -> int:
    """Larger is more urgent."""
    if status in STATUS_PRIORITY:
        return len(STATUS_PRIORITY) - STATUS_PRIORITY.index(status)
    return 0


def rank_packages(packages: Iterable[AggregatedPackage], today: date) -> List[AggregatedPackage]:
    """Sort packages by day distance from today, then status priority.

    Packages without a delivery date go last, in their original order.
    """

    def sort_key(package: AggregatedPackage):
        if package.delivery_date is None:
            return (1, 0, 0)
        return (0, abs(days_from_today(package.delivery_date, today)), -status_priority(package.status))

    return sorted(packages, key=sort_key)
