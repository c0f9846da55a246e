"""Proactive order status events."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Union

from ..const import ORDER_DELIVERED, ORDER_OUT_FOR_DELIVERY, ORDER_SHIPPED
from .dates import end_of_day, to_timezone
from .device import DeviceContext
from .models import AggregatedPackage, ProactiveEvent, TrackingStatus

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventRule:
    """Notification code of a status, and whether every occurrence notifies."""

    code: str
    always: bool


PROACTIVE_RULES: Dict[TrackingStatus, EventRule] = {
    TrackingStatus.IN_TRANSIT: EventRule(ORDER_SHIPPED, always=False),
    TrackingStatus.OUT_FOR_DELIVERY: EventRule(ORDER_OUT_FOR_DELIVERY, always=True),
    TrackingStatus.DELIVERED: EventRule(ORDER_DELIVERED, always=True),
}


def resolve_cutoff(cutoff: Union[datetime, timedelta], now: datetime) -> datetime:
    """Turn a rolling interval into an absolute cutoff."""
    if isinstance(cutoff, timedelta):
        return now - cutoff
    return to_timezone(cutoff, now.tzinfo)


def is_eligible(pkg: AggregatedPackage, cutoff: datetime) -> bool:
    """Check if a package carries a status transition newer than the cutoff."""
    rule = PROACTIVE_RULES.get(pkg.status)
    if rule is None or not pkg.last_updated > cutoff:
        return False
    return rule.always or pkg.occurrence_count == 1


def build_events(
    packages: Iterable[AggregatedPackage],
    cutoff: Union[datetime, timedelta],
    context: DeviceContext,
) -> List[ProactiveEvent]:
    """Build one proactive event per physical package with a new status transition.

    Args:
        packages: Aggregated packages
        cutoff: Last event timestamp, or a rolling interval before now
        context: Device context providing the current time

    Returns:
        Events for the notification transport, possibly empty
    """
    now = context.now
    cutoff = resolve_cutoff(cutoff, now)
    events = []

    for pkg in packages:
        if not is_eligible(pkg, cutoff):
            continue
        rule = PROACTIVE_RULES[pkg.status]
        delivered_on = pkg.delivery_date if rule.code == ORDER_DELIVERED else None
        expected_arrival = (
            end_of_day(pkg.delivery_date) if pkg.delivery_date and rule.code == ORDER_SHIPPED else None
        )
        for member_id in pkg.member_ids:
            events.append(
                ProactiveEvent(
                    reference_id=member_id,
                    timestamp=now,
                    expiry_time=end_of_day(now),
                    status=rule.code,
                    enter_timestamp=pkg.last_updated,
                    seller_name=pkg.title,
                    delivered_on=delivered_on,
                    expected_arrival=expected_arrival,
                )
            )

    _LOGGER.debug("Built %d proactive events since %s", len(events), cutoff.isoformat())
    return events
