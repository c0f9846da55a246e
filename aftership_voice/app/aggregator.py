"""Multi-package aggregation."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet, Hashable, Iterable, List, Optional, Tuple

from ..const import TOLERANCE_DAY, TOLERANCE_HOUR
from .models import AggregatedPackage, NormalizedPackage, TrackingStatus

DISTINCT_STATUSES = frozenset(
    {
        TrackingStatus.ATTEMPT_FAIL,
        TrackingStatus.AVAILABLE_FOR_PICKUP,
        TrackingStatus.EXCEPTION,
        TrackingStatus.DELIVERED,
        TrackingStatus.OUT_FOR_DELIVERY,
    }
)


@dataclass(frozen=True)
class GroupingPolicy:
    """Which statuses stay distinct, and how coarse date equivalence is."""

    distinct_statuses: FrozenSet[TrackingStatus] = DISTINCT_STATUSES
    date_tolerance: str = TOLERANCE_HOUR

    def __post_init__(self):
        if self.date_tolerance not in (TOLERANCE_HOUR, TOLERANCE_DAY):
            raise ValueError(f"Unsupported date tolerance: {self.date_tolerance}")

    def status_bucket(self, status: TrackingStatus) -> TrackingStatus:
        """Forward-looking statuses collapse into the expected bucket."""
        return status if status in self.distinct_statuses else TrackingStatus.EXPECTED

    def date_bucket(self, value: Optional[datetime]) -> Optional[datetime]:
        """Truncate a timestamp to the tolerance unit."""
        if value is None:
            return None
        value = value.replace(minute=0, second=0, microsecond=0)
        if self.date_tolerance == TOLERANCE_DAY:
            value = value.replace(hour=0)
        return value


DEFAULT_POLICY = GroupingPolicy()


def group_key(package: NormalizedPackage, policy: GroupingPolicy = DEFAULT_POLICY) -> Tuple[Hashable, ...]:
    """Equivalence key of a package; lastUpdated and occurrence count are ignored."""
    return (
        policy.status_bucket(package.status),
        package.courier,
        package.title,
        package.delivery_location,
        policy.date_bucket(package.delivery_date),
    )


def aggregate_packages(
    packages: Iterable[NormalizedPackage],
    policy: GroupingPolicy = DEFAULT_POLICY,
) -> List[AggregatedPackage]:
    """Group equivalent packages, keeping first-seen order.

    Args:
        packages: Normalized packages in arrival order
        policy: Grouping policy

    Returns:
        One AggregatedPackage per equivalence class
    """
    groups: Dict[Tuple[Hashable, ...], AggregatedPackage] = {}
    for package in packages:
        key = group_key(package, policy)
        if key in groups:
            groups[key].add(package)
        else:
            groups[key] = AggregatedPackage.seed(package)
    return list(groups.values())
