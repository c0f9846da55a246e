"""Data models for package tracking narration - platform-agnostic."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from ..const import (
    PROACTIVE_EVENT_LOCALE,
    PROACTIVE_EVENT_NAME,
    PROACTIVE_SELLER_NAME,
    STATUS_PHRASES,
)
from .dates import to_iso


class TrackingStatus(str, Enum):
    """AfterShip tracking status tag, plus the synthetic expected bucket."""

    INFO_RECEIVED = "InfoReceived"
    IN_TRANSIT = "InTransit"
    AVAILABLE_FOR_PICKUP = "AvailableForPickup"
    OUT_FOR_DELIVERY = "OutForDelivery"
    ATTEMPT_FAIL = "AttemptFail"
    DELIVERED = "Delivered"
    EXCEPTION = "Exception"
    PENDING = "Pending"
    EXPECTED = "ExpectedDelivery"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "TrackingStatus":
        """Return the status for a tag, unknown tags fall into the expected bucket."""
        try:
            return cls(tag)
        except ValueError:
            return cls.EXPECTED

    @classmethod
    def source_tags(cls) -> List["TrackingStatus"]:
        """Statuses the tracking source can filter on."""
        return [status for status in cls if status is not cls.EXPECTED]

    @property
    def phrase(self) -> str:
        """Human status phrase."""
        return STATUS_PHRASES[self.value]


@dataclass(frozen=True)
class Location:
    """Resolved geographic location."""

    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zipcode: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    def place_fields(self) -> Dict[str, str]:
        """Return the non-coordinate fields that are set."""
        fields = {
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "zipcode": self.zipcode,
        }
        return {key: value for key, value in fields.items() if value}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for persistence."""
        data: Dict[str, Any] = dict(self.place_fields())
        if self.lat is not None:
            data["lat"] = self.lat
        if self.lng is not None:
            data["lng"] = self.lng
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Location"]:
        """Build from a persisted dictionary."""
        if not data:
            return None
        return cls(
            city=data.get("city"),
            state=data.get("state"),
            country=data.get("country"),
            zipcode=data.get("zipcode"),
            lat=data.get("lat"),
            lng=data.get("lng"),
        )


@dataclass(frozen=True)
class Checkpoint:
    """Represents a single carrier-reported tracking event."""

    status: TrackingStatus
    timestamp: Optional[datetime] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    zip: Optional[str] = None

    @property
    def location(self) -> Optional[str]:
        """Present location fields joined with commas."""
        parts = [part for part in (self.city, self.state, self.country, self.zip) if part]
        return ", ".join(parts) if parts else None


@dataclass(frozen=True)
class RawTrackingRecord:
    """Tracking record as returned by the tracking source."""

    tracking_id: str
    status: TrackingStatus
    slug: str
    title: str
    note: Optional[str] = None
    last_updated_at: Optional[datetime] = None
    expected_delivery: Optional[datetime] = None
    checkpoints: List[Checkpoint] = field(default_factory=list)


@dataclass(frozen=True)
class NormalizedPackage:
    """One surviving tracking record, with delivery information resolved."""

    source_id: str
    status: TrackingStatus
    slug: str
    courier_name: Optional[str]
    title: str
    last_updated: datetime
    occurrence_count: int
    delivery_date: Optional[datetime] = None
    delivery_location: Optional[str] = None

    @property
    def courier(self) -> str:
        """Spoken courier name, falling back to the slug."""
        return self.courier_name or self.slug


@dataclass
class AggregatedPackage:
    """Equivalence class of normalized packages narrated as one unit."""

    status: TrackingStatus
    slug: str
    courier_name: Optional[str]
    title: str
    last_updated: datetime
    occurrence_count: int
    delivery_date: Optional[datetime] = None
    delivery_location: Optional[str] = None
    member_ids: List[str] = field(default_factory=list)
    resolved_address: Optional[str] = None

    @classmethod
    def seed(cls, package: NormalizedPackage) -> "AggregatedPackage":
        """Create a new group from its first member."""
        return cls(
            status=package.status,
            slug=package.slug,
            courier_name=package.courier_name,
            title=package.title,
            last_updated=package.last_updated,
            occurrence_count=package.occurrence_count,
            delivery_date=package.delivery_date,
            delivery_location=package.delivery_location,
            member_ids=[package.source_id],
        )

    @property
    def count(self) -> int:
        """Number of physical packages in the group."""
        return len(self.member_ids)

    @property
    def courier(self) -> str:
        """Spoken courier name, falling back to the slug."""
        return self.courier_name or self.slug

    def add(self, package: NormalizedPackage) -> None:
        """Fold an equivalent package into the group."""
        self.member_ids.append(package.source_id)


@dataclass(frozen=True)
class ProactiveEvent:
    """Order status notification for one physical package."""

    reference_id: str
    timestamp: datetime
    expiry_time: datetime
    status: str
    enter_timestamp: datetime
    seller_name: str
    delivered_on: Optional[datetime] = None
    expected_arrival: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the proactive events API payload."""
        state: Dict[str, Any] = {
            "status": self.status,
            "enterTimeStamp": to_iso(self.enter_timestamp),
        }
        if self.delivered_on:
            state["deliveredOn"] = to_iso(self.delivered_on)
        if self.expected_arrival:
            state["deliveryDetails"] = {"expectedArrival": to_iso(self.expected_arrival)}

        return {
            "timestamp": to_iso(self.timestamp),
            "referenceId": self.reference_id,
            "expiryTime": to_iso(self.expiry_time),
            "event": {
                "name": PROACTIVE_EVENT_NAME,
                "payload": {
                    "state": state,
                    "order": {"seller": {"name": PROACTIVE_SELLER_NAME}},
                },
            },
            "localizedAttributes": [
                {"locale": PROACTIVE_EVENT_LOCALE, "sellerName": self.seller_name},
            ],
        }
