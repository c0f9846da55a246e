"""Tracking source query builder."""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional

from ..const import AFTERSHIP_TRACKING_FIELDS, DEFAULT_DAYS_SEARCH
from .models import TrackingStatus

_LOGGER = logging.getLogger(__name__)

_PREPOSITION_PATTERN = re.compile(r"^(?:from|for)\s+", re.IGNORECASE)

SLUG_SEPARATOR = ","


@dataclass(frozen=True)
class TrackingQuery:
    """Query descriptor for the tracking source.

    At most one of `slug`, `tag` or `text` is set. None of them set means every
    tracking created within the lookback window.
    """

    keyword: Optional[str]
    created_at_min: datetime
    slug: Optional[str] = None
    tag: Optional[TrackingStatus] = None
    text: Optional[str] = None

    @property
    def mentions_keyword(self) -> bool:
        """Whether the narrative should mention the keyword ("... from {keyword}")."""
        return bool(self.slug or self.text)

    def to_params(self) -> Dict[str, Any]:
        """Convert to tracking source request parameters."""
        params: Dict[str, Any] = {
            "created_at_min": self.created_at_min.isoformat(timespec="seconds"),
            "fields": AFTERSHIP_TRACKING_FIELDS,
        }
        if self.slug:
            params["slug"] = self.slug
        elif self.tag:
            params["tag"] = self.tag.value
        elif self.text:
            params["keyword"] = self.text
        return params


def clean_keyword(keyword: Optional[str]) -> Optional[str]:
    """Strip a leading "from"/"for" preposition from a keyword."""
    if not keyword:
        return None
    keyword = _PREPOSITION_PATTERN.sub("", keyword.strip())
    return keyword or None


def pascal_case(text: str) -> str:
    """Convert words to PascalCase, e.g. "out for delivery" -> "OutForDelivery"."""
    return "".join(word[:1].upper() + word[1:] for word in text.lower().split())


def build_query(
    keyword: Optional[str],
    couriers: Mapping[str, str],
    now: datetime,
    days_search: int = DEFAULT_DAYS_SEARCH,
) -> TrackingQuery:
    """Turn a free-text keyword into a tracking source query.

    The keyword resolves, in order, to a courier slug filter when it names a
    courier, a status tag filter when it names a status, or a free-text filter.

    Args:
        keyword: Free-text keyword (may be None)
        couriers: Mapping of courier slug to display name
        now: Reference time for the lookback window
        days_search: Lookback window in days

    Returns:
        TrackingQuery
    """
    keyword = clean_keyword(keyword)
    created_at_min = now - timedelta(days=days_search)

    if not keyword:
        return TrackingQuery(keyword=None, created_at_min=created_at_min)

    # More than one courier can share a display name
    slugs = [slug for slug, name in couriers.items() if name and name.lower() == keyword.lower()]
    if slugs:
        query = TrackingQuery(keyword=keyword, created_at_min=created_at_min, slug=SLUG_SEPARATOR.join(slugs))
    else:
        tag = pascal_case(keyword)
        source_tags = {status.value: status for status in TrackingStatus.source_tags()}
        if tag in source_tags:
            query = TrackingQuery(keyword=keyword, created_at_min=created_at_min, tag=source_tags[tag])
        else:
            query = TrackingQuery(keyword=keyword, created_at_min=created_at_min, text=keyword)

    _LOGGER.debug("Trackings query: %s", query.to_params())
    return query
