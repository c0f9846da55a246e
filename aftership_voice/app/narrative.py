"""Spoken narrative generation."""

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..const import EXPECTED_PAST_PHRASE, EXPECTED_PRESENT_PHRASE, FOOTNOTE_BREAK
from .address import HERE
from .aggregator import DISTINCT_STATUSES
from .dates import calendar_phrase, clock_time, days_from_today
from .device import DeviceContext
from .models import AggregatedPackage, TrackingStatus
from .query import TrackingQuery
from .speech import format_markup, say_as


def _singular(pkg: AggregatedPackage, singular: str, plural: str) -> str:
    return singular if pkg.count == 1 else plural


def _spoken_address(pkg: AggregatedPackage, here: str) -> str:
    if not pkg.resolved_address:
        return ""
    if pkg.resolved_address == HERE:
        return here
    return "in " + say_as(pkg.resolved_address, "address")


def _attempt_fail(pkg: AggregatedPackage, context: DeviceContext) -> List[str]:
    return [
        TrackingStatus.ATTEMPT_FAIL.phrase,
        calendar_phrase(pkg.delivery_date, context.today) if pkg.delivery_date else "",
    ]


def _exception(pkg: AggregatedPackage, context: DeviceContext) -> List[str]:
    return [
        _singular(pkg, "is", "are"),
        TrackingStatus.EXCEPTION.phrase,
        f"as of {calendar_phrase(pkg.delivery_date, context.today)}" if pkg.delivery_date else "",
    ]


def _delivered(pkg: AggregatedPackage, context: DeviceContext) -> List[str]:
    date = pkg.delivery_date or pkg.last_updated
    return [
        _singular(pkg, "was", "were"),
        "" if pkg.delivery_date else "marked as",
        TrackingStatus.DELIVERED.phrase,
        _spoken_address(pkg, here="here"),
        calendar_phrase(date, context.today) if date else "",
        f"at {clock_time(pkg.delivery_date)}" if pkg.delivery_date else "",
    ]


def _out_for_delivery(pkg: AggregatedPackage, context: DeviceContext) -> List[str]:
    return [
        _singular(pkg, "is", "are"),
        TrackingStatus.OUT_FOR_DELIVERY.phrase,
        _spoken_address(pkg, here="towards here"),
        f"since {clock_time(pkg.delivery_date)}" if pkg.delivery_date else "",
    ]


def _available_for_pickup(pkg: AggregatedPackage, context: DeviceContext) -> List[str]:
    return [
        _singular(pkg, "is", "are"),
        TrackingStatus.AVAILABLE_FOR_PICKUP.phrase,
        _spoken_address(pkg, here=""),
        f"since {clock_time(pkg.delivery_date)}" if pkg.delivery_date else "",
    ]


def _expected(pkg: AggregatedPackage, context: DeviceContext) -> List[str]:
    if pkg.delivery_date:
        phrase = (
            EXPECTED_PRESENT_PHRASE
            if days_from_today(pkg.delivery_date, context.today) >= 0
            else EXPECTED_PAST_PHRASE
        )
        return [phrase, calendar_phrase(pkg.delivery_date, context.today)]
    return [_singular(pkg, "is", "are"), pkg.status.phrase]


StatusClause = Callable[[AggregatedPackage, DeviceContext], List[str]]

STATUS_CLAUSES: Dict[TrackingStatus, StatusClause] = {
    TrackingStatus.ATTEMPT_FAIL: _attempt_fail,
    TrackingStatus.EXCEPTION: _exception,
    TrackingStatus.DELIVERED: _delivered,
    TrackingStatus.OUT_FOR_DELIVERY: _out_for_delivery,
    TrackingStatus.AVAILABLE_FOR_PICKUP: _available_for_pickup,
    TrackingStatus.INFO_RECEIVED: _expected,
    TrackingStatus.IN_TRANSIT: _expected,
    TrackingStatus.PENDING: _expected,
    TrackingStatus.EXPECTED: _expected,
}


def package_sentence(pkg: AggregatedPackage, context: DeviceContext) -> str:
    """Detail sentence of one aggregated package."""
    words = [
        "A" if pkg.count == 1 else say_as(pkg.count, "cardinal"),
        pkg.courier,
        _singular(pkg, "package", "packages"),
        "from",
        format_markup(pkg.title),
    ]
    words.extend(STATUS_CLAUSES[pkg.status](pkg, context))
    return " ".join(word for word in words if word != "") + "."


def summary_buckets(packages: Iterable[AggregatedPackage]) -> Dict[TrackingStatus, int]:
    """Sum package counts per summary bucket, in first-seen order."""
    summary: Dict[TrackingStatus, int] = {}
    for pkg in packages:
        bucket = pkg.status if pkg.status in DISTINCT_STATUSES else TrackingStatus.EXPECTED
        summary[bucket] = summary.get(bucket, 0) + pkg.count
    return summary


def join_series(items: Sequence[str]) -> str:
    """Join with ", " and a final ", and "."""
    result = ""
    for index, item in enumerate(items):
        if index > 0:
            result += ", and " if index == len(items) - 1 else ", "
        result += item
    return result


def summary_sentence(
    packages: Sequence[AggregatedPackage],
    query: Optional[TrackingQuery],
    has_details: bool,
) -> str:
    """Summary sentence such as "Currently, you have 2 packages delivered, and 1 package in transit"."""
    buckets = summary_buckets(packages)
    counts = join_series(
        [f"{count} {'packages' if count > 1 else 'package'} {status.phrase}" for status, count in buckets.items()]
    )
    if not counts:
        counts = f"no package {query.tag.phrase}" if query and query.tag else "no package"

    keyword = f" from {query.keyword}" if query and query.mentions_keyword else ""
    return f"Currently, you have {counts}{keyword}{':' if has_details else '.'}"


def build_speech(
    packages: Sequence[AggregatedPackage],
    context: DeviceContext,
    query: Optional[TrackingQuery] = None,
    footnotes: Optional[Sequence[str]] = None,
) -> str:
    """Assemble the speech markup for ranked, address-resolved packages.

    Args:
        packages: Ranked aggregated packages with resolved addresses
        context: Device context
        query: Query the packages were fetched with
        footnotes: Notes spoken after a pause, one paragraph each

    Returns:
        Speech markup string
    """
    details = [package_sentence(pkg, context) for pkg in packages]
    summary = summary_sentence(packages, query, has_details=bool(details))

    if len(details) > 1:
        body = summary + "</p>\n<p>" + "\n".join(details)
    elif len(details) == 1:
        body = details[0]
    else:
        body = summary

    speech = f"<p>{body}</p>"
    if footnotes:
        speech += f"\n{FOOTNOTE_BREAK}\n" + "\n".join(f"<p>{note}</p>" for note in footnotes)
    return speech
