"""Friendly address resolution for delivery locations."""

import asyncio
import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from ..const import DEFAULT_COUNTRY
from .models import AggregatedPackage, Location

_LOGGER = logging.getLogger(__name__)

HERE = "here"


def is_device_location(address: Location, device_location: Optional[Location]) -> bool:
    """Check if every place field of the address matches the device location."""
    if device_location is None:
        return False
    fields = address.place_fields()
    device_fields = device_location.place_fields()
    return bool(fields) and all(device_fields.get(key) == value for key, value in fields.items())


def _is_domestic(address: Location, default_country: str) -> bool:
    return not address.country or address.country == default_country


# (condition, formatter) rows evaluated in order, first match wins
AddressRule = Tuple[Callable[[Location, Optional[Location], str], bool], Callable[[Location], str]]

ADDRESS_RULES: Sequence[AddressRule] = (
    (lambda a, device, country: is_device_location(a, device), lambda a: HERE),
    (lambda a, device, country: _is_domestic(a, country) and bool(a.city and a.state), lambda a: f"{a.city}, {a.state}"),
    (lambda a, device, country: _is_domestic(a, country) and bool(a.city), lambda a: a.city),
    (lambda a, device, country: _is_domestic(a, country), lambda a: ""),
    (lambda a, device, country: bool(a.city), lambda a: f"{a.city}, {a.country}"),
    (lambda a, device, country: True, lambda a: a.country or ""),
)


def describe_address(
    address: Optional[Location],
    device_location: Optional[Location],
    default_country: str = DEFAULT_COUNTRY,
) -> Optional[str]:
    """Return "here", a domestic "{city}, {state}" or a foreign "{city}, {country}" description.

    An empty string means the address is known but has nothing worth speaking.
    """
    if address is None or not address.place_fields():
        return None
    for condition, formatter in ADDRESS_RULES:
        if condition(address, device_location, default_country):
            return formatter(address)
    return None


async def resolve_addresses(
    packages: List[AggregatedPackage],
    geocoder,
    device_location: Optional[Location],
    default_country: str = DEFAULT_COUNTRY,
) -> List[AggregatedPackage]:
    """Attach a friendly address to each package with a delivery location.

    Each distinct delivery location is geocoded once, concurrently. A failed
    lookup only leaves the packages at that location without an address.

    Args:
        packages: Ranked aggregated packages
        geocoder: Backend exposing `resolve_address(text, ignore_errors)`
        device_location: Resolved device location
        default_country: Country whose addresses omit the country name

    Returns:
        New list of packages with `resolved_address` set where known
    """
    locations = list(dict.fromkeys(pkg.delivery_location for pkg in packages if pkg.delivery_location))
    if not locations:
        return list(packages)

    results = await asyncio.gather(
        *(geocoder.resolve_address(location, ignore_errors=True) for location in locations),
        return_exceptions=True,
    )

    addresses = {}
    for location, result in zip(locations, results):
        if isinstance(result, Exception):
            _LOGGER.warning("Failed to resolve address %s: %s", location, result)
            continue
        addresses[location] = describe_address(result, device_location, default_country)

    return [
        replace(pkg, resolved_address=addresses.get(pkg.delivery_location)) if pkg.delivery_location else pkg
        for pkg in packages
    ]
