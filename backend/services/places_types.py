"""
Typed results for the Google geocoding / places boundary.

Provider JSON is converted into these types as soon as it arrives so nothing
provider-shaped leaks past the client layer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from domain.errors import ProviderTransportError
from domain.models import Coordinates


@dataclass(frozen=True)
class RawAddressComponent:
    long_name: str
    short_name: str
    types: Tuple[str, ...]


@dataclass(frozen=True)
class ProviderMatch:
    provider: str  # "geocoding" or "places"
    place_id: str
    formatted_address: str
    coordinates: Coordinates
    location_type: Optional[str] = None  # geocoding only, e.g. "ROOFTOP"
    types: Tuple[str, ...] = ()
    address_components: Tuple[RawAddressComponent, ...] = ()
    name: Optional[str] = None
    business_status: Optional[str] = None


@dataclass(frozen=True)
class ProviderFailure:
    """Provider answered but produced nothing usable (ZERO_RESULTS, quota, denial...)."""
    provider: str
    status: str
    error_message: Optional[str] = None


ProviderResult = Union[ProviderMatch, ProviderFailure]


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v) for v in value if isinstance(v, str))


def parse_address_component_entries(value: Any) -> Tuple[RawAddressComponent, ...]:
    """Keep only well-formed component entries; anything else is dropped."""
    if not isinstance(value, list):
        return ()
    entries = []
    for item in value:
        if not isinstance(item, dict):
            continue
        long_name = item.get("long_name")
        if not isinstance(long_name, str) or not long_name:
            continue
        short_name = item.get("short_name")
        entries.append(
            RawAddressComponent(
                long_name=long_name,
                short_name=short_name if isinstance(short_name, str) else long_name,
                types=_as_str_tuple(item.get("types")),
            )
        )
    return tuple(entries)


def parse_provider_match(provider: str, item: Any) -> ProviderMatch:
    """
    Convert one geocoding result / places candidate into a ProviderMatch.

    Raises ProviderTransportError when the payload lacks the fields every
    match must carry (place id, formatted address, numeric location).
    """
    if not isinstance(item, dict):
        raise ProviderTransportError(provider, "result is not an object")
    geometry = item.get("geometry") or {}
    location = geometry.get("location") if isinstance(geometry, dict) else None
    try:
        lat = float(location["lat"])
        lng = float(location["lng"])
    except (TypeError, KeyError, ValueError):
        raise ProviderTransportError(provider, "result has no usable geometry.location")

    place_id = item.get("place_id")
    formatted_address = item.get("formatted_address")
    if not isinstance(place_id, str) or not place_id:
        raise ProviderTransportError(provider, "result has no place_id")
    if not isinstance(formatted_address, str) or not formatted_address:
        raise ProviderTransportError(provider, "result has no formatted_address")

    location_type = geometry.get("location_type")
    name = item.get("name")
    business_status = item.get("business_status")
    return ProviderMatch(
        provider=provider,
        place_id=place_id,
        formatted_address=formatted_address,
        coordinates=Coordinates(lat=lat, lng=lng),
        location_type=location_type if isinstance(location_type, str) else None,
        types=_as_str_tuple(item.get("types")),
        address_components=parse_address_component_entries(item.get("address_components")),
        name=name if isinstance(name, str) else None,
        business_status=business_status if isinstance(business_status, str) else None,
    )
