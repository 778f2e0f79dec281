"""
Address component normalization and completeness analysis.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from domain.models import AddressComponents, Completeness
from services.places_types import RawAddressComponent

# Countries whose addresses need a state/province to be deliverable.
STATE_REQUIRED_COUNTRIES = {
    "united states",
    "united states of america",
    "usa",
    "us",
    "canada",
    "australia",
}

# (field, weight, issue) in the order issues are reported
REQUIRED_FIELDS: Tuple[Tuple[str, int, str], ...] = (
    ("street_number", 25, "Missing building/house number"),
    ("route", 25, "Missing street name"),
    ("locality", 25, "Missing city/locality"),
    ("postal_code", 15, "Missing postal code"),
    ("country", 10, "Missing country"),
)
STATE_WEIGHT = 10

_COMPONENT_TYPES = (
    "street_number",
    "route",
    "locality",
    "postal_town",
    "administrative_area_level_1",
    "administrative_area_level_2",
    "country",
    "postal_code",
)


def parse_address_components(entries: Iterable[RawAddressComponent]) -> AddressComponents:
    """Map provider component entries onto our normalized fields.

    The first recognised type of each entry wins. `postal_town` is used as the
    locality only when no `locality` entry exists (typical for UK results).
    """
    fields: Dict[str, str] = {}
    postal_town: Optional[str] = None
    for entry in entries:
        kind = next((t for t in _COMPONENT_TYPES if t in entry.types), None)
        if kind is None:
            continue
        if kind == "postal_town":
            postal_town = postal_town or entry.long_name
            continue
        fields.setdefault(kind, entry.long_name)
    if "locality" not in fields and postal_town:
        fields["locality"] = postal_town
    return AddressComponents(**fields)


def requires_state(country: Optional[str]) -> bool:
    return (country or "").strip().lower() in STATE_REQUIRED_COUNTRIES


def analyze(components: AddressComponents) -> Completeness:
    """
    Score how fully specified an address is.

    Each required field carries a weight; the score is the present weight as
    a percentage of the required weight (floored). It is 100 only when no
    required field is missing and drops with every missing field.
    """
    issues: List[str] = []
    required_weight = 0
    present_weight = 0
    for name, weight, issue in REQUIRED_FIELDS:
        required_weight += weight
        if getattr(components, name):
            present_weight += weight
        else:
            issues.append(issue)

    if requires_state(components.country):
        required_weight += STATE_WEIGHT
        if components.administrative_area_level_1:
            present_weight += STATE_WEIGHT
        else:
            issues.append(f"Missing state/province (required for {components.country})")

    score = (100 * present_weight) // required_weight
    return Completeness(score=score, issues=tuple(issues))
