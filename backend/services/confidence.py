"""Heuristic confidence scores for provider matches."""
from __future__ import annotations

from services.places_types import ProviderMatch

GEOCODING_BASE = 75
PLACES_BASE = 70
MANUAL_CONFIDENCE = 50

# (type or location_type, bonus)
GEOCODING_TYPE_BONUSES = (("street_address", 15),)
GEOCODING_ROOFTOP_BONUS = 10
PLACES_TYPE_BONUSES = (("establishment", 15), ("restaurant", 10))


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def score(source: str, match: ProviderMatch) -> int:
    """Return an integer confidence in [0, 100] for a geocoding or places match."""
    types = set(match.types)
    if source == "geocoding":
        confidence = GEOCODING_BASE
        confidence += sum(bonus for kind, bonus in GEOCODING_TYPE_BONUSES if kind in types)
        if match.location_type == "ROOFTOP":
            confidence += GEOCODING_ROOFTOP_BONUS
    elif source == "places":
        confidence = PLACES_BASE
        confidence += sum(bonus for kind, bonus in PLACES_TYPE_BONUSES if kind in types)
    else:
        raise ValueError(f"unknown confidence source: {source!r}")
    return _clamp(confidence)
