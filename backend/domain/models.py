"""
Core domain models for location verification.
These are framework-agnostic and are shared by the services and the API layer.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

VERIFIED_THRESHOLD = 70


class VerificationSource(str, Enum):
    """Which pipeline stage produced a verification."""
    GOOGLE_PLACES = "google_places"
    GOOGLE_GEOCODING = "google_geocoding"
    MANUAL = "manual"


@dataclass(frozen=True)
class Coordinates:
    lat: float = 0.0
    lng: float = 0.0

    @property
    def is_unresolved(self) -> bool:
        return self.lat == 0.0 and self.lng == 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class AddressComponents:
    """Normalized address fields, named after the Google component types."""
    street_number: Optional[str] = None
    route: Optional[str] = None
    locality: Optional[str] = None
    administrative_area_level_1: Optional[str] = None
    administrative_area_level_2: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        # Absent fields are omitted rather than sent as null
        return {
            key: value
            for key, value in (
                ("street_number", self.street_number),
                ("route", self.route),
                ("locality", self.locality),
                ("administrative_area_level_1", self.administrative_area_level_1),
                ("administrative_area_level_2", self.administrative_area_level_2),
                ("postal_code", self.postal_code),
                ("country", self.country),
            )
            if value
        }


@dataclass(frozen=True)
class Completeness:
    score: int
    issues: Tuple[str, ...] = ()

    @property
    def is_complete(self) -> bool:
        return not self.issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "issues": list(self.issues),
            "isComplete": self.is_complete,
        }


@dataclass(frozen=True)
class LocationVerification:
    """
    Result of verifying one free-text address.

    `verified` is derived from `confidence` so the two can never disagree.
    A fresh instance is produced for every call.
    """
    address: str
    formatted_address: str
    coordinates: Coordinates
    verification_source: VerificationSource
    verification_date: datetime
    confidence: int
    place_id: str
    address_components: AddressComponents
    completeness: Completeness

    @property
    def verified(self) -> bool:
        return self.confidence >= VERIFIED_THRESHOLD

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "formattedAddress": self.formatted_address,
            "coordinates": self.coordinates.to_dict(),
            "verified": self.verified,
            "verificationSource": self.verification_source.value,
            "verificationDate": self.verification_date.isoformat(),
            "confidence": self.confidence,
            "placeId": self.place_id,
            "addressComponents": self.address_components.to_dict(),
            "completeness": self.completeness.to_dict(),
        }


@dataclass(frozen=True)
class PlaceDetails:
    """A place candidate returned by search or a details lookup (no scoring)."""
    place_id: str
    formatted_address: str
    coordinates: Coordinates
    types: Tuple[str, ...] = ()
    name: Optional[str] = None
    business_status: Optional[str] = None
    address_components: Optional[AddressComponents] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "place_id": self.place_id,
            "formatted_address": self.formatted_address,
            "geometry": {"location": self.coordinates.to_dict()},
            "types": list(self.types),
        }
        if self.name:
            data["name"] = self.name
        if self.business_status:
            data["business_status"] = self.business_status
        if self.address_components is not None:
            data["address_components"] = self.address_components.to_dict()
        return data


@dataclass(frozen=True)
class StageTiming:
    stage: str  # "geocoding" or "places"
    outcome: str  # "match", "no_match", "transport_error", "timeout"
    duration_ms: float
    detail: Optional[str] = None


@dataclass
class VerificationTrace:
    """Step-by-step timing of one verification run, for observability only."""
    stages: List[StageTiming] = field(default_factory=list)
    total_ms: float = 0.0

    @property
    def method(self) -> str:
        for stage in self.stages:
            if stage.outcome == "match":
                return stage.stage
        return "fallback"

    def to_dict(self) -> Dict[str, Any]:
        timing: Dict[str, Any] = {f"{s.stage}Time": round(s.duration_ms, 1) for s in self.stages}
        timing["totalTime"] = round(self.total_ms, 1)
        timing["stages"] = [
            {
                "stage": s.stage,
                "outcome": s.outcome,
                "durationMs": round(s.duration_ms, 1),
                "detail": s.detail,
            }
            for s in self.stages
        ]
        return timing
