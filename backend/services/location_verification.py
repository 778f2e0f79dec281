"""
Address verification pipeline.

Geocoding is tried first, then places search, then a manual record built
from the input itself. Provider problems never escape `verify_address`; only
configuration mistakes, empty input and an exhausted caller deadline do.
"""
from __future__ import annotations

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from domain.errors import InputValidationError, ProviderTransportError, VerificationTimeoutError
from domain.models import (
    Completeness,
    Coordinates,
    LocationVerification,
    PlaceDetails,
    StageTiming,
    VerificationSource,
    VerificationTrace,
)
from services import confidence
from services.address_parser import parse_address_manually
from services.completeness import analyze, parse_address_components
from services.geocoding import DEFAULT_TIMEOUT_SEC, GeocodingClient
from services.places_client import PlacesClient
from services.places_types import ProviderFailure, ProviderMatch, ProviderResult
from settings import LocationSettings

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 5
FALLBACK_COMPLETENESS = Completeness(score=50, issues=("Using fallback verification",))

_STAGE_SOURCES = {
    "geocoding": VerificationSource.GOOGLE_GEOCODING,
    "places": VerificationSource.GOOGLE_PLACES,
}


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0


def _require_text(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InputValidationError(message)
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        # Lone surrogates (e.g. undecodable argv bytes) cannot be sent to the providers
        raise InputValidationError("Input contains characters that cannot be encoded as UTF-8") from exc
    return value.strip()


def fallback_place_id() -> str:
    """`fallback-<epoch ms><6 random digits>`; the suffix keeps concurrent ids apart."""
    return f"fallback-{int(time.time() * 1000)}{secrets.randbelow(1_000_000):06d}"


def build_fallback_verification(address: str) -> LocationVerification:
    return LocationVerification(
        address=address,
        formatted_address=address,
        coordinates=Coordinates(),
        verification_source=VerificationSource.MANUAL,
        verification_date=datetime.now(timezone.utc),
        confidence=confidence.MANUAL_CONFIDENCE,
        place_id=fallback_place_id(),
        address_components=parse_address_manually(address),
        completeness=FALLBACK_COMPLETENESS,
    )


def build_verification_from_match(address: str, stage: str, match: ProviderMatch) -> LocationVerification:
    components = parse_address_components(match.address_components)
    return LocationVerification(
        address=address,
        formatted_address=match.formatted_address,
        coordinates=match.coordinates,
        verification_source=_STAGE_SOURCES[stage],
        verification_date=datetime.now(timezone.utc),
        confidence=confidence.score(stage, match),
        place_id=match.place_id,
        address_components=components,
        completeness=analyze(components),
    )


class LocationVerifier:
    def __init__(
        self,
        geocoding_client: GeocodingClient,
        places_client: PlacesClient,
        request_timeout: float = DEFAULT_TIMEOUT_SEC,
        deadline_seconds: Optional[float] = None,
    ):
        self.geocoding_client = geocoding_client
        self.places_client = places_client
        self.request_timeout = request_timeout
        self.deadline_seconds = deadline_seconds

    def verify_address(self, address: str, deadline_seconds: Optional[float] = None) -> LocationVerification:
        verification, _ = self.verify_address_traced(address, deadline_seconds=deadline_seconds)
        return verification

    def verify_address_traced(
        self,
        address: str,
        deadline_seconds: Optional[float] = None,
    ) -> Tuple[LocationVerification, VerificationTrace]:
        """
        Verify an address and also return per-stage timings.

        Args:
            address: Free-text address; surrounding whitespace is dropped.
            deadline_seconds: Total budget for the whole chain. Falls back to
                the verifier's default; None means no overall deadline.

        Raises:
            InputValidationError: empty address (no provider is called).
            VerificationTimeoutError: the budget ran out before a result.
        """
        address = _require_text(address, "Address is required for verification")
        budget = deadline_seconds if deadline_seconds is not None else self.deadline_seconds
        started = time.perf_counter()
        deadline = started + budget if budget is not None else None
        trace = VerificationTrace()

        stages: List[Tuple[str, Callable[..., ProviderResult]]] = [
            ("geocoding", self.geocoding_client.geocode),
            ("places", self.places_client.find_place_from_text),
        ]
        verification: Optional[LocationVerification] = None
        for stage, lookup in stages:
            match = self._run_stage(stage, lookup, address, deadline, trace)
            if match is not None:
                verification = build_verification_from_match(address, stage, match)
                break

        if verification is None:
            logger.info("[verify] no provider matched %r, using manual fallback", address)
            verification = build_fallback_verification(address)

        trace.total_ms = _elapsed_ms(started)
        logger.info(
            "[verify] %r -> source=%s confidence=%d verified=%s complete=%s total=%.0fms",
            address,
            verification.verification_source.value,
            verification.confidence,
            verification.verified,
            verification.completeness.is_complete,
            trace.total_ms,
        )
        return verification, trace

    def _stage_timeout(self, stage: str, deadline: Optional[float]) -> Tuple[float, bool]:
        """Return (timeout, capped_by_deadline) for the next stage."""
        if deadline is None:
            return self.request_timeout, False
        remaining = deadline - time.perf_counter()
        if remaining <= 0:
            raise VerificationTimeoutError(f"deadline exceeded before {stage} lookup")
        if remaining < self.request_timeout:
            return remaining, True
        return self.request_timeout, False

    def _run_stage(
        self,
        stage: str,
        lookup: Callable[..., ProviderResult],
        address: str,
        deadline: Optional[float],
        trace: VerificationTrace,
    ) -> Optional[ProviderMatch]:
        timeout, capped = self._stage_timeout(stage, deadline)
        stage_start = time.perf_counter()
        try:
            outcome = lookup(address, timeout=timeout)
        except ProviderTransportError as exc:
            duration = _elapsed_ms(stage_start)
            out_of_time = deadline is not None and (capped or time.perf_counter() >= deadline)
            if exc.timed_out and out_of_time:
                trace.stages.append(StageTiming(stage, "timeout", duration, str(exc)))
                logger.warning("[verify] %s lookup ran out of time after %.0fms", stage, duration)
                raise VerificationTimeoutError(f"deadline exceeded during {stage} lookup") from exc
            trace.stages.append(StageTiming(stage, "transport_error", duration, str(exc)))
            logger.warning("[verify] %s lookup failed after %.0fms, moving on: %s", stage, duration, exc)
            return None

        duration = _elapsed_ms(stage_start)
        if isinstance(outcome, ProviderFailure):
            trace.stages.append(StageTiming(stage, "no_match", duration, outcome.status))
            logger.info("[verify] %s found nothing (%s) in %.0fms", stage, outcome.status, duration)
            return None
        trace.stages.append(StageTiming(stage, "match", duration, outcome.place_id))
        logger.info("[verify] %s matched %s in %.0fms", stage, outcome.place_id, duration)
        return outcome

    def search_places(self, query: str, limit: int = MAX_SEARCH_RESULTS) -> List[PlaceDetails]:
        """Autocomplete-style lookup: up to `limit` (max 5) candidates, unscored."""
        query = _require_text(query, "Query parameter 'q' is required")
        limit = max(1, min(limit, MAX_SEARCH_RESULTS))
        places = self.places_client.text_search(query, max_results=limit, timeout=self.request_timeout)
        logger.info("[search] %r -> %d places", query, len(places))
        return places[:limit]

    def get_place_details(self, place_id: str) -> Optional[PlaceDetails]:
        place_id = _require_text(place_id, "place_id is required")
        return self.places_client.get_place_details(place_id, timeout=self.request_timeout)


def create_location_verifier(location_settings: Optional[LocationSettings] = None) -> LocationVerifier:
    """Build a verifier from explicit settings; raises ConfigurationError if a key is missing."""
    location_settings = location_settings or LocationSettings.from_settings()
    location_settings.require_keys()
    timeout = location_settings.request_timeout
    return LocationVerifier(
        geocoding_client=GeocodingClient(location_settings.geocoding_api_key, timeout=timeout),
        places_client=PlacesClient(location_settings.places_api_key, timeout=timeout),
        request_timeout=timeout,
        deadline_seconds=location_settings.deadline_seconds,
    )


_default_location_verifier: Optional[LocationVerifier] = None


def get_default_location_verifier() -> LocationVerifier:
    global _default_location_verifier
    if _default_location_verifier is None:
        _default_location_verifier = create_location_verifier()
    return _default_location_verifier
