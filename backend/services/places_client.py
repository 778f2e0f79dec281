"""
Google Places client: find-place-from-text, text search and place details.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import requests

from domain.errors import (
    ConfigurationError,
    InputValidationError,
    ProviderStatusError,
    ProviderTransportError,
)
from domain.models import PlaceDetails
from services.completeness import parse_address_components
from services.geocoding import DEFAULT_TIMEOUT_SEC, GOOGLE_MAPS_BASE_URL, _get_json, log_provider_status
from services.places_types import ProviderFailure, ProviderMatch, ProviderResult, parse_provider_match

FIND_PLACE_FIELDS = "place_id,formatted_address,geometry,address_components,types"
DETAILS_FIELDS = "place_id,formatted_address,name,geometry,address_components,business_status,types"


def match_to_place_details(match: ProviderMatch) -> PlaceDetails:
    """Convert a parsed provider match into the public PlaceDetails shape."""
    return PlaceDetails(
        place_id=match.place_id,
        formatted_address=match.formatted_address,
        coordinates=match.coordinates,
        types=match.types,
        name=match.name,
        business_status=match.business_status,
        address_components=(
            parse_address_components(match.address_components) if match.address_components else None
        ),
    )


class PlacesClient:
    provider = "places"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ):
        if not api_key:
            raise ConfigurationError("Places API key is not configured")
        self.api_key = api_key
        self.base_url = (base_url or GOOGLE_MAPS_BASE_URL).rstrip("/") + "/place"
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    def _request(self, path: str, params: dict, timeout: Optional[float]) -> dict:
        return _get_json(
            self.session,
            f"{self.base_url}{path}",
            params={**params, "key": self.api_key},
            timeout=timeout if timeout is not None else self.timeout,
            provider=self.provider,
        )

    def find_place_from_text(self, query: str, timeout: Optional[float] = None) -> ProviderResult:
        """Return the first candidate for a free-text query, or a ProviderFailure."""
        query = (query or "").strip()
        if not query:
            raise InputValidationError("Query is required for places search")

        data = self._request(
            "/findplacefromtext/json",
            {"input": query, "inputtype": "textquery", "fields": FIND_PLACE_FIELDS},
            timeout,
        )
        status = data["status"]
        error_message = data.get("error_message")
        if status == "OK":
            candidates = data.get("candidates")
            if isinstance(candidates, list) and candidates:
                self.logger.debug("[places] %d candidates for %r", len(candidates), query)
                return parse_provider_match(self.provider, candidates[0])
            status = "ZERO_RESULTS"

        log_provider_status(self.provider, status, error_message)
        return ProviderFailure(provider=self.provider, status=status, error_message=error_message)

    def text_search(
        self,
        query: str,
        types: Sequence[str] = ("establishment",),
        max_results: int = 5,
        timeout: Optional[float] = None,
    ) -> List[PlaceDetails]:
        """
        Search places by free text. ZERO_RESULTS is an empty list; any other
        non-OK status raises ProviderStatusError.
        """
        query = (query or "").strip()
        if not query:
            raise InputValidationError("Query is required for places search")

        params = {"query": query}
        if types:
            params["type"] = "|".join(types)
        data = self._request("/textsearch/json", params, timeout)
        status = data["status"]
        if status == "ZERO_RESULTS":
            return []
        if status != "OK":
            log_provider_status(self.provider, status, data.get("error_message"))
            raise ProviderStatusError(self.provider, status, data.get("error_message"))

        results: List[PlaceDetails] = []
        for item in data.get("results") or []:
            if len(results) >= max_results:
                break
            try:
                results.append(match_to_place_details(parse_provider_match(self.provider, item)))
            except ProviderTransportError as exc:
                # One malformed entry should not hide the rest of the page
                self.logger.warning("[places] skipping malformed search result: %s", exc)
        self.logger.debug("[places] text_search %r got %d results", query, len(results))
        return results

    def get_place_details(self, place_id: str, timeout: Optional[float] = None) -> Optional[PlaceDetails]:
        """Look up one place by id; returns None when the id is unknown."""
        place_id = (place_id or "").strip()
        if not place_id:
            raise InputValidationError("place_id is required")

        data = self._request("/details/json", {"place_id": place_id, "fields": DETAILS_FIELDS}, timeout)
        status = data["status"]
        if status in ("NOT_FOUND", "ZERO_RESULTS", "INVALID_REQUEST"):
            self.logger.info("[places] no details for %s (%s)", place_id, status)
            return None
        if status != "OK":
            log_provider_status(self.provider, status, data.get("error_message"))
            raise ProviderStatusError(self.provider, status, data.get("error_message"))
        return match_to_place_details(parse_provider_match(self.provider, data.get("result")))
