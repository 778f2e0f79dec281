"""
Location API routes.

Address verification and place search used by the restaurant forms.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from domain.errors import (
    ConfigurationError,
    InputValidationError,
    ProviderError,
    VerificationTimeoutError,
)
from services.location_verification import get_default_location_verifier

router = APIRouter()
logger = logging.getLogger(__name__)


class AddressRequest(BaseModel):
    address: Optional[str] = None


class VerifyResponse(BaseModel):
    success: bool
    verification: Dict[str, Any]


class SearchResponse(BaseModel):
    success: bool
    places: List[Dict[str, Any]]


class PlaceResponse(BaseModel):
    success: bool
    place: Dict[str, Any]


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@router.post("/verify", response_model=VerifyResponse)
def verify_location(body: AddressRequest):
    """Verify a restaurant address; provider failures degrade to a manual result."""
    if not body.address or not body.address.strip():
        return error_response("Address is required", 400)

    try:
        verifier = get_default_location_verifier()
        verification = verifier.verify_address(body.address)
    except InputValidationError as exc:
        return error_response(str(exc), 400)
    except ConfigurationError as exc:
        logger.error("[location] verification not configured: %s", exc)
        return error_response("Address verification is not configured", 500)
    except VerificationTimeoutError as exc:
        logger.warning("[location] verification timed out: %s", exc)
        return error_response("Address verification timed out", 504)
    except Exception:
        logger.exception("[location] unexpected error verifying %r", body.address)
        return error_response("Failed to verify address", 500)

    return VerifyResponse(success=True, verification=verification.to_dict())


@router.get("/verify", response_model=SearchResponse)
def search_locations(q: Optional[str] = None):
    """Autocomplete-style place search, capped at five results."""
    if not q or not q.strip():
        return error_response("Query parameter 'q' is required", 400)

    try:
        verifier = get_default_location_verifier()
        places = verifier.search_places(q)
    except InputValidationError as exc:
        return error_response(str(exc), 400)
    except ConfigurationError as exc:
        logger.error("[location] search not configured: %s", exc)
        return error_response("Address verification is not configured", 500)
    except ProviderError as exc:
        logger.error("[location] search failed for %r: %s", q, exc)
        return error_response("Failed to search places", 500)
    except Exception:
        logger.exception("[location] unexpected error searching %r", q)
        return error_response("Failed to search places", 500)

    return SearchResponse(success=True, places=[p.to_dict() for p in places])


@router.get("/places/{place_id}", response_model=PlaceResponse)
def get_place(place_id: str):
    try:
        verifier = get_default_location_verifier()
        place = verifier.get_place_details(place_id)
    except InputValidationError as exc:
        return error_response(str(exc), 400)
    except ConfigurationError as exc:
        logger.error("[location] place details not configured: %s", exc)
        return error_response("Address verification is not configured", 500)
    except ProviderError as exc:
        logger.error("[location] place details failed for %s: %s", place_id, exc)
        return error_response("Failed to load place details", 500)
    except Exception:
        logger.exception("[location] unexpected error loading place %s", place_id)
        return error_response("Failed to load place details", 500)

    if place is None:
        return error_response("Place not found", 404)
    return PlaceResponse(success=True, place=place.to_dict())
