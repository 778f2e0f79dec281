"""
Diagnostic routes for address verification.

These run the same pipeline as /api/location/verify but expose step timings
and raw provider output for manual testing.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from domain.errors import (
    ConfigurationError,
    InputValidationError,
    ProviderTransportError,
    VerificationTimeoutError,
)
from services.address_suite import run_address_suite, summarize_verification
from services.completeness import requires_state
from services.location_verification import get_default_location_verifier
from services.places_types import ProviderFailure

router = APIRouter()
logger = logging.getLogger(__name__)

DEFAULT_TEST_ADDRESS = "40 Ardaveen Ave, Newry BT35 8UJ, UK"


class AddressRequest(BaseModel):
    address: Optional[str] = None


def _error(message: str, status_code: int, details: Optional[str] = None) -> JSONResponse:
    body = {"error": message}
    if details:
        body["details"] = details
    return JSONResponse(body, status_code=status_code)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post("/debug-verify")
def debug_verify(body: AddressRequest):
    """Verify an address and report which stage answered and how long each took."""
    if not body.address or not body.address.strip():
        return _error("Address is required", 400)

    try:
        verifier = get_default_location_verifier()
        verification, trace = verifier.verify_address_traced(body.address)
    except InputValidationError as exc:
        return _error(str(exc), 400)
    except ConfigurationError as exc:
        return _error("API key not configured", 500, str(exc))
    except VerificationTimeoutError as exc:
        return _error("Debug verification timed out", 504, str(exc))
    except Exception as exc:
        logger.exception("[debug-verify] unexpected error")
        return _error("Debug verification failed", 500, str(exc))

    logger.info("[debug-verify] method=%s total=%.0fms", trace.method, trace.total_ms)
    return {
        "success": True,
        "method": trace.method,
        "verification": verification.to_dict(),
        "timing": trace.to_dict(),
    }


@router.get("/location/test")
def run_location_tests():
    """Run the built-in address suite and report pass/fail per address."""
    try:
        verifier = get_default_location_verifier()
        report = run_address_suite(verifier)
    except ConfigurationError as exc:
        return _error("Failed to run address verification tests", 500, str(exc))
    except Exception as exc:
        logger.exception("[location-test] suite crashed")
        return _error("Failed to run address verification tests", 500, str(exc))

    logger.info("[location-test] %s", report["summary"]["message"])
    return {"success": True, **report, "timestamp": _now_iso()}


@router.post("/location/test")
def test_single_address(body: AddressRequest):
    if not body.address or not body.address.strip():
        return _error("Address is required", 400)

    try:
        verifier = get_default_location_verifier()
        verification = verifier.verify_address(body.address)
    except InputValidationError as exc:
        return _error(str(exc), 400)
    except ConfigurationError as exc:
        return _error("Failed to test address", 500, str(exc))
    except VerificationTimeoutError as exc:
        return _error("Failed to test address", 504, str(exc))
    except Exception as exc:
        logger.exception("[location-test] unexpected error")
        return _error("Failed to test address", 500, str(exc))

    components = verification.address_components
    return {
        "success": True,
        "result": {
            "address": body.address,
            "verification": {
                **summarize_verification(verification),
                "components": {
                    "streetNumber": components.street_number,
                    "streetName": components.route,
                    "city": components.locality,
                    "state": components.administrative_area_level_1,
                    "postalCode": components.postal_code,
                    "country": components.country,
                },
            },
            "analysis": {
                "hasStreetNumber": bool(components.street_number),
                "hasStreetName": bool(components.route),
                "hasCity": bool(components.locality),
                "hasPostalCode": bool(components.postal_code),
                "hasCountry": bool(components.country),
                "requiresState": requires_state(components.country),
                "hasState": bool(components.administrative_area_level_1),
            },
            "timestamp": _now_iso(),
        },
    }


@router.get("/test-geocoding")
def test_geocoding(address: str = DEFAULT_TEST_ADDRESS):
    """Call the geocoding client directly, bypassing the fallback chain."""
    try:
        verifier = get_default_location_verifier()
        outcome = verifier.geocoding_client.geocode(address)
    except InputValidationError as exc:
        return _error(str(exc), 400)
    except ConfigurationError as exc:
        return _error("API key not configured", 500, str(exc))
    except ProviderTransportError as exc:
        logger.error("[test-geocoding] transport error: %s", exc)
        return JSONResponse(
            {"success": False, "error": "Test failed", "details": str(exc)},
            status_code=500,
        )
    except Exception as exc:
        logger.exception("[test-geocoding] unexpected error")
        return JSONResponse({"success": False, "error": "Test failed", "details": str(exc)}, status_code=500)

    if isinstance(outcome, ProviderFailure):
        return {
            "success": False,
            "geocodingWorking": False,
            "error": outcome.status,
            "errorMessage": outcome.error_message,
        }
    return {
        "success": True,
        "geocodingWorking": True,
        "originalAddress": address,
        "formattedAddress": outcome.formatted_address,
        "coordinates": outcome.coordinates.to_dict(),
        "placeId": outcome.place_id,
        "locationType": outcome.location_type,
        "types": list(outcome.types),
        "addressComponents": [
            {"long_name": c.long_name, "short_name": c.short_name, "types": list(c.types)}
            for c in outcome.address_components
        ],
    }
