"""Forward geocoding against the Google Geocoding API.

The client issues exactly one request per call and never retries; a failed
lookup is reported back so the verifier can move on to places search.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import requests

from domain.errors import ConfigurationError, InputValidationError, ProviderTransportError
from services.places_types import ProviderFailure, ProviderResult, parse_provider_match

GOOGLE_MAPS_BASE_URL = "https://maps.googleapis.com/maps/api"
GEOCODING_PATH = "/geocode/json"
DEFAULT_TIMEOUT_SEC = 5.0
logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"key=[^&\s)'\"]+")


def _redact_key(text: str) -> str:
    """requests puts the full URL (including ?key=...) into its error messages."""
    return _KEY_RE.sub("key=<redacted>", text)


def _get_json(
    session: requests.Session,
    url: str,
    *,
    params: dict[str, Any],
    timeout: float,
    provider: str,
) -> dict[str, Any]:
    """Perform a GET request and return the decoded JSON object.

    Every transport-level problem is raised as ProviderTransportError.
    """
    try:
        resp = session.get(url, params=params, timeout=timeout)
    except requests.Timeout as exc:
        raise ProviderTransportError(
            provider, f"request timed out after {timeout:.1f}s", timed_out=True
        ) from exc
    except requests.RequestException as exc:
        raise ProviderTransportError(provider, f"request failed: {_redact_key(str(exc))}") from exc
    except UnicodeError as exc:
        raise ProviderTransportError(provider, f"request could not be encoded: {exc.reason}") from exc

    if not 200 <= resp.status_code < 300:
        raise ProviderTransportError(provider, f"unexpected HTTP status {resp.status_code}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise ProviderTransportError(provider, "response is not valid JSON") from exc
    if not isinstance(data, dict) or not isinstance(data.get("status"), str):
        raise ProviderTransportError(provider, "response has no status field")
    return data


def log_provider_status(provider: str, status: str, error_message: Optional[str]) -> None:
    """Log a non-OK provider status at the level it deserves."""
    if status == "ZERO_RESULTS":
        logger.info("[%s] no results", provider)
    elif status == "OVER_QUERY_LIMIT":
        logger.error("[%s] QUOTA EXCEEDED: %s", provider, error_message or "query limit reached")
    elif status == "REQUEST_DENIED":
        logger.warning("[%s] request denied (is the API enabled for this key?): %s", provider, error_message)
    else:
        logger.error("[%s] API error %s: %s", provider, status, error_message)


class GeocodingClient:
    provider = "geocoding"

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ):
        if not api_key:
            raise ConfigurationError("Geocoding API key is not configured")
        self.api_key = api_key
        self.base_url = (base_url or GOOGLE_MAPS_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def geocode(self, address: str, timeout: Optional[float] = None) -> ProviderResult:
        """Geocode a free-text address.

        Returns the first result as a ProviderMatch, or a ProviderFailure
        carrying the provider status when nothing usable came back. Raises
        ProviderTransportError on network or payload problems.
        """
        address = (address or "").strip()
        if not address:
            raise InputValidationError("Address is required for geocoding")

        logger.debug("[geocoding] request for %r", address)
        data = _get_json(
            self.session,
            f"{self.base_url}{GEOCODING_PATH}",
            params={"address": address, "key": self.api_key},
            timeout=timeout if timeout is not None else self.timeout,
            provider=self.provider,
        )

        status = data["status"]
        error_message = data.get("error_message")
        if status == "OK":
            results = data.get("results")
            if isinstance(results, list) and results:
                logger.debug("[geocoding] %d results for %r", len(results), address)
                return parse_provider_match(self.provider, results[0])
            status = "ZERO_RESULTS"

        log_provider_status(self.provider, status, error_message)
        return ProviderFailure(provider=self.provider, status=status, error_message=error_message)
