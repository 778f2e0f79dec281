import os
from dataclasses import dataclass
from typing import Optional

from domain.errors import ConfigurationError

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_float(name: str, default: Optional[float] = None) -> Optional[float]:
    val = os.getenv(name)
    if val is None or val.strip() == "":
        return default
    try:
        return float(val)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number of seconds, got {val!r}") from exc


class Settings:
    def __init__(self) -> None:
        self.GOOGLE_PLACES_API_KEY: str = os.getenv("GOOGLE_PLACES_API_KEY", "")
        # The Geocoding API is usually enabled on the same key as Places.
        self.GOOGLE_GEOCODING_API_KEY: str = os.getenv("GOOGLE_GEOCODING_API_KEY") or self.GOOGLE_PLACES_API_KEY
        self.LOCATION_REQUEST_TIMEOUT: float = _as_float("LOCATION_REQUEST_TIMEOUT", 5.0)
        self.LOCATION_VERIFY_DEADLINE: Optional[float] = _as_float("LOCATION_VERIFY_DEADLINE")
        self.LOCATION_DEBUG_ROUTES_ENABLED: bool = _as_bool(os.getenv("LOCATION_DEBUG_ROUTES_ENABLED"), True)
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class LocationSettings:
    """Explicit configuration handed to the location verifier factory."""
    geocoding_api_key: str
    places_api_key: str
    request_timeout: float = 5.0
    deadline_seconds: Optional[float] = None

    @classmethod
    def from_settings(cls, source: Optional[Settings] = None) -> "LocationSettings":
        source = source or Settings()
        return cls(
            geocoding_api_key=source.GOOGLE_GEOCODING_API_KEY,
            places_api_key=source.GOOGLE_PLACES_API_KEY,
            request_timeout=source.LOCATION_REQUEST_TIMEOUT,
            deadline_seconds=source.LOCATION_VERIFY_DEADLINE,
        )

    def require_keys(self) -> None:
        if not self.geocoding_api_key:
            raise ConfigurationError("GOOGLE_GEOCODING_API_KEY (or GOOGLE_PLACES_API_KEY) is not configured")
        if not self.places_api_key:
            raise ConfigurationError("GOOGLE_PLACES_API_KEY is not configured")


settings = Settings()
