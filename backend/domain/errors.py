"""
Error taxonomy for the location verification service.

Only ConfigurationError, InputValidationError and VerificationTimeoutError
ever reach an HTTP caller from verify_address; provider problems are absorbed
into the manual fallback.
"""
from typing import Optional


class LocationServiceError(Exception):
    """Base class for every error raised by the location services."""


class ConfigurationError(LocationServiceError):
    """A provider API key (or other required setting) is missing."""


class InputValidationError(LocationServiceError):
    """The caller supplied an empty address or query."""


class VerificationTimeoutError(LocationServiceError):
    """The caller's deadline ran out before the verification chain finished."""


class ProviderError(LocationServiceError):
    """Base class for problems talking to a geocoding/places provider."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderTransportError(ProviderError):
    """Network failure, malformed JSON or an unexpected HTTP status."""

    def __init__(self, provider: str, message: str, timed_out: bool = False) -> None:
        super().__init__(provider, message)
        self.timed_out = timed_out


class ProviderStatusError(ProviderError):
    """The provider answered, but with a non-OK status we cannot fall back from."""

    def __init__(self, provider: str, status: str, error_message: Optional[str] = None) -> None:
        detail = f"{status} ({error_message})" if error_message else status
        super().__init__(provider, detail)
        self.status = status
        self.error_message = error_message
