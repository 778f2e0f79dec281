import pytest
import requests

from domain.errors import ConfigurationError, InputValidationError, ProviderTransportError
from services.geocoding import GeocodingClient, _redact_key
from services.places_types import ProviderFailure, ProviderMatch

from google_payloads import DummyResponse, FakeSession, geocode_payload, geocode_result


def _client(*responses):
    session = FakeSession(*responses)
    return GeocodingClient("test-key", session=session, timeout=3.0), session


def test_geocode_returns_first_result_as_match():
    client, session = _client(
        DummyResponse(geocode_payload(geocode_result(place_id="first"), geocode_result(place_id="second")))
    )

    result = client.geocode("  123 Main Street, London SW1A 1AA, UK  ")

    assert isinstance(result, ProviderMatch)
    assert result.place_id == "first"
    assert result.location_type == "ROOFTOP"
    assert result.coordinates.lat == pytest.approx(51.501)
    assert "street_address" in result.types
    call = session.calls[0]
    assert call["url"] == "https://maps.googleapis.com/maps/api/geocode/json"
    assert call["params"] == {"address": "123 Main Street, London SW1A 1AA, UK", "key": "test-key"}
    assert call["timeout"] == 3.0


def test_geocode_zero_results_is_failure_not_exception():
    client, _ = _client(DummyResponse({"status": "ZERO_RESULTS", "results": []}))

    result = client.geocode("nowhere at all")

    assert isinstance(result, ProviderFailure)
    assert result.status == "ZERO_RESULTS"


def test_geocode_ok_with_empty_results_is_zero_results():
    client, _ = _client(DummyResponse(geocode_payload()))
    result = client.geocode("somewhere")
    assert isinstance(result, ProviderFailure)
    assert result.status == "ZERO_RESULTS"


@pytest.mark.parametrize("status", ["REQUEST_DENIED", "OVER_QUERY_LIMIT", "UNKNOWN_ERROR"])
def test_geocode_provider_errors_are_failures(status):
    client, _ = _client(DummyResponse(geocode_payload(status=status, error_message="nope")))

    result = client.geocode("somewhere")

    assert isinstance(result, ProviderFailure)
    assert result.status == status
    assert result.error_message == "nope"


def test_geocode_timeout_raises_transport_error_flagged_as_timeout():
    client, _ = _client(requests.Timeout("read timed out"))

    with pytest.raises(ProviderTransportError) as excinfo:
        client.geocode("somewhere", timeout=0.5)
    assert excinfo.value.timed_out is True


def test_geocode_connection_error_hides_api_key():
    client, _ = _client(
        requests.ConnectionError("Max retries exceeded with url: /geocode/json?address=x&key=secret-123")
    )

    with pytest.raises(ProviderTransportError) as excinfo:
        client.geocode("somewhere")
    assert "secret-123" not in str(excinfo.value)
    assert excinfo.value.timed_out is False


def test_geocode_non_2xx_and_bad_json_are_transport_errors():
    client, _ = _client(
        DummyResponse({}, status_code=503),
        DummyResponse(json_error=ValueError("Expecting value")),
        DummyResponse(["not", "an", "object"]),
    )
    for _ in range(3):
        with pytest.raises(ProviderTransportError):
            client.geocode("somewhere")


def test_geocode_result_without_geometry_is_transport_error():
    broken = geocode_result()
    del broken["geometry"]
    client, _ = _client(DummyResponse(geocode_payload(broken)))

    with pytest.raises(ProviderTransportError):
        client.geocode("somewhere")


def test_geocode_rejects_blank_address_without_calling_provider():
    client, session = _client()
    with pytest.raises(InputValidationError):
        client.geocode("   ")
    assert session.calls == []


def test_geocoding_client_requires_key():
    with pytest.raises(ConfigurationError):
        GeocodingClient("")


def test_redact_key():
    assert _redact_key("url?address=a&key=abc123&x=1") == "url?address=a&key=<redacted>&x=1"


def test_geocode_unencodable_request_is_transport_error():
    client, _ = _client(UnicodeEncodeError("utf-8", "Caf\udce9", 3, 4, "surrogates not allowed"))

    with pytest.raises(ProviderTransportError) as excinfo:
        client.geocode("12 Caf\udce9 Street")
    assert "surrogates not allowed" in str(excinfo.value)
    assert excinfo.value.timed_out is False
