import pytest
import requests

from domain.errors import InputValidationError, ProviderStatusError, ProviderTransportError
from services.places_client import FIND_PLACE_FIELDS, PlacesClient
from services.places_types import ProviderFailure, ProviderMatch

from google_payloads import DummyResponse, FakeSession, place_candidate


def _client(*responses):
    session = FakeSession(*responses)
    return PlacesClient("places-key", session=session), session


class TestFindPlaceFromText:
    def test_returns_first_candidate(self):
        client, session = _client(
            DummyResponse({"status": "OK", "candidates": [place_candidate(place_id="a"), place_candidate(place_id="b")]})
        )

        result = client.find_place_from_text("The Bistro Manchester")

        assert isinstance(result, ProviderMatch)
        assert result.place_id == "a"
        assert result.location_type is None
        assert result.name == "The Bistro"
        call = session.calls[0]
        assert call["url"].endswith("/maps/api/place/findplacefromtext/json")
        assert call["params"]["inputtype"] == "textquery"
        assert call["params"]["fields"] == FIND_PLACE_FIELDS
        assert call["params"]["key"] == "places-key"

    def test_no_candidates_is_failure(self):
        client, _ = _client(DummyResponse({"status": "ZERO_RESULTS", "candidates": []}))
        result = client.find_place_from_text("zzzz")
        assert isinstance(result, ProviderFailure)
        assert result.status == "ZERO_RESULTS"

    def test_transport_error_propagates(self):
        client, _ = _client(requests.ConnectionError("boom"))
        with pytest.raises(ProviderTransportError):
            client.find_place_from_text("The Bistro")


class TestTextSearch:
    def test_caps_results_and_sends_types(self):
        results = [place_candidate(place_id=f"p{i}") for i in range(8)]
        client, session = _client(DummyResponse({"status": "OK", "results": results}))

        places = client.text_search("pizza", types=("restaurant", "cafe"), max_results=5)

        assert [p.place_id for p in places] == ["p0", "p1", "p2", "p3", "p4"]
        assert session.calls[0]["params"]["type"] == "restaurant|cafe"
        assert places[0].to_dict()["geometry"] == {"location": {"lat": 53.48, "lng": -2.24}}

    def test_zero_results_is_empty_list(self):
        client, _ = _client(DummyResponse({"status": "ZERO_RESULTS", "results": []}))
        assert client.text_search("pizza") == []

    def test_provider_error_raises_status_error(self):
        client, _ = _client(DummyResponse({"status": "OVER_QUERY_LIMIT", "error_message": "quota"}))
        with pytest.raises(ProviderStatusError) as excinfo:
            client.text_search("pizza")
        assert excinfo.value.status == "OVER_QUERY_LIMIT"

    def test_malformed_entries_are_skipped(self):
        broken = place_candidate(place_id="broken")
        del broken["formatted_address"]
        client, _ = _client(DummyResponse({"status": "OK", "results": [broken, place_candidate(place_id="ok")]}))

        places = client.text_search("pizza")

        assert [p.place_id for p in places] == ["ok"]

    def test_blank_query_rejected(self):
        client, session = _client()
        with pytest.raises(InputValidationError):
            client.text_search(" ")
        assert session.calls == []


class TestPlaceDetails:
    def test_returns_details_with_components(self):
        client, session = _client(DummyResponse({"status": "OK", "result": place_candidate(place_id="xyz")}))

        place = client.get_place_details("xyz")

        assert place.place_id == "xyz"
        assert place.address_components.locality == "Manchester"
        assert session.calls[0]["params"]["place_id"] == "xyz"

    def test_unknown_place_is_none(self):
        client, _ = _client(DummyResponse({"status": "NOT_FOUND"}))
        assert client.get_place_details("missing") is None
