"""
Tests for address component parsing and completeness scoring.
"""
from domain.models import AddressComponents
from services.completeness import analyze, parse_address_components, requires_state
from services.places_types import parse_address_component_entries

from google_payloads import LONDON_STREET_COMPONENTS, NEW_YORK_COMPONENTS, component


FULL_UK = dict(
    street_number="123",
    route="Main Street",
    locality="London",
    postal_code="SW1A 1AA",
    country="United Kingdom",
)


class TestParseAddressComponents:
    def test_postal_town_fills_locality_for_uk(self):
        parsed = parse_address_components(parse_address_component_entries(LONDON_STREET_COMPONENTS))
        assert parsed.locality == "London"
        assert parsed.route == "Main Street"
        assert parsed.postal_code == "SW1A 1AA"
        assert parsed.administrative_area_level_2 == "Greater London"
        assert parsed.country == "United Kingdom"

    def test_locality_wins_over_postal_town(self):
        entries = parse_address_component_entries(
            [component("Newry", "postal_town"), component("Bessbrook", "locality", "political")]
        )
        assert parse_address_components(entries).locality == "Bessbrook"

    def test_uses_long_names(self):
        parsed = parse_address_components(parse_address_component_entries(NEW_YORK_COMPONENTS))
        assert parsed.administrative_area_level_1 == "New York"
        assert parsed.country == "United States"

    def test_malformed_entries_are_ignored(self):
        entries = parse_address_component_entries(
            [None, {"types": ["route"]}, {"long_name": "Elm St", "types": "route"}, component("5", "street_number")]
        )
        parsed = parse_address_components(entries)
        assert parsed.street_number == "5"
        assert parsed.route is None


class TestAnalyze:
    def test_complete_uk_address_without_state(self):
        result = analyze(AddressComponents(**FULL_UK))
        assert result.is_complete is True
        assert result.score == 100
        assert result.issues == ()

    def test_us_address_missing_state_is_incomplete(self):
        result = analyze(AddressComponents(**{**FULL_UK, "country": "United States"}))
        assert result.is_complete is False
        assert result.score < 100
        assert len(result.issues) == 1
        assert "state" in result.issues[0].lower()

    def test_us_address_with_state_is_complete(self):
        result = analyze(
            AddressComponents(**{**FULL_UK, "country": "United States", "administrative_area_level_1": "NY"})
        )
        assert result.is_complete is True
        assert result.score == 100

    def test_country_rule_is_case_insensitive(self):
        assert requires_state("CANADA")
        assert requires_state(" australia ")
        assert not requires_state("United Kingdom")
        assert not requires_state(None)

    def test_city_only_lists_missing_fields(self):
        result = analyze(AddressComponents(locality="London", country="United Kingdom"))
        assert result.is_complete is False
        assert result.issues == (
            "Missing building/house number",
            "Missing street name",
            "Missing postal code",
        )

    def test_score_strictly_decreases_with_each_missing_field(self):
        fields = dict(FULL_UK, country="Canada", administrative_area_level_1="Ontario")
        scores = []
        for name in ("street_number", "route", "locality", "postal_code", "administrative_area_level_1"):
            scores.append(analyze(AddressComponents(**fields)).score)
            fields[name] = None
        scores.append(analyze(AddressComponents(**fields)).score)
        assert scores[0] == 100
        assert all(a > b for a, b in zip(scores, scores[1:]))

    def test_empty_components(self):
        result = analyze(AddressComponents())
        assert result.score == 0
        assert len(result.issues) == 5
        assert result.is_complete is (len(result.issues) == 0)
