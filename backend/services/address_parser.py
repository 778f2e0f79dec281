"""
Best-effort parsing of a free-text address when no provider could match it.

Only used to populate the components of a manual (fallback) verification;
it never affects the fallback's confidence or completeness.
"""
from __future__ import annotations

import re
from typing import Dict

from domain.models import AddressComponents

COUNTRY_INDICATORS = (
    "uk", "united kingdom", "usa", "united states", "canada",
    "australia", "ireland", "france", "germany", "spain", "italy",
)

POSTAL_CODE_PATTERNS = (
    # (pattern, inferred country)
    (re.compile(r"\b[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}\b", re.IGNORECASE), "United Kingdom"),
    (re.compile(r"\b\d{5}(?:-\d{4})?\b"), None),
    (re.compile(r"\b[A-Z]\d[A-Z]\s*\d[A-Z]\d\b", re.IGNORECASE), "Canada"),
)

STREET_NUMBER_RE = re.compile(r"^\d+[a-z]?\b", re.IGNORECASE)


def _has_country_word(text: str) -> bool:
    lowered = text.lower()
    return any(re.search(rf"\b{re.escape(c)}\b", lowered) for c in COUNTRY_INDICATORS)


def parse_address_manually(address: str) -> AddressComponents:
    parts = [p.strip() for p in address.split(",") if p.strip()]
    if not parts:
        return AddressComponents()

    fields: Dict[str, str] = {}
    for index, part in enumerate(parts):
        for pattern, country in POSTAL_CODE_PATTERNS:
            # A number opening the first part is the house number, not a ZIP
            match = next((m for m in pattern.finditer(part) if index or m.start()), None)
            if match:
                fields["postal_code"] = match.group(0)
                if country:
                    fields["country"] = country
                break
        if "postal_code" in fields:
            break

    if len(parts) > 1 and _has_country_word(parts[-1]):
        fields["country"] = parts[-1]

    number = STREET_NUMBER_RE.match(parts[0])
    if number:
        fields["street_number"] = number.group(0)
        street = parts[0][number.end():].strip()
        if street:
            fields["route"] = street

    if len(parts) >= 2:
        # City is the part before the country, or the last part when there is none
        city_index = len(parts) - 2 if "country" in fields and _has_country_word(parts[-1]) else len(parts) - 1
        if city_index > 0 or not number:
            city = parts[city_index]
            if fields.get("postal_code"):
                city = city.replace(fields["postal_code"], "").strip()
            if city:
                fields["locality"] = city

    return AddressComponents(**fields)
