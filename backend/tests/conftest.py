import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from services import location_verification  # noqa: E402


@pytest.fixture(autouse=True)
def reset_default_verifier(monkeypatch):
    """Never let one test's verifier (or a real one) leak into another."""
    monkeypatch.setattr(location_verification, "_default_location_verifier", None)
    for name in (
        "GOOGLE_PLACES_API_KEY",
        "GOOGLE_GEOCODING_API_KEY",
        "LOCATION_REQUEST_TIMEOUT",
        "LOCATION_VERIFY_DEADLINE",
    ):
        monkeypatch.delenv(name, raising=False)
