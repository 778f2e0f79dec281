"""Verify addresses against the live Google providers and print the outcome.

Usage:
    cd backend && python -m scripts.verify_addresses                # built-in suite
    cd backend && python -m scripts.verify_addresses "10 Downing St, London SW1A 2AA, UK"

Requires GOOGLE_PLACES_API_KEY (and optionally GOOGLE_GEOCODING_API_KEY) in the
environment or in backend/.env.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from domain.errors import ConfigurationError
from services.address_suite import DEFAULT_ADDRESS_CASES, AddressCase, run_address_suite
from services.location_verification import create_location_verifier

LOG = logging.getLogger("verify_addresses")


def main(argv: Optional[List[str]] = None) -> int:
    if not LOG.handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Run address verification against the live providers.")
    parser.add_argument("addresses", nargs="*", help="Addresses to verify (defaults to the built-in suite).")
    parser.add_argument("--json", action="store_true", help="Print the full report as JSON.")
    args = parser.parse_args(argv)

    load_dotenv(Path(__file__).resolve().parents[1] / ".env")
    try:
        verifier = create_location_verifier()
    except ConfigurationError as exc:
        LOG.error("Configuration error: %s", exc)
        return 2

    cases = [AddressCase(a, "command line") for a in args.addresses] or list(DEFAULT_ADDRESS_CASES)
    report = run_address_suite(verifier, cases)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        for entry in report["results"]:
            LOG.info("%s (%s)", entry["address"], entry["description"])
            if "error" in entry:
                LOG.info("  error: %s", entry["error"])
                continue
            v = entry["verification"]
            LOG.info(
                "  source=%s confidence=%s verified=%s completeness=%s%%",
                v["source"],
                v["confidence"],
                v["verified"],
                v["completeness"]["score"],
            )
            for issue in v["completeness"]["issues"]:
                LOG.info("    - %s", issue)
            LOG.info("  %s", entry["testResult"]["message"])
        LOG.info("%s", report["summary"]["message"])

    return 0 if report["summary"]["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
