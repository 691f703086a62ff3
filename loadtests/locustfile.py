"""Storeroom Load Testing — Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

The server must be started with the load test seed files so the actors
and products referenced by the generators exist (see data_generators).

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Version contention:
    locust -f loadtests/locustfile.py SeparationContentionUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401
from loadtests.scenarios.requisitions import RequisitionUser  # noqa: F401
from loadtests.scenarios.stress import RequisitionFloodUser, SeparationContentionUser  # noqa: F401
from loadtests.scenarios.suggestions import SuggestionUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the API error body so you see "Cannot deliver a requisition in
    Pending state" instead of just "409".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Print the store statistics when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        for store_id in ("store-001", "store-002"):
            resp = requests.get(
                f"{environment.host}/requisitions/statistics",
                params={"store_id": store_id},
                timeout=5,
            )
            print(f"[LOADTEST] {store_id}: {resp.json()}")
        print()
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch statistics: {e}\n")
