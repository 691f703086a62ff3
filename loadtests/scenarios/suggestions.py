"""Suggestion load test scenarios.

A store keeper maintains weekday averages, while requesters look up the
suggestion for the weekday of the delivery date they are planning for.
"""

import random
from datetime import date, timedelta

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import PRODUCTS, actor_headers, stock_keeper, suggestion_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import SuggestionState


class SuggestionMaintenanceJourney(SequentialTaskSet):
    """Save a week of suggestions -> Revise one -> Remove one."""

    def on_start(self):
        self.state = SuggestionState(store_id=random.choice(["store-001", "store-002"]))
        self.keeper = stock_keeper()

    @task
    def save_week(self):
        for weekday in range(7):
            self._save(suggestion_data(self.state.store_id, weekday=weekday))

    @task
    def revise(self):
        self._save(suggestion_data(self.state.store_id, weekday=random.randint(0, 6)))

    @task
    def remove_one(self):
        if not self.state.suggestion_ids:
            return
        suggestion_id = self.state.suggestion_ids.pop()
        with self.client.delete(
            f"/suggestions/{suggestion_id}",
            headers=actor_headers(self.keeper),
            catch_response=True,
            name="DELETE /suggestions/{id}",
        ) as resp:
            # another user may have removed the same upserted suggestion
            if resp.status_code not in (200, 404):
                resp.failure(f"Remove suggestion failed: {extract_error_detail(resp)}")
            else:
                resp.success()

    @task
    def done(self):
        self.interrupt()

    def _save(self, payload):
        with self.client.put(
            "/suggestions",
            json=payload,
            headers=actor_headers(self.keeper),
            catch_response=True,
            name="PUT /suggestions",
        ) as resp:
            if resp.status_code == 200:
                self.state.suggestion_ids.append(resp.json()["suggestion_id"])
            else:
                resp.failure(f"Save suggestion failed: {extract_error_detail(resp)}")


class SuggestionLookupJourney(SequentialTaskSet):
    """What a requester's screen asks for while filling a requisition."""

    @task
    def by_delivery_date(self):
        product = random.choice(PRODUCTS)
        self.client.get(
            "/suggestions/by-delivery-date",
            params={
                "store_id": "store-001",
                "product_code": product["code"],
                "delivery_date": (date.today() + timedelta(days=random.randint(0, 6))).isoformat(),
            },
            name="GET /suggestions/by-delivery-date",
        )

    @task
    def product_week(self):
        product = random.choice(PRODUCTS)
        self.client.get(
            f"/suggestions/products/{product['code']}",
            params={"store_id": "store-001"},
            name="GET /suggestions/products/{code}",
        )

    @task
    def done(self):
        self.interrupt()


class SuggestionUser(HttpUser):
    wait_time = between(1.0, 3.0)
    tasks = {
        SuggestionMaintenanceJourney: 1,
        SuggestionLookupJourney: 4,
    }
