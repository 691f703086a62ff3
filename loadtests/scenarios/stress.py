"""Stress test scenarios.

RequisitionFloodUser creates requisitions as fast as it can.
SeparationContentionUser has many store keepers race on the same
requisition with ``expected_version``, so most writes lose with 409.
"""

import random

from locust import HttpUser, constant_pacing, task

from loadtests.data_generators import actor_headers, requester, requisition_data, stock_keeper
from loadtests.helpers.response import extract_error_detail, is_version_conflict


class RequisitionFloodUser(HttpUser):
    """Stress test: maximum creation throughput.

    Every task creates a new aggregate to avoid contention; each one
    allocates a number from the per-store sequence.
    """

    wait_time = constant_pacing(0.1)  # ~10 requests/sec per user

    @task(5)
    def create_requisition(self):
        """1 event: RequisitionCreated."""
        self.client.post(
            "/requisitions",
            json=requisition_data(num_items=random.randint(1, 8)),
            headers=actor_headers(requester()),
            name="[STRESS] POST /requisitions",
        )

    @task(1)
    def statistics(self):
        self.client.get(
            "/requisitions/statistics",
            params={"store_id": "store-001"},
            name="[STRESS] GET /requisitions/statistics",
        )


class SeparationContentionUser(HttpUser):
    """Stress test: concurrent separation of one shared requisition.

    Losers of the compare-and-swap (409 on ``version``) are expected and
    marked as successes; any other rejection is a failure.
    """

    wait_time = constant_pacing(0.2)
    shared = {}

    def on_start(self):
        if "requisition_id" in self.shared:
            return
        resp = self.client.post(
            "/requisitions",
            json=requisition_data(store_id="store-001", num_items=8),
            headers=actor_headers(requester()),
            name="[STRESS] POST /requisitions (shared)",
        )
        if resp.status_code == 201:
            self.shared["requisition_id"] = resp.json()["requisition_id"]

    @task
    def separate_shared_item(self):
        requisition_id = self.shared.get("requisition_id")
        if requisition_id is None:
            return
        body = self.client.get(f"/requisitions/{requisition_id}", name="[STRESS] GET /requisitions/{id}").json()
        pending = [i for i in body["items"] if i["status"] == "Pending"]
        if not pending:
            self.shared.pop("requisition_id", None)
            return
        item = random.choice(pending)
        with self.client.put(
            f"/requisitions/{requisition_id}/items/{item['item_id']}/separate",
            json={"separated_qty": item["requested_qty"], "expected_version": body["version"]},
            headers=actor_headers(stock_keeper()),
            catch_response=True,
            name="[STRESS] PUT /requisitions/{id}/items/{item_id}/separate",
        ) as resp:
            if resp.status_code == 200 or is_version_conflict(resp):
                resp.success()
            else:
                resp.failure(f"Separate failed: {extract_error_detail(resp)}")
