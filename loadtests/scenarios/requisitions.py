"""Requisition load test scenarios.

Stateful SequentialTaskSet journeys covering the full requisition
lifecycle (create, separate, deliver, confirm), cancellation by the
requester, historical adjustments on both sides of delivery, and the
read side used by the store screens.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    actor_headers,
    adjustment_justification,
    requester,
    requisition_data,
    separated_qty,
    shortage_observations,
    stock_keeper,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import RequisitionState


class _RequisitionJourney(SequentialTaskSet):
    """Shared steps: create a requisition and load its items."""

    def on_start(self):
        self.state = RequisitionState(requester_id=requester())

    def _create(self, num_items=3):
        payload = requisition_data(num_items=num_items)
        with self.client.post(
            "/requisitions",
            json=payload,
            headers=actor_headers(self.state.requester_id),
            catch_response=True,
            name="POST /requisitions",
        ) as resp:
            if resp.status_code == 201:
                self.state.requisition_id = resp.json()["requisition_id"]
                self.state.store_id = payload["store_id"]
            else:
                resp.failure(f"Create requisition failed: {extract_error_detail(resp)}")
                self.interrupt()

    def _load(self):
        with self.client.get(
            f"/requisitions/{self.state.requisition_id}",
            catch_response=True,
            name="GET /requisitions/{id}",
        ) as resp:
            if resp.status_code == 200:
                body = resp.json()
                self.state.version = body["version"]
                self.state.current_status = body["status"]
                self.state.items = {i["item_id"]: i["requested_qty"] for i in body["items"]}
            else:
                resp.failure(f"Get requisition failed: {extract_error_detail(resp)}")
                self.interrupt()

    def _separate(self, item_id, qty, actor_id):
        with self.client.put(
            f"/requisitions/{self.state.requisition_id}/items/{item_id}/separate",
            json={"separated_qty": qty, "expected_version": self.state.version},
            headers=actor_headers(actor_id),
            catch_response=True,
            name="PUT /requisitions/{id}/items/{item_id}/separate",
        ) as resp:
            if resp.status_code == 200:
                self.state.version += 1
            else:
                resp.failure(f"Separate failed: {extract_error_detail(resp)}")
                self.interrupt()

    def _shortage(self, item_id, actor_id):
        with self.client.put(
            f"/requisitions/{self.state.requisition_id}/items/{item_id}/shortage",
            json={"observations": shortage_observations(), "expected_version": self.state.version},
            headers=actor_headers(actor_id),
            catch_response=True,
            name="PUT /requisitions/{id}/items/{item_id}/shortage",
        ) as resp:
            if resp.status_code == 200:
                self.state.version += 1
            else:
                resp.failure(f"Shortage failed: {extract_error_detail(resp)}")
                self.interrupt()

    def _deliver(self, actor_id):
        with self.client.put(
            f"/requisitions/{self.state.requisition_id}/deliver",
            json={"expected_version": self.state.version},
            headers=actor_headers(actor_id),
            catch_response=True,
            name="PUT /requisitions/{id}/deliver",
        ) as resp:
            if resp.status_code == 200:
                self.state.version += 1
                self.state.current_status = "Delivered"
            else:
                resp.failure(f"Deliver failed: {extract_error_detail(resp)}")
                self.interrupt()


class RequisitionLifecycleJourney(_RequisitionJourney):
    """Create -> Separate / Shortage per item -> Deliver -> Confirm.

    The happy path of a sector requisition, resolved by one store keeper.
    Generates events: RequisitionCreated, ItemSeparated / ItemShortageRecorded
    per item, RequisitionSeparated, RequisitionDelivered, ReceiptConfirmed.
    """

    @task
    def create_requisition(self):
        self._create(num_items=random.randint(1, 5))

    @task
    def load_requisition(self):
        self._load()

    @task
    def resolve_items(self):
        keeper = stock_keeper()
        item_ids = list(self.state.items)
        for index, item_id in enumerate(item_ids):
            # keep at least one item deliverable
            if index > 0 and random.random() < 0.15:
                self._shortage(item_id, keeper)
            else:
                self._separate(item_id, separated_qty(self.state.items[item_id]), keeper)

    @task
    def deliver(self):
        self._deliver(stock_keeper())

    @task
    def confirm_receipt(self):
        with self.client.put(
            f"/requisitions/{self.state.requisition_id}/confirm",
            json={"expected_version": self.state.version},
            headers=actor_headers(self.state.requester_id),
            catch_response=True,
            name="PUT /requisitions/{id}/confirm",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Confirm failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class RequisitionCancellationJourney(_RequisitionJourney):
    """Create -> Cancel by the requester while still Pending."""

    @task
    def create_requisition(self):
        self._create(num_items=2)

    @task
    def cancel(self):
        with self.client.put(
            f"/requisitions/{self.state.requisition_id}/cancel",
            json={"expected_version": self.state.version},
            headers=actor_headers(self.state.requester_id),
            catch_response=True,
            name="PUT /requisitions/{id}/cancel",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Cancel failed: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class QuantityAdjustmentJourney(_RequisitionJourney):
    """Create -> Separate all -> Adjust (requester) -> Deliver -> Adjust (store).

    Exercises both adjustment windows: the requester raises a quantity
    before delivery, the store keeper corrects it to what was delivered.
    """

    @task
    def create_requisition(self):
        self._create(num_items=1)

    @task
    def load_requisition(self):
        self._load()

    @task
    def separate_all(self):
        keeper = stock_keeper()
        for item_id, requested in list(self.state.items.items()):
            qty = separated_qty(requested)
            self._separate(item_id, qty, keeper)
            self.state.items[item_id] = qty

    @task
    def adjust_before_delivery(self):
        item_id, separated = next(iter(self.state.items.items()))
        self._adjust(item_id, round(separated + 1, 1), self.state.requester_id, "PreDelivery")

    @task
    def deliver(self):
        self._deliver(stock_keeper())

    @task
    def adjust_after_delivery(self):
        item_id, separated = next(iter(self.state.items.items()))
        self._adjust(item_id, separated, stock_keeper(), "PostDelivery")

    @task
    def done(self):
        self.interrupt()

    def _adjust(self, item_id, qty, actor_id, context):
        with self.client.put(
            f"/requisitions/{self.state.requisition_id}/items/{item_id}/adjust",
            json={
                "new_requested_qty": qty,
                "justification": adjustment_justification(),
                "context": context,
                "expected_version": self.state.version,
            },
            headers=actor_headers(actor_id),
            catch_response=True,
            name=f"PUT /requisitions/{{id}}/items/{{item_id}}/adjust [{context}]",
        ) as resp:
            if resp.status_code == 200:
                self.state.version += 1
            else:
                resp.failure(f"Adjust failed: {extract_error_detail(resp)}")
                self.interrupt()


class StoreDashboardReader(SequentialTaskSet):
    """Read side of the store screens: work queues and statistics."""

    @task
    def list_pending(self):
        self.client.get(
            "/requisitions",
            params={"store_id": "store-001", "status": "Pending", "limit": 50},
            name="GET /requisitions?status=Pending",
        )

    @task
    def list_to_deliver(self):
        self.client.get(
            "/requisitions",
            params={"store_id": "store-001", "status": "Separated", "limit": 50},
            name="GET /requisitions?status=Separated",
        )

    @task
    def statistics(self):
        self.client.get(
            "/requisitions/statistics",
            params={"store_id": random.choice(["store-001", "store-002"]), "requester_id": requester()},
            name="GET /requisitions/statistics",
        )

    @task
    def done(self):
        self.interrupt()


class RequisitionUser(HttpUser):
    """Requisition traffic only: lifecycle, cancellation, adjustment, reads."""

    wait_time = between(0.5, 2.0)
    tasks = {
        RequisitionLifecycleJourney: 6,
        RequisitionCancellationJourney: 1,
        QuantityAdjustmentJourney: 2,
        StoreDashboardReader: 3,
    }
