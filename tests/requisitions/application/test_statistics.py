"""Tests for requisition statistics computed from the requisitions."""

import json

from protean import current_domain
from requisitions.projections.statistics import requisition_statistics
from requisitions.requisition.cancellation import CancelRequisition
from requisitions.requisition.creation import CreateRequisition
from requisitions.requisition.delivery import ConfirmReceipt, RegisterDelivery
from requisitions.requisition.requisition import Requisition
from requisitions.requisition.separation import SeparateItem


def _version(req_id):
    return current_domain.repository_for(Requisition).get(req_id).version


def _create(requester_id="cook-ana", store_id="store-001"):
    return current_domain.process(
        CreateRequisition(
            store_id=store_id,
            sector="Prep",
            requester_id=requester_id,
            items=json.dumps([{"product_id": "prod-salt", "requested_qty": 2}]),
        ),
        asynchronous=False,
    )


def _separate(req_id):
    item_id = str(current_domain.repository_for(Requisition).get(req_id).items[0].id)
    current_domain.process(
        SeparateItem(
            requisition_id=req_id,
            item_id=item_id,
            separated_qty=2,
            actor_id="stock-carl",
            expected_version=_version(req_id),
        ),
        asynchronous=False,
    )


def _deliver(req_id):
    _separate(req_id)
    current_domain.process(
        RegisterDelivery(
            requisition_id=req_id,
            delivery_actor_id="stock-carl",
            expected_version=_version(req_id),
        ),
        asynchronous=False,
    )


class TestRequisitionStatistics:
    def test_empty_store(self):
        assert requisition_statistics("store-001") == {
            "total": 0,
            "pending": 0,
            "separated": 0,
            "delivered": 0,
            "cancelled": 0,
        }

    def test_counts_by_status(self):
        _create()
        _separate(_create())
        _deliver(_create())
        cancelled = _create()
        current_domain.process(
            CancelRequisition(requisition_id=cancelled, actor_id="cook-ana", expected_version=0), asynchronous=False
        )
        _create(store_id="store-002")

        stats = requisition_statistics("store-001")
        assert stats["total"] == 4
        assert stats["pending"] == 1
        assert stats["separated"] == 1
        assert stats["delivered"] == 1
        assert stats["cancelled"] == 1
        assert "my_pending" not in stats

    def test_requester_view(self):
        _create()
        _create(requester_id="cook-bia")
        delivered = _create()
        _deliver(delivered)
        confirmed = _create()
        _deliver(confirmed)
        current_domain.process(
            ConfirmReceipt(
                requisition_id=confirmed,
                actor_id="cook-ana",
                expected_version=_version(confirmed),
            ),
            asynchronous=False,
        )

        stats = requisition_statistics("store-001", requester_id="cook-ana")
        assert stats["total"] == 4
        assert stats["my_pending"] == 1
        assert stats["awaiting_confirmation"] == 1


class TestLargeStore:
    def test_counts_every_requisition(self):
        for _ in range(104):
            _create()
        _create(requester_id="cook-bia")

        repo = current_domain.repository_for(Requisition)
        assert len(repo.list_by_filter("store-001")) == 105
        assert len(repo.list_by_filter("store-001", limit=10)) == 10
        assert repo.count_by_filter("store-001", requester_id="cook-bia") == 1

        stats = requisition_statistics("store-001", requester_id="cook-ana")
        assert stats["total"] == 105
        assert stats["pending"] == 105
        assert stats["my_pending"] == 104
