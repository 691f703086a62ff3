"""Application tests for AdjustItemQuantity."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from requisitions.errors import PermissionDeniedError, StateConflictError
from requisitions.requisition.adjustment import AdjustItemQuantity
from requisitions.requisition.creation import CreateRequisition
from requisitions.requisition.delivery import ConfirmReceipt, RegisterDelivery
from requisitions.requisition.requisition import Requisition
from requisitions.requisition.separation import MarkShortage, SeparateItem


def _version(req_id):
    return current_domain.repository_for(Requisition).get(req_id).version


def _separated():
    req_id = current_domain.process(
        CreateRequisition(
            store_id="store-001",
            sector="Dry Aged",
            requester_id="cook-ana",
            items=json.dumps(
                [
                    {"product_id": "prod-rice", "requested_qty": 5},
                    {"product_id": "prod-oil", "requested_qty": 3},
                ]
            ),
        ),
        asynchronous=False,
    )
    ids = {str(i.product_id): str(i.id) for i in current_domain.repository_for(Requisition).get(req_id).items}
    first, second = ids["prod-rice"], ids["prod-oil"]
    current_domain.process(
        SeparateItem(
            requisition_id=req_id,
            item_id=first,
            separated_qty=4,
            actor_id="stock-carl",
            expected_version=_version(req_id),
        ),
        asynchronous=False,
    )
    current_domain.process(
        MarkShortage(
            requisition_id=req_id,
            item_id=second,
            observations="out of stock",
            actor_id="stock-carl",
            expected_version=_version(req_id),
        ),
        asynchronous=False,
    )
    return req_id, first


def _delivered():
    req_id, first = _separated()
    current_domain.process(
        RegisterDelivery(
            requisition_id=req_id,
            delivery_actor_id="stock-carl",
            expected_version=_version(req_id),
        ),
        asynchronous=False,
    )
    return req_id, first


def _adjust(req_id, item_id, qty, actor_id, justification="count correction", context=None):
    current_domain.process(
        AdjustItemQuantity(
            requisition_id=req_id,
            item_id=item_id,
            new_requested_qty=qty,
            justification=justification,
            context=context,
            actor_id=actor_id,
            expected_version=_version(req_id),
        ),
        asynchronous=False,
    )


def _item(req_id, item_id):
    return current_domain.repository_for(Requisition).get(req_id).get_item(item_id)


class TestPreDeliveryWindow:
    def test_requester_raises_quantity(self):
        req_id, first = _separated()
        _adjust(req_id, first, 6, "cook-ana", context="PreDelivery")
        item = _item(req_id, first)
        assert item.requested_qty == 6
        assert item.separated_qty == 4
        assert "count correction" in item.observations

    def test_below_separated_rejected(self):
        req_id, first = _separated()
        with pytest.raises(ValidationError):
            _adjust(req_id, first, 3, "cook-ana")
        assert _item(req_id, first).requested_qty == 5

    def test_stock_keeper_denied(self):
        req_id, first = _separated()
        with pytest.raises(PermissionDeniedError):
            _adjust(req_id, first, 6, "stock-carl")


class TestPostDeliveryWindow:
    def test_stock_keeper_corrects_to_delivered(self):
        req_id, first = _delivered()
        _adjust(req_id, first, 4, "stock-carl", context="PostDelivery")
        assert _item(req_id, first).requested_qty == 4

    def test_above_delivered_rejected(self):
        req_id, first = _delivered()
        with pytest.raises(ValidationError):
            _adjust(req_id, first, 5, "stock-carl")

    def test_requester_denied(self):
        req_id, first = _delivered()
        with pytest.raises(PermissionDeniedError):
            _adjust(req_id, first, 4, "cook-ana")

    def test_closed_after_confirmation(self):
        req_id, first = _delivered()
        current_domain.process(
            ConfirmReceipt(
                requisition_id=req_id,
                actor_id="cook-ana",
                expected_version=_version(req_id),
            ),
            asynchronous=False,
        )
        with pytest.raises(StateConflictError):
            _adjust(req_id, first, 4, "stock-carl")


class TestAdjustmentRejections:
    @pytest.mark.parametrize("justification", [None, "", "   "])
    def test_justification_required(self, justification):
        req_id, first = _separated()
        with pytest.raises(ValidationError) as exc:
            _adjust(req_id, first, 6, "cook-ana", justification=justification)
        assert "justification" in exc.value.messages

    def test_context_mismatch_is_conflict(self):
        req_id, first = _separated()
        with pytest.raises(StateConflictError):
            _adjust(req_id, first, 6, "cook-ana", context="PostDelivery")

    def test_shortage_item_has_no_window(self):
        req_id, _ = _separated()
        req = current_domain.repository_for(Requisition).get(req_id)
        second = next(str(i.id) for i in req.items if i.status == "Shortage")
        with pytest.raises(StateConflictError):
            _adjust(req_id, second, 2, "admin-dora")
