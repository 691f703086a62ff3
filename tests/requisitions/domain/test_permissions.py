"""Tests for the permission gate."""

from types import SimpleNamespace

import pytest
from requisitions.actors.port import Actor, Capability, capabilities_from_flags
from requisitions.errors import PermissionDeniedError
from requisitions.requisition.permissions import Operation, authorize, is_allowed
from requisitions.requisition.quantities import AdjustmentWindow

requester = Actor("cook-ana", frozenset({Capability.REQUEST}))
other_requester = Actor("cook-bia", frozenset({Capability.REQUEST}))
stock_keeper = Actor("stock-carl", frozenset({Capability.MANAGE_STOCK}))
admin = Actor("admin-dora", frozenset({Capability.ADMINISTER}))
nobody = Actor("guest-eve")


def _requisition(status="Pending", requester_id="cook-ana"):
    return SimpleNamespace(status=status, requester_id=requester_id)


class TestCreate:
    def test_requester_may_create(self):
        assert is_allowed(requester, Operation.CREATE_REQUISITION)

    def test_admin_may_create(self):
        assert is_allowed(admin, Operation.CREATE_REQUISITION)

    def test_stock_keeper_may_not_create(self):
        assert not is_allowed(stock_keeper, Operation.CREATE_REQUISITION)


class TestStockOperations:
    @pytest.mark.parametrize(
        "operation",
        [
            Operation.SEPARATE_ITEM,
            Operation.MARK_SHORTAGE,
            Operation.CANCEL_ITEM,
            Operation.REGISTER_DELIVERY,
            Operation.MANAGE_SUGGESTIONS,
        ],
    )
    def test_stock_keeper_and_admin_allowed(self, operation):
        assert is_allowed(stock_keeper, operation, _requisition())
        assert is_allowed(admin, operation, _requisition())

    @pytest.mark.parametrize("operation", [Operation.SEPARATE_ITEM, Operation.REGISTER_DELIVERY])
    def test_requester_denied(self, operation):
        assert not is_allowed(requester, operation, _requisition())


class TestConfirmReceipt:
    def test_only_the_requester(self):
        req = _requisition(status="Delivered")
        assert is_allowed(requester, Operation.CONFIRM_RECEIPT, req)
        assert not is_allowed(other_requester, Operation.CONFIRM_RECEIPT, req)
        assert not is_allowed(admin, Operation.CONFIRM_RECEIPT, req)


class TestCancelRequisition:
    def test_requester_while_pending(self):
        assert is_allowed(requester, Operation.CANCEL_REQUISITION, _requisition("Pending"))

    @pytest.mark.parametrize("status", ["Separated", "Delivered"])
    def test_requester_denied_after_pending(self, status):
        assert not is_allowed(requester, Operation.CANCEL_REQUISITION, _requisition(status))

    @pytest.mark.parametrize("status", ["Pending", "Separated", "Delivered"])
    def test_admin_in_any_status(self, status):
        assert is_allowed(admin, Operation.CANCEL_REQUISITION, _requisition(status))

    def test_stock_keeper_denied(self):
        assert not is_allowed(stock_keeper, Operation.CANCEL_REQUISITION, _requisition())

    def test_other_requester_denied(self):
        assert not is_allowed(other_requester, Operation.CANCEL_REQUISITION, _requisition())


class TestAdjustItemQuantity:
    def test_pre_delivery_requester_only(self):
        req = _requisition("Separated")
        window = AdjustmentWindow.PRE_DELIVERY
        assert is_allowed(requester, Operation.ADJUST_ITEM_QUANTITY, req, window)
        assert not is_allowed(stock_keeper, Operation.ADJUST_ITEM_QUANTITY, req, window)
        assert not is_allowed(other_requester, Operation.ADJUST_ITEM_QUANTITY, req, window)

    def test_post_delivery_stock_roles(self):
        req = _requisition("Delivered")
        window = AdjustmentWindow.POST_DELIVERY
        assert is_allowed(stock_keeper, Operation.ADJUST_ITEM_QUANTITY, req, window)
        assert is_allowed(admin, Operation.ADJUST_ITEM_QUANTITY, req, window)
        assert not is_allowed(requester, Operation.ADJUST_ITEM_QUANTITY, req, window)

    def test_no_window_denied(self):
        assert not is_allowed(admin, Operation.ADJUST_ITEM_QUANTITY, _requisition())


class TestAuthorize:
    def test_raises_permission_denied(self):
        with pytest.raises(PermissionDeniedError) as exc:
            authorize(nobody, Operation.CREATE_REQUISITION)
        assert "actor_id" in exc.value.messages

    def test_returns_silently_when_allowed(self):
        assert authorize(requester, Operation.CREATE_REQUISITION) is None


class TestLegacyFlags:
    def test_flags_map_to_capabilities(self):
        assert capabilities_from_flags(["criar", "editar"]) == frozenset({Capability.REQUEST, Capability.MANAGE_STOCK})

    def test_unknown_flags_ignored(self):
        assert capabilities_from_flags(["visualizar"]) == frozenset()

    def test_administer_is_superset(self):
        actor = Actor("x", capabilities_from_flags(["excluir"]))
        assert actor.is_administrator
        assert actor.has(Capability.REQUEST)
        assert actor.has(Capability.MANAGE_STOCK)
