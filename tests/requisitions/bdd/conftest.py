"""Shared BDD fixtures and step definitions for the Requisitions domain."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from requisitions.errors import StateConflictError
from requisitions.requisition.events import (
    ItemCancelled,
    ItemQuantityAdjusted,
    ItemSeparated,
    ItemShortageRecorded,
    ReceiptConfirmed,
    RequisitionCancelled,
    RequisitionCreated,
    RequisitionDelivered,
    RequisitionSeparated,
)
from requisitions.requisition.requisition import Requisition

# Map event name strings to classes for dynamic lookup in Then steps
_REQUISITION_EVENT_CLASSES = {
    "RequisitionCreated": RequisitionCreated,
    "ItemSeparated": ItemSeparated,
    "ItemShortageRecorded": ItemShortageRecorded,
    "ItemCancelled": ItemCancelled,
    "RequisitionSeparated": RequisitionSeparated,
    "RequisitionDelivered": RequisitionDelivered,
    "ReceiptConfirmed": ReceiptConfirmed,
    "RequisitionCancelled": RequisitionCancelled,
    "ItemQuantityAdjusted": ItemQuantityAdjusted,
}

_PRODUCTS = {
    "Arroz": {"product_id": "prod-rice", "product_name": "Arroz Agulhinha", "product_unit": "kg", "product_code": "1001"},
    "Azeite": {"product_id": "prod-oil", "product_name": "Azeite Extra Virgem", "product_unit": "l", "product_code": "1002"},
    "Sal": {"product_id": "prod-salt", "product_name": "Sal Grosso", "product_unit": "kg", "product_code": "1003"},
}


def item_named(requisition, product):
    """The requisition item for one of the short product names used in features."""
    product_id = _PRODUCTS[product]["product_id"]
    return next(i for i in requisition.items if str(i.product_id) == product_id)


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def requester_id():
    return "cook-ana"


@pytest.fixture()
def stock_keeper_id():
    return "stock-carl"


@pytest.fixture()
def error():
    """Container for the rejection raised by a When step."""
    return {"exc": None}


@pytest.fixture()
def item_id_of():
    """Resolve a short product name used in features to the item id."""

    def _item_id(requisition, product):
        return str(item_named(requisition, product).id)

    return _item_id


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a requisition for {rice:g} of "Arroz" and {oil:g} of "Azeite"'),
    target_fixture="requisition",
)
def two_item_requisition(requester_id, rice, oil):
    req = Requisition.create(
        number="REQ-000001",
        store_id="store-001",
        sector="Cozinha Quente",
        requester_id=requester_id,
        items_data=[
            {**_PRODUCTS["Arroz"], "requested_qty": rice},
            {**_PRODUCTS["Azeite"], "requested_qty": oil},
        ],
    )
    req._events.clear()
    return req


@given(parsers.cfparse('{qty:g} of "{product}" was separated'), target_fixture="requisition")
def item_was_separated(requisition, stock_keeper_id, qty, product):
    requisition.separate_item(str(item_named(requisition, product).id), qty, stock_keeper_id)
    requisition._events.clear()
    return requisition


@given(parsers.cfparse('"{product}" was marked as shortage'), target_fixture="requisition")
def item_was_short(requisition, stock_keeper_id, product):
    requisition.mark_shortage(str(item_named(requisition, product).id), "No stock left", stock_keeper_id)
    requisition._events.clear()
    return requisition


@given("the requisition was delivered", target_fixture="requisition")
def requisition_was_delivered(requisition, stock_keeper_id):
    requisition.register_delivery(stock_keeper_id)
    requisition._events.clear()
    return requisition


@given("the receipt was confirmed", target_fixture="requisition")
def receipt_was_confirmed(requisition, requester_id):
    requisition.confirm_receipt(requester_id)
    requisition._events.clear()
    return requisition


@given("the requisition was cancelled", target_fixture="requisition")
def requisition_was_cancelled(requisition):
    requisition.cancel("admin-dora")
    requisition._events.clear()
    return requisition


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the requisition status is "{status}"'))
def requisition_status_is(requisition, status):
    assert requisition.status == status


@then(parsers.cfparse('the "{product}" item status is "{status}"'))
def item_status_is(requisition, product, status):
    assert item_named(requisition, product).status == status


@then(parsers.cfparse('the "{product}" item has {field} {qty:g}'))
def item_quantity_is(requisition, product, field, qty):
    assert getattr(item_named(requisition, product), f"{field}_qty") == qty


def _assert_event_raised(requisition, event_type):
    event_cls = _REQUISITION_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in requisition._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in requisition._events]}"


@then(parsers.cfparse("a {event_type} event is raised"))
def event_raised(requisition, event_type):
    _assert_event_raised(requisition, event_type)


@then(parsers.cfparse("an {event_type} event is raised"))
def event_raised_an(requisition, event_type):
    _assert_event_raised(requisition, event_type)


@then(parsers.cfparse("no {event_type} event is raised"))
def event_not_raised(requisition, event_type):
    event_cls = _REQUISITION_EVENT_CLASSES[event_type]
    assert not any(isinstance(e, event_cls) for e in requisition._events)


@then("the action fails with a validation error")
def action_fails_validation(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then("the action fails with a state conflict")
def action_fails_conflict(error):
    assert error["exc"] is not None, "Expected a state conflict but none was raised"
    assert isinstance(error["exc"], StateConflictError)
