"""Requisition domain events — immutable facts about requisition state changes.

All events are past tense, versioned, and carry the requisition id plus the
header status after the change, so projectors never have to re-derive it.
"""

from protean.fields import Date, DateTime, Float, Identifier, Integer, String, Text

from requisitions.domain import requisitions


@requisitions.event(part_of="Requisition")
class RequisitionCreated:
    """A sector raised a new requisition against the central store."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    number = String(required=True)
    store_id = Identifier(required=True)
    sector = String(required=True)
    requester_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of item dicts
    item_count = Integer(required=True)
    expected_delivery_date = Date()
    shift = String()
    created_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class ItemSeparated:
    """A quantity was set aside in the store for a pending item."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    separated_qty = Float(required=True)
    separated_by = Identifier(required=True)
    header_status = String(required=True)
    separated_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class ItemShortageRecorded:
    """A pending item could not be supplied at all."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    observations = Text(required=True)
    recorded_by = Identifier(required=True)
    header_status = String(required=True)
    recorded_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class ItemCancelled:
    """A pending item was cancelled by the store."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    header_status = String(required=True)
    cancelled_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class RequisitionSeparated:
    """The last pending item was resolved; the requisition awaits delivery."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    separation_actor_id = Identifier(required=True)
    separated_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class RequisitionDelivered:
    """All separated items were handed over to the requesting sector."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    delivery_actor_id = Identifier(required=True)
    delivered_item_ids = Text()  # JSON list of item id strings
    delivered_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class ReceiptConfirmed:
    """The requester acknowledged receiving the delivered goods."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    confirmed_by = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class RequisitionCancelled:
    """The requisition was cancelled as a whole."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@requisitions.event(part_of="Requisition")
class ItemQuantityAdjusted:
    """The requested quantity of an item was corrected after the fact."""

    __version__ = 1

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_qty = Float(required=True)
    new_qty = Float(required=True)
    window = String(required=True)
    justification = Text(required=True)
    adjusted_by = Identifier(required=True)
    adjusted_at = DateTime(required=True)
