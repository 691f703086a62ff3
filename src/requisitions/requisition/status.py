"""Requisition and item statuses, and header status derivation.

Item state machine:
    PENDING → SEPARATED | SHORTAGE | CANCELLED
    SEPARATED → DELIVERED
    SHORTAGE, CANCELLED, DELIVERED → (terminal)

The header status is never patched incrementally: it is recomputed from the
item statuses after every transition. ``CANCELLED`` is the only header status
set explicitly, and once set it is sticky.
"""

from collections.abc import Iterable
from enum import Enum


class RequisitionStatus(Enum):
    PENDING = "Pending"
    SEPARATED = "Separated"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class ItemStatus(Enum):
    PENDING = "Pending"
    SEPARATED = "Separated"
    DELIVERED = "Delivered"
    SHORTAGE = "Shortage"
    CANCELLED = "Cancelled"


class Shift(Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"


ITEM_TRANSITIONS = {
    ItemStatus.PENDING: {ItemStatus.SEPARATED, ItemStatus.SHORTAGE, ItemStatus.CANCELLED},
    ItemStatus.SEPARATED: {ItemStatus.DELIVERED},
    ItemStatus.DELIVERED: set(),  # terminal
    ItemStatus.SHORTAGE: set(),  # terminal
    ItemStatus.CANCELLED: set(),  # terminal
}


def can_transition(current: ItemStatus | str, target: ItemStatus | str) -> bool:
    """Return True if an item may move from ``current`` to ``target``."""
    return ItemStatus(target) in ITEM_TRANSITIONS[ItemStatus(current)]


def derive_status(
    item_statuses: Iterable[ItemStatus | str],
    cancelled: bool = False,
    delivery_registered: bool = False,
) -> RequisitionStatus:
    """Compute the header status of a requisition from its item statuses.

    Args:
        item_statuses: statuses of every item of the requisition.
        cancelled: the header was explicitly cancelled.
        delivery_registered: a delivery has been registered for the header.
    """
    if cancelled:
        return RequisitionStatus.CANCELLED

    statuses = [ItemStatus(status) for status in item_statuses]
    if any(status == ItemStatus.PENDING for status in statuses):
        return RequisitionStatus.PENDING
    if not delivery_registered:
        return RequisitionStatus.SEPARATED
    return RequisitionStatus.DELIVERED
