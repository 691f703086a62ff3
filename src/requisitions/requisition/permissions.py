"""Permission gate for requisition operations.

A pure function of (actor, operation, aggregate state). It never loads or
mutates anything; command handlers call :func:`authorize` before touching
the aggregate.

    CreateRequisition                       CanRequest
    SeparateItem / MarkShortage / CancelItem CanManageStock or CanAdminister
    RegisterDelivery                        CanManageStock or CanAdminister
    ConfirmReceipt                          the requester
    CancelRequisition                       CanAdminister, or the requester while Pending
    AdjustItemQuantity                      requester (pre-delivery),
                                            CanManageStock / CanAdminister (post-delivery)
    SaveSuggestion / RemoveSuggestion       CanManageStock or CanAdminister
"""

from enum import Enum

from requisitions.actors.port import Actor, Capability
from requisitions.errors import PermissionDeniedError
from requisitions.requisition.quantities import AdjustmentWindow
from requisitions.requisition.status import RequisitionStatus


class Operation(Enum):
    CREATE_REQUISITION = "CreateRequisition"
    SEPARATE_ITEM = "SeparateItem"
    MARK_SHORTAGE = "MarkShortage"
    CANCEL_ITEM = "CancelItem"
    REGISTER_DELIVERY = "RegisterDelivery"
    CONFIRM_RECEIPT = "ConfirmReceipt"
    CANCEL_REQUISITION = "CancelRequisition"
    ADJUST_ITEM_QUANTITY = "AdjustItemQuantity"
    MANAGE_SUGGESTIONS = "ManageSuggestions"


_STOCK_OPERATIONS = {
    Operation.SEPARATE_ITEM,
    Operation.MARK_SHORTAGE,
    Operation.CANCEL_ITEM,
    Operation.REGISTER_DELIVERY,
    Operation.MANAGE_SUGGESTIONS,
}


def _is_requester(actor: Actor, requisition) -> bool:
    return requisition is not None and str(requisition.requester_id) == str(actor.actor_id)


def is_allowed(
    actor: Actor,
    operation: Operation,
    requisition=None,
    window: AdjustmentWindow | None = None,
) -> bool:
    """Return True if ``actor`` may perform ``operation`` on ``requisition``."""
    if operation == Operation.CREATE_REQUISITION:
        return actor.has(Capability.REQUEST)

    if operation in _STOCK_OPERATIONS:
        return actor.has(Capability.MANAGE_STOCK)

    if operation == Operation.CONFIRM_RECEIPT:
        return _is_requester(actor, requisition)

    if operation == Operation.CANCEL_REQUISITION:
        if actor.is_administrator:
            return True
        return _is_requester(actor, requisition) and requisition.status == RequisitionStatus.PENDING.value

    if operation == Operation.ADJUST_ITEM_QUANTITY:
        if window == AdjustmentWindow.PRE_DELIVERY:
            return _is_requester(actor, requisition)
        if window == AdjustmentWindow.POST_DELIVERY:
            return actor.has(Capability.MANAGE_STOCK)
        return False

    return False


def authorize(
    actor: Actor,
    operation: Operation,
    requisition=None,
    window: AdjustmentWindow | None = None,
) -> None:
    """Raise PermissionDeniedError unless ``actor`` may perform ``operation``."""
    if not is_allowed(actor, operation, requisition, window):
        raise PermissionDeniedError(
            {"actor_id": [f"Actor {actor.actor_id} is not allowed to perform {operation.value}"]}
        )
