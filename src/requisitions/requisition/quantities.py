"""Quantity rules for requisition items.

Pure functions raising ``ValidationError`` for malformed quantities and
``StateConflictError`` when an adjustment is attempted outside its window.

Historical adjustment windows:
    PRE_DELIVERY   item Separated          new qty >= separated qty
    POST_DELIVERY  item Delivered and the  new qty <= delivered qty
                   receipt not confirmed
"""

from enum import Enum

from protean.exceptions import ValidationError

from requisitions.errors import StateConflictError
from requisitions.requisition.status import ItemStatus


class AdjustmentWindow(Enum):
    PRE_DELIVERY = "PreDelivery"
    POST_DELIVERY = "PostDelivery"


def _is_blank(text: str | None) -> bool:
    return text is None or not str(text).strip()


def validate_requested_qty(requested_qty: float | None, field: str = "requested_qty") -> None:
    if requested_qty is None or requested_qty <= 0:
        raise ValidationError({field: ["Requested quantity must be greater than zero"]})


def validate_separated_qty(separated_qty: float | None, requested_qty: float) -> None:
    if separated_qty is None or separated_qty <= 0:
        raise ValidationError({"separated_qty": ["Separated quantity must be greater than zero"]})
    if separated_qty > requested_qty:
        raise ValidationError(
            {"separated_qty": [f"Separated quantity {separated_qty} exceeds requested quantity {requested_qty}"]}
        )


def require_text(text: str | None, field: str, message: str) -> str:
    """Return ``text`` stripped, or raise if it is missing or blank."""
    if _is_blank(text):
        raise ValidationError({field: [message]})
    return str(text).strip()


def adjustment_window(item_status: ItemStatus | str, confirmed: bool = False) -> AdjustmentWindow | None:
    """Return the adjustment window an item is in, or None if it cannot be adjusted."""
    status = ItemStatus(item_status)
    if status == ItemStatus.SEPARATED:
        return AdjustmentWindow.PRE_DELIVERY
    if status == ItemStatus.DELIVERED and not confirmed:
        return AdjustmentWindow.POST_DELIVERY
    return None


def resolve_adjustment_window(
    item_status: ItemStatus | str,
    confirmed: bool = False,
    requested_window: AdjustmentWindow | str | None = None,
) -> AdjustmentWindow:
    """Return the item's adjustment window, checking it against the caller's."""
    window = adjustment_window(item_status, confirmed)
    if window is None:
        raise StateConflictError(
            {"status": [f"Quantity cannot be adjusted for an item in {ItemStatus(item_status).value} state"]}
        )
    if requested_window and AdjustmentWindow(requested_window) != window:
        raise StateConflictError(
            {"context": [f"Item is in the {window.value} window, not {AdjustmentWindow(requested_window).value}"]}
        )
    return window


def validate_adjustment(
    window: AdjustmentWindow,
    new_requested_qty: float | None,
    separated_qty: float,
    delivered_qty: float,
) -> None:
    """Check a new requested quantity against what already physically happened."""
    validate_requested_qty(new_requested_qty, field="new_requested_qty")

    if window == AdjustmentWindow.PRE_DELIVERY and new_requested_qty < separated_qty:
        raise ValidationError(
            {"new_requested_qty": [f"Quantity cannot be lower than the separated quantity ({separated_qty})"]}
        )
    if window == AdjustmentWindow.POST_DELIVERY:
        if new_requested_qty > delivered_qty:
            raise ValidationError(
                {"new_requested_qty": [f"Quantity cannot be higher than the delivered quantity ({delivered_qty})"]}
            )
        # requested never drops below what was separated
        if new_requested_qty < separated_qty:
            raise ValidationError(
                {"new_requested_qty": [f"Quantity cannot be lower than the separated quantity ({separated_qty})"]}
            )
