"""Historical quantity adjustment — command and handler.

Who may adjust depends on the window the item is in, so the window is
resolved before the permission check:

    PreDelivery   item Separated               the requester
    PostDelivery  item Delivered, unconfirmed  CanManageStock / CanAdminister
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text

from requisitions.domain import requisitions
from requisitions.requisition.handling import load_requisition, resolve_actor
from requisitions.requisition.permissions import Operation, authorize
from requisitions.requisition.quantities import AdjustmentWindow, require_text
from requisitions.requisition.requisition import Requisition

logger = structlog.get_logger(__name__)


@requisitions.command(part_of="Requisition")
class AdjustItemQuantity:
    """Correct the requested quantity of an item, with a justification."""

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_requested_qty = Float(required=True)
    justification = Text()
    context = String(max_length=20, choices=AdjustmentWindow)
    actor_id = Identifier(required=True)
    expected_version = Integer(required=True)


@requisitions.command_handler(part_of=Requisition)
class AdjustItemQuantityHandler:
    @handle(AdjustItemQuantity)
    def adjust_item_quantity(self, command):
        require_text(command.justification, "justification", "A justification is required")
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        window = req.adjustment_window_for(command.item_id, command.context)
        authorize(resolve_actor(command.actor_id), Operation.ADJUST_ITEM_QUANTITY, req, window)

        req.adjust_item_quantity(
            command.item_id,
            command.new_requested_qty,
            command.justification,
            actor_id=command.actor_id,
            context=window,
        )
        repo.add(req)
        logger.info(
            "Item quantity adjusted",
            requisition_id=str(req.id),
            item_id=str(command.item_id),
            new_requested_qty=command.new_requested_qty,
            window=window.value,
        )
