"""Item resolution in the store — commands and handler.

Each pending item is resolved exactly once: separated (with a quantity),
marked as a shortage, or cancelled. The header status follows the items.
"""

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, Text

from requisitions.domain import requisitions
from requisitions.requisition.handling import load_requisition, resolve_actor
from requisitions.requisition.permissions import Operation, authorize
from requisitions.requisition.requisition import Requisition

logger = structlog.get_logger(__name__)


@requisitions.command(part_of="Requisition")
class SeparateItem:
    """Set aside a quantity of a pending item."""

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    separated_qty = Float(required=True)
    actor_id = Identifier(required=True)
    observations = Text()
    expected_version = Integer(required=True)


@requisitions.command(part_of="Requisition")
class MarkShortage:
    """Record that a pending item cannot be supplied."""

    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    observations = Text()
    actor_id = Identifier(required=True)
    expected_version = Integer(required=True)


@requisitions.command(part_of="Requisition")
class CancelItem:
    requisition_id = Identifier(required=True)
    item_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    observations = Text()
    expected_version = Integer(required=True)


@requisitions.command_handler(part_of=Requisition)
class SeparationHandler:
    @handle(SeparateItem)
    def separate_item(self, command):
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        authorize(resolve_actor(command.actor_id), Operation.SEPARATE_ITEM, req)
        req.separate_item(
            command.item_id,
            command.separated_qty,
            actor_id=command.actor_id,
            observations=command.observations,
        )
        repo.add(req)
        logger.info(
            "Item separated",
            requisition_id=str(req.id),
            item_id=str(command.item_id),
            separated_qty=command.separated_qty,
            header_status=req.status,
        )

    @handle(MarkShortage)
    def mark_shortage(self, command):
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        authorize(resolve_actor(command.actor_id), Operation.MARK_SHORTAGE, req)
        req.mark_shortage(command.item_id, command.observations, actor_id=command.actor_id)
        repo.add(req)
        logger.info(
            "Item shortage recorded",
            requisition_id=str(req.id),
            item_id=str(command.item_id),
            header_status=req.status,
        )

    @handle(CancelItem)
    def cancel_item(self, command):
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        authorize(resolve_actor(command.actor_id), Operation.CANCEL_ITEM, req)
        req.cancel_item(command.item_id, actor_id=command.actor_id, observations=command.observations)
        repo.add(req)
        logger.info(
            "Item cancelled",
            requisition_id=str(req.id),
            item_id=str(command.item_id),
            header_status=req.status,
        )
