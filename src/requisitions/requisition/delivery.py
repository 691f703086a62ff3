"""Delivery and receipt confirmation — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer

from requisitions.domain import requisitions
from requisitions.requisition.handling import load_requisition, resolve_actor
from requisitions.requisition.permissions import Operation, authorize
from requisitions.requisition.requisition import Requisition

logger = structlog.get_logger(__name__)


@requisitions.command(part_of="Requisition")
class RegisterDelivery:
    """Hand every separated item of a requisition over to its sector."""

    requisition_id = Identifier(required=True)
    delivery_actor_id = Identifier(required=True)
    expected_version = Integer(required=True)


@requisitions.command(part_of="Requisition")
class ConfirmReceipt:
    """The requester acknowledges the delivered goods."""

    requisition_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    expected_version = Integer(required=True)


@requisitions.command_handler(part_of=Requisition)
class DeliveryHandler:
    @handle(RegisterDelivery)
    def register_delivery(self, command):
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        authorize(resolve_actor(command.delivery_actor_id), Operation.REGISTER_DELIVERY, req)
        req.register_delivery(command.delivery_actor_id)
        repo.add(req)
        logger.info(
            "Requisition delivered",
            requisition_id=str(req.id),
            number=req.number,
            delivery_actor_id=str(command.delivery_actor_id),
        )

    @handle(ConfirmReceipt)
    def confirm_receipt(self, command):
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        authorize(resolve_actor(command.actor_id), Operation.CONFIRM_RECEIPT, req)
        req.confirm_receipt(command.actor_id)
        repo.add(req)
        logger.info("Receipt confirmed", requisition_id=str(req.id), number=req.number)
