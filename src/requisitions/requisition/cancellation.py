"""Requisition cancellation — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer

from requisitions.domain import requisitions
from requisitions.requisition.handling import load_requisition, resolve_actor
from requisitions.requisition.permissions import Operation, authorize
from requisitions.requisition.requisition import Requisition

logger = structlog.get_logger(__name__)


@requisitions.command(part_of="Requisition")
class CancelRequisition:
    """Cancel a requisition. Administrators may cancel at any stage."""

    requisition_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    expected_version = Integer(required=True)


@requisitions.command_handler(part_of=Requisition)
class CancelRequisitionHandler:
    @handle(CancelRequisition)
    def cancel_requisition(self, command):
        repo, req = load_requisition(command.requisition_id, command.expected_version)
        authorize(resolve_actor(command.actor_id), Operation.CANCEL_REQUISITION, req)
        previous_status = req.status
        req.cancel(command.actor_id)
        repo.add(req)
        logger.info(
            "Requisition cancelled",
            requisition_id=str(req.id),
            number=req.number,
            previous_status=previous_status,
            cancelled_by=str(command.actor_id),
        )
