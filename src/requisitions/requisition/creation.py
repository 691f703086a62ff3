"""Requisition creation — command and handler."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Date, Identifier, String, Text
from protean.utils.globals import current_domain

from requisitions.catalog import get_product_catalog
from requisitions.domain import requisitions
from requisitions.requisition.handling import resolve_actor
from requisitions.requisition.permissions import Operation, authorize
from requisitions.requisition.quantities import validate_requested_qty
from requisitions.requisition.requisition import Requisition
from requisitions.requisition.sequence import next_requisition_number
from requisitions.requisition.status import Shift

logger = structlog.get_logger(__name__)


@requisitions.command(part_of="Requisition")
class CreateRequisition:
    """Raise a requisition for a sector. The requester is the acting user."""

    store_id = Identifier(required=True)
    sector = String(required=True, max_length=100)
    requester_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of {"product_id", "requested_qty"}
    observations = Text()
    expected_delivery_date = Date()
    shift = String(max_length=20, choices=Shift)


def _parse_items(raw) -> list[dict]:
    try:
        items = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as exc:
        raise ValidationError({"items": ["Items must be a JSON list"]}) from exc
    if not items:
        raise ValidationError({"items": ["A requisition needs at least one item"]})
    if not isinstance(items, list):
        raise ValidationError({"items": ["Items must be a JSON list"]})

    lines = []
    for line in items:
        if not isinstance(line, dict):
            raise ValidationError({"items": ["Every item must be an object"]})
        if not line.get("product_id"):
            raise ValidationError({"product_id": ["Every item needs a product"]})
        try:
            qty = float(line.get("requested_qty"))
        except (TypeError, ValueError) as exc:
            raise ValidationError({"requested_qty": ["Requested quantity must be a number"]}) from exc
        validate_requested_qty(qty)
        lines.append({**line, "requested_qty": qty})
    return lines


def _snapshot_items(lines: list[dict]) -> list[dict]:
    catalog = get_product_catalog()
    items_data = []
    for line in lines:
        product = catalog.snapshot(str(line["product_id"]))
        if product is None:
            raise ValidationError({"product_id": [f"Unknown product {line['product_id']}"]})
        items_data.append({**product.as_item_fields(), "requested_qty": float(line["requested_qty"])})
    return items_data


@requisitions.command_handler(part_of=Requisition)
class CreateRequisitionHandler:
    @handle(CreateRequisition)
    def create_requisition(self, command):
        lines = _parse_items(command.items)
        authorize(resolve_actor(command.requester_id), Operation.CREATE_REQUISITION)
        items_data = _snapshot_items(lines)

        req = Requisition.create(
            number=next_requisition_number(command.store_id),
            store_id=command.store_id,
            sector=command.sector,
            requester_id=command.requester_id,
            items_data=items_data,
            observations=command.observations,
            expected_delivery_date=command.expected_delivery_date,
            shift=command.shift,
        )
        current_domain.repository_for(Requisition).add(req)

        logger.info(
            "Requisition created",
            requisition_id=str(req.id),
            number=req.number,
            store_id=str(req.store_id),
            sector=req.sector,
            item_count=len(req.items),
        )
        return str(req.id)
