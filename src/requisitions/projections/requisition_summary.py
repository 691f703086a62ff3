"""Requisition summary — listing view with per-status item counters.

Backs the requisition listing and the store work queues (to separate, to
deliver, awaiting confirmation).
"""

import json

from protean.core.projector import on
from protean.fields import Date, DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from requisitions.domain import requisitions
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


@requisitions.projection
class RequisitionSummary:
    requisition_id = Identifier(identifier=True, required=True)
    number = String(required=True)
    store_id = Identifier(required=True)
    sector = String(required=True)
    requester_id = Identifier(required=True)
    status = String(required=True)
    expected_delivery_date = Date()
    shift = String()
    total_items = Integer(default=0)
    pending_items = Integer(default=0)
    separated_items = Integer(default=0)
    delivered_items = Integer(default=0)
    shortage_items = Integer(default=0)
    cancelled_items = Integer(default=0)
    created_at = DateTime()
    separated_at = DateTime()
    delivered_at = DateTime()
    confirmed_at = DateTime()
    cancelled_at = DateTime()
    updated_at = DateTime()


def _resolve_pending(event, counter: str, at) -> None:
    repo = current_domain.repository_for(RequisitionSummary)
    view = repo.get(event.requisition_id)
    view.pending_items = max((view.pending_items or 0) - 1, 0)
    setattr(view, counter, (getattr(view, counter) or 0) + 1)
    view.status = event.header_status
    view.updated_at = at
    repo.add(view)


@requisitions.projector(projector_for=RequisitionSummary, aggregates=[Requisition])
class RequisitionSummaryProjector:
    @on(RequisitionCreated)
    def on_requisition_created(self, event):
        current_domain.repository_for(RequisitionSummary).add(
            RequisitionSummary(
                requisition_id=event.requisition_id,
                number=event.number,
                store_id=event.store_id,
                sector=event.sector,
                requester_id=event.requester_id,
                status="Pending",
                expected_delivery_date=event.expected_delivery_date,
                shift=event.shift,
                total_items=event.item_count,
                pending_items=event.item_count,
                created_at=event.created_at,
                updated_at=event.created_at,
            )
        )

    @on(ItemSeparated)
    def on_item_separated(self, event):
        _resolve_pending(event, "separated_items", event.separated_at)

    @on(ItemShortageRecorded)
    def on_item_shortage_recorded(self, event):
        _resolve_pending(event, "shortage_items", event.recorded_at)

    @on(ItemCancelled)
    def on_item_cancelled(self, event):
        _resolve_pending(event, "cancelled_items", event.cancelled_at)

    @on(RequisitionSeparated)
    def on_requisition_separated(self, event):
        repo = current_domain.repository_for(RequisitionSummary)
        view = repo.get(event.requisition_id)
        view.separated_at = event.separated_at
        repo.add(view)

    @on(RequisitionDelivered)
    def on_requisition_delivered(self, event):
        repo = current_domain.repository_for(RequisitionSummary)
        view = repo.get(event.requisition_id)
        delivered = len(json.loads(event.delivered_item_ids or "[]"))
        view.separated_items = max((view.separated_items or 0) - delivered, 0)
        view.delivered_items = (view.delivered_items or 0) + delivered
        view.status = "Delivered"
        view.delivered_at = event.delivered_at
        view.updated_at = event.delivered_at
        repo.add(view)

    @on(ReceiptConfirmed)
    def on_receipt_confirmed(self, event):
        repo = current_domain.repository_for(RequisitionSummary)
        view = repo.get(event.requisition_id)
        view.confirmed_at = event.confirmed_at
        view.updated_at = event.confirmed_at
        repo.add(view)

    @on(RequisitionCancelled)
    def on_requisition_cancelled(self, event):
        repo = current_domain.repository_for(RequisitionSummary)
        view = repo.get(event.requisition_id)
        view.status = "Cancelled"
        view.cancelled_at = event.cancelled_at
        view.updated_at = event.cancelled_at
        repo.add(view)

    @on(ItemQuantityAdjusted)
    def on_item_quantity_adjusted(self, event):
        repo = current_domain.repository_for(RequisitionSummary)
        view = repo.get(event.requisition_id)
        view.updated_at = event.adjusted_at
        repo.add(view)
