"""FastAPI routes for the Requisitions domain.

The acting user is identified by the ``X-Actor-Id`` header; the permission
gate inside the command handlers decides what that actor may do.
"""

import json
from datetime import date

from fastapi import APIRouter, Header, HTTPException
from protean.utils.globals import current_domain

from requisitions.api.schemas import (
    AdjustItemQuantityRequest,
    CancelItemRequest,
    CreateRequisitionRequest,
    DeliveryDateSuggestionResponse,
    MarkShortageRequest,
    RequisitionIdResponse,
    RequisitionItemResponse,
    RequisitionResponse,
    RequisitionSummaryResponse,
    SaveSuggestionRequest,
    SeparateItemRequest,
    StatisticsResponse,
    StatusResponse,
    SuggestionIdResponse,
    SuggestionResponse,
    VersionedRequest,
)
from requisitions.projections.requisition_summary import RequisitionSummary
from requisitions.projections.statistics import requisition_statistics
from requisitions.requisition.adjustment import AdjustItemQuantity
from requisitions.requisition.cancellation import CancelRequisition
from requisitions.requisition.creation import CreateRequisition
from requisitions.requisition.delivery import ConfirmReceipt, RegisterDelivery
from requisitions.requisition.requisition import Requisition
from requisitions.requisition.separation import CancelItem, MarkShortage, SeparateItem
from requisitions.suggestion import queries
from requisitions.suggestion.management import RemoveSuggestion, SaveSuggestion
from requisitions.suggestion.suggestion import weekday_name


def _item_response(item) -> RequisitionItemResponse:
    return RequisitionItemResponse(
        item_id=str(item.id),
        product_id=str(item.product_id),
        product_name=item.product_name,
        product_unit=item.product_unit,
        product_category=item.product_category,
        product_code=item.product_code,
        product_barcode=item.product_barcode,
        requested_qty=item.requested_qty,
        separated_qty=item.separated_qty or 0.0,
        delivered_qty=item.delivered_qty or 0.0,
        status=item.status,
        observations=item.observations,
        separated_at=item.separated_at,
        delivered_at=item.delivered_at,
    )


def _requisition_response(req: Requisition) -> RequisitionResponse:
    return RequisitionResponse(
        requisition_id=str(req.id),
        number=req.number,
        store_id=str(req.store_id),
        sector=req.sector,
        requester_id=str(req.requester_id),
        status=req.status,
        observations=req.observations,
        expected_delivery_date=req.expected_delivery_date,
        shift=req.shift,
        version=req.version or 0,
        created_at=req.created_at,
        separated_at=req.separated_at,
        delivered_at=req.delivered_at,
        confirmed_at=req.confirmed_at,
        cancelled_at=req.cancelled_at,
        separation_actor_id=str(req.separation_actor_id) if req.separation_actor_id else None,
        delivery_actor_id=str(req.delivery_actor_id) if req.delivery_actor_id else None,
        items=[_item_response(item) for item in req.items or []],
    )


def _summary_response(view: RequisitionSummary) -> RequisitionSummaryResponse:
    return RequisitionSummaryResponse(
        requisition_id=str(view.requisition_id),
        number=view.number,
        store_id=str(view.store_id),
        sector=view.sector,
        requester_id=str(view.requester_id),
        status=view.status,
        expected_delivery_date=view.expected_delivery_date,
        shift=view.shift,
        total_items=view.total_items or 0,
        pending_items=view.pending_items or 0,
        separated_items=view.separated_items or 0,
        delivered_items=view.delivered_items or 0,
        shortage_items=view.shortage_items or 0,
        cancelled_items=view.cancelled_items or 0,
        created_at=view.created_at,
        confirmed_at=view.confirmed_at,
    )


def _suggestion_response(suggestion) -> SuggestionResponse:
    return SuggestionResponse(
        suggestion_id=str(suggestion.id),
        store_id=str(suggestion.store_id),
        product_code=suggestion.product_code,
        product_name=suggestion.product_name,
        weekday=suggestion.weekday,
        weekday_name=weekday_name(suggestion.weekday),
        average_qty=suggestion.average_qty,
    )


# ---------------------------------------------------------------------------
# Requisition Router
# ---------------------------------------------------------------------------
requisition_router = APIRouter(prefix="/requisitions", tags=["requisitions"])


@requisition_router.post("", status_code=201, response_model=RequisitionIdResponse)
async def create_requisition(
    body: CreateRequisitionRequest,
    x_actor_id: str = Header(...),
) -> RequisitionIdResponse:
    """Raise a new requisition on behalf of the acting user."""
    command = CreateRequisition(
        store_id=body.store_id,
        sector=body.sector,
        requester_id=x_actor_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        observations=body.observations,
        expected_delivery_date=body.expected_delivery_date,
        shift=body.shift,
    )
    result = current_domain.process(command, asynchronous=False)
    return RequisitionIdResponse(requisition_id=result)


@requisition_router.get("", response_model=list[RequisitionSummaryResponse])
async def list_requisitions(
    store_id: str,
    status: str | None = None,
    requester_id: str | None = None,
    sector: str | None = None,
    limit: int | None = None,
) -> list[RequisitionSummaryResponse]:
    """List requisitions of a store, newest first."""
    criteria = {"store_id": store_id}
    if status:
        criteria["status"] = status
    if requester_id:
        criteria["requester_id"] = requester_id
    if sector:
        criteria["sector"] = sector

    repo = current_domain.repository_for(RequisitionSummary)
    query = repo._dao.query.filter(**criteria).order_by("-created_at").limit(limit or None)
    return [_summary_response(view) for view in query.all().items]


@requisition_router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(store_id: str, requester_id: str | None = None) -> StatisticsResponse:
    return StatisticsResponse(**requisition_statistics(store_id, requester_id))


@requisition_router.get("/{requisition_id}", response_model=RequisitionResponse)
async def get_requisition(requisition_id: str) -> RequisitionResponse:
    req = current_domain.repository_for(Requisition).get(requisition_id)
    return _requisition_response(req)


@requisition_router.get("/{requisition_id}/items/lookup", response_model=RequisitionItemResponse)
async def lookup_pending_item(requisition_id: str, code: str) -> RequisitionItemResponse:
    """Find the pending item matching a scanned product code or barcode."""
    req = current_domain.repository_for(Requisition).get(requisition_id)
    item = req.pending_item_for_code(code)
    if item is None:
        raise HTTPException(status_code=404, detail=f"No pending item for code {code}")
    return _item_response(item)


@requisition_router.put("/{requisition_id}/items/{item_id}/separate", response_model=StatusResponse)
async def separate_item(
    requisition_id: str,
    item_id: str,
    body: SeparateItemRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    command = SeparateItem(
        requisition_id=requisition_id,
        item_id=item_id,
        separated_qty=body.separated_qty,
        observations=body.observations,
        actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="item_separated")


@requisition_router.put("/{requisition_id}/items/{item_id}/shortage", response_model=StatusResponse)
async def mark_shortage(
    requisition_id: str,
    item_id: str,
    body: MarkShortageRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    command = MarkShortage(
        requisition_id=requisition_id,
        item_id=item_id,
        observations=body.observations,
        actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="item_shortage")


@requisition_router.put("/{requisition_id}/items/{item_id}/cancel", response_model=StatusResponse)
async def cancel_item(
    requisition_id: str,
    item_id: str,
    body: CancelItemRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    command = CancelItem(
        requisition_id=requisition_id,
        item_id=item_id,
        observations=body.observations,
        actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="item_cancelled")


@requisition_router.put("/{requisition_id}/items/{item_id}/adjust", response_model=StatusResponse)
async def adjust_item_quantity(
    requisition_id: str,
    item_id: str,
    body: AdjustItemQuantityRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    """Correct the requested quantity of an item after the fact."""
    command = AdjustItemQuantity(
        requisition_id=requisition_id,
        item_id=item_id,
        new_requested_qty=body.new_requested_qty,
        justification=body.justification,
        context=body.context,
        actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="item_adjusted")


@requisition_router.put("/{requisition_id}/deliver", response_model=StatusResponse)
async def register_delivery(
    requisition_id: str,
    body: VersionedRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    command = RegisterDelivery(
        requisition_id=requisition_id,
        delivery_actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="delivered")


@requisition_router.put("/{requisition_id}/confirm", response_model=StatusResponse)
async def confirm_receipt(
    requisition_id: str,
    body: VersionedRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    command = ConfirmReceipt(
        requisition_id=requisition_id,
        actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="receipt_confirmed")


@requisition_router.put("/{requisition_id}/cancel", response_model=StatusResponse)
async def cancel_requisition(
    requisition_id: str,
    body: VersionedRequest,
    x_actor_id: str = Header(...),
) -> StatusResponse:
    command = CancelRequisition(
        requisition_id=requisition_id,
        actor_id=x_actor_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="cancelled")


# ---------------------------------------------------------------------------
# Suggestion Router
# ---------------------------------------------------------------------------
suggestion_router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@suggestion_router.put("", response_model=SuggestionIdResponse)
async def save_suggestion(body: SaveSuggestionRequest, x_actor_id: str = Header(...)) -> SuggestionIdResponse:
    """Create or replace the suggestion for a product on a weekday."""
    command = SaveSuggestion(
        store_id=body.store_id,
        product_code=body.product_code,
        product_name=body.product_name,
        weekday=body.weekday,
        average_qty=body.average_qty,
        actor_id=x_actor_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return SuggestionIdResponse(suggestion_id=result)


@suggestion_router.delete("/{suggestion_id}", response_model=StatusResponse)
async def remove_suggestion(suggestion_id: str, x_actor_id: str = Header(...)) -> StatusResponse:
    command = RemoveSuggestion(suggestion_id=suggestion_id, actor_id=x_actor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="removed")


@suggestion_router.get("", response_model=list[SuggestionResponse])
async def list_suggestions(
    store_id: str,
    product_code: str | None = None,
    weekday: int | None = None,
    limit: int | None = None,
) -> list[SuggestionResponse]:
    results = queries.list_suggestions(store_id, product_code=product_code, weekday=weekday, limit=limit)
    return [_suggestion_response(s) for s in results]


@suggestion_router.get("/lookup", response_model=SuggestionResponse)
async def get_suggestion(store_id: str, product_code: str, weekday: int) -> SuggestionResponse:
    suggestion = queries.suggestion_for(store_id, product_code, weekday)
    if suggestion is None:
        raise HTTPException(status_code=404, detail="No suggestion for this product and weekday")
    return _suggestion_response(suggestion)


@suggestion_router.get("/by-delivery-date", response_model=DeliveryDateSuggestionResponse)
async def get_suggestion_for_delivery_date(
    store_id: str,
    product_code: str,
    delivery_date: date,
) -> DeliveryDateSuggestionResponse:
    """Suggestion for the weekday of an expected delivery date."""
    result = queries.suggestion_for_delivery_date(store_id, product_code, delivery_date)
    suggestion = result["suggestion"]
    return DeliveryDateSuggestionResponse(
        suggestion=_suggestion_response(suggestion) if suggestion else None,
        weekday=result["weekday"],
        weekday_name=result["weekday_name"],
    )


@suggestion_router.get("/products/{product_code}", response_model=list[SuggestionResponse])
async def get_product_suggestions(product_code: str, store_id: str) -> list[SuggestionResponse]:
    return [_suggestion_response(s) for s in queries.suggestions_for_product(store_id, product_code)]
