"""Pydantic API schemas for the Requisitions domain.

These are the external API contracts — separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import date, datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class RequisitionItemRequest(BaseModel):
    product_id: str
    requested_qty: float


class CreateRequisitionRequest(BaseModel):
    store_id: str
    sector: str
    items: list[RequisitionItemRequest]
    observations: str | None = None
    expected_delivery_date: date | None = None
    shift: str | None = None


class VersionedRequest(BaseModel):
    expected_version: int


class SeparateItemRequest(VersionedRequest):
    separated_qty: float
    observations: str | None = None


class MarkShortageRequest(VersionedRequest):
    observations: str | None = None


class CancelItemRequest(VersionedRequest):
    observations: str | None = None


class AdjustItemQuantityRequest(VersionedRequest):
    new_requested_qty: float
    justification: str | None = None
    context: str | None = None


class SaveSuggestionRequest(BaseModel):
    store_id: str
    product_code: str
    product_name: str
    weekday: int
    average_qty: float


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class RequisitionIdResponse(BaseModel):
    requisition_id: str


class SuggestionIdResponse(BaseModel):
    suggestion_id: str


class StatusResponse(BaseModel):
    status: str


class RequisitionItemResponse(BaseModel):
    item_id: str
    product_id: str
    product_name: str
    product_unit: str | None = None
    product_category: str | None = None
    product_code: str | None = None
    product_barcode: str | None = None
    requested_qty: float
    separated_qty: float
    delivered_qty: float
    status: str
    observations: str | None = None
    separated_at: datetime | None = None
    delivered_at: datetime | None = None


class RequisitionResponse(BaseModel):
    requisition_id: str
    number: str
    store_id: str
    sector: str
    requester_id: str
    status: str
    observations: str | None = None
    expected_delivery_date: date | None = None
    shift: str | None = None
    version: int
    created_at: datetime | None = None
    separated_at: datetime | None = None
    delivered_at: datetime | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    separation_actor_id: str | None = None
    delivery_actor_id: str | None = None
    items: list[RequisitionItemResponse]


class RequisitionSummaryResponse(BaseModel):
    requisition_id: str
    number: str
    store_id: str
    sector: str
    requester_id: str
    status: str
    expected_delivery_date: date | None = None
    shift: str | None = None
    total_items: int
    pending_items: int
    separated_items: int
    delivered_items: int
    shortage_items: int
    cancelled_items: int
    created_at: datetime | None = None
    confirmed_at: datetime | None = None


class StatisticsResponse(BaseModel):
    total: int
    pending: int
    separated: int
    delivered: int
    cancelled: int
    my_pending: int | None = None
    awaiting_confirmation: int | None = None


class SuggestionResponse(BaseModel):
    suggestion_id: str
    store_id: str
    product_code: str
    product_name: str
    weekday: int
    weekday_name: str
    average_qty: float


class DeliveryDateSuggestionResponse(BaseModel):
    suggestion: SuggestionResponse | None = None
    weekday: int
    weekday_name: str
