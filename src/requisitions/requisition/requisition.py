"""Requisition aggregate (CQRS) — the core of the requisitions domain.

A requisition is a request from a consuming sector (kitchen line, bar, prep)
for a set of stock items held by the central store. It is created with its
full item set; the store then resolves every item (separate, shortage,
cancel), delivers the separated goods in one batch and the requester
confirms receipt.

Item state machine:
    PENDING → SEPARATED | SHORTAGE | CANCELLED
    SEPARATED → DELIVERED

Header status is derived from the items after every transition
(see ``requisitions.requisition.status.derive_status``), except
``CANCELLED`` which is set explicitly and is sticky.

Permission checks live in ``requisitions.requisition.permissions`` and run in
the command handlers before any method below is called.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Date, DateTime, Float, HasMany, Identifier, Integer, String, Text

from requisitions.domain import requisitions
from requisitions.errors import StateConflictError
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
from requisitions.requisition.quantities import (
    AdjustmentWindow,
    require_text,
    resolve_adjustment_window,
    validate_adjustment,
    validate_requested_qty,
    validate_separated_qty,
)
from requisitions.requisition.status import (
    ItemStatus,
    RequisitionStatus,
    Shift,
    can_transition,
    derive_status,
)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@requisitions.entity(part_of="Requisition")
class RequisitionItem:
    """One product line of a requisition.

    The product attributes are a snapshot taken at creation time and are
    never refreshed from the catalog.
    """

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    product_unit = String(max_length=20)
    product_category = String(max_length=100)
    product_code = String(max_length=50)
    product_barcode = String(max_length=50)
    requested_qty = Float(required=True)
    separated_qty = Float(default=0.0)
    delivered_qty = Float(default=0.0)
    status = String(
        max_length=20,
        choices=ItemStatus,
        default=ItemStatus.PENDING.value,
    )
    observations = Text()
    separated_at = DateTime()
    delivered_at = DateTime()

    def to_dict(self) -> dict:
        return {
            "item_id": str(self.id),
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "product_unit": self.product_unit,
            "product_code": self.product_code,
            "requested_qty": self.requested_qty,
        }


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@requisitions.aggregate
class Requisition:
    number = String(required=True, max_length=30)
    store_id = Identifier(required=True)
    sector = String(required=True, max_length=100)
    requester_id = Identifier(required=True)
    status = String(
        max_length=20,
        choices=RequisitionStatus,
        default=RequisitionStatus.PENDING.value,
    )
    observations = Text()
    expected_delivery_date = Date()
    shift = String(max_length=20, choices=Shift)
    items = HasMany(RequisitionItem)

    separation_actor_id = Identifier()
    delivery_actor_id = Identifier()
    cancelled_by = Identifier()

    created_at = DateTime()
    separated_at = DateTime()
    delivered_at = DateTime()
    confirmed_at = DateTime()
    cancelled_at = DateTime()
    updated_at = DateTime()

    # Bumped on every successful mutation, checked against expected_version
    version = Integer(default=0)

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def requested_quantities_must_be_positive(self):
        for item in self.items or []:
            if item.requested_qty is None or item.requested_qty <= 0:
                raise ValidationError({"requested_qty": ["Requested quantity must be greater than zero"]})

    @invariant.post
    def separated_cannot_exceed_requested(self):
        for item in self.items or []:
            if (item.separated_qty or 0) > item.requested_qty:
                raise ValidationError({"separated_qty": ["Separated quantity cannot exceed requested quantity"]})

    @invariant.post
    def delivered_items_carry_full_separated_quantity(self):
        for item in self.items or []:
            if item.status == ItemStatus.DELIVERED.value and item.delivered_qty != item.separated_qty:
                raise ValidationError({"delivered_qty": ["Delivered quantity must equal separated quantity"]})

    @invariant.post
    def header_status_follows_items(self):
        if not self.items:
            return
        if self.status != self.derived_status().value:
            raise ValidationError({"status": [f"Header status {self.status} does not match its items"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        number: str,
        store_id: str,
        sector: str,
        requester_id: str,
        items_data: list[dict],
        observations: str | None = None,
        expected_delivery_date=None,
        shift: str | None = None,
    ):
        """Create a requisition with its full, immutable item set.

        ``items_data`` entries carry the product snapshot fields plus
        ``requested_qty``.
        """
        if not items_data:
            raise ValidationError({"items": ["A requisition needs at least one item"]})
        for item_data in items_data:
            validate_requested_qty(item_data.get("requested_qty"))

        now = datetime.now(UTC)
        req = cls(
            number=number,
            store_id=store_id,
            sector=sector,
            requester_id=requester_id,
            status=RequisitionStatus.PENDING.value,
            observations=observations,
            expected_delivery_date=expected_delivery_date,
            shift=shift,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            req.add_items(RequisitionItem(**item_data))

        req.raise_(
            RequisitionCreated(
                requisition_id=str(req.id),
                number=number,
                store_id=str(store_id),
                sector=sector,
                requester_id=str(requester_id),
                items=json.dumps([item.to_dict() for item in req.items]),
                item_count=len(req.items),
                expected_delivery_date=expected_delivery_date,
                shift=shift,
                created_at=now,
            )
        )
        return req

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    def derived_status(self) -> RequisitionStatus:
        return derive_status(
            [item.status for item in self.items or []],
            cancelled=self.status == RequisitionStatus.CANCELLED.value,
            delivery_registered=self.delivered_at is not None,
        )

    def check_version(self, expected_version: int) -> None:
        """Compare-and-swap guard: reject callers working on a stale read."""
        if expected_version != self.version:
            raise StateConflictError(
                {"version": [f"Requisition was modified (expected version {expected_version}, found {self.version})"]}
            )

    def get_item(self, item_id: str) -> RequisitionItem:
        item = next((i for i in (self.items or []) if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError({"_entity": f"Item {item_id} not found in requisition {self.number}"})
        return item

    def pending_item_for_code(self, code: str) -> RequisitionItem | None:
        """Return the pending item whose product code or barcode matches ``code``."""
        code = (code or "").strip()
        if not code:
            return None
        return next(
            (
                i
                for i in (self.items or [])
                if i.status == ItemStatus.PENDING.value and code in (i.product_code, i.product_barcode)
            ),
            None,
        )

    def _assert_not_cancelled(self) -> None:
        if self.status == RequisitionStatus.CANCELLED.value:
            raise StateConflictError({"status": [f"Requisition {self.number} is cancelled"]})

    def _pending_item(self, item_id: str) -> RequisitionItem:
        self._assert_not_cancelled()
        item = self.get_item(item_id)
        if not can_transition(item.status, ItemStatus.SEPARATED):
            raise StateConflictError({"status": [f"Item is {item.status}, only Pending items can be resolved"]})
        return item

    def _recompute_status(self, actor_id: str, now: datetime) -> bool:
        """Re-derive the header status; return True if it just became Separated."""
        previous = self.status
        self.status = self.derived_status().value
        became_separated = (
            previous != RequisitionStatus.SEPARATED.value and self.status == RequisitionStatus.SEPARATED.value
        )
        if became_separated and self.separated_at is None:
            self.separated_at = now
            self.separation_actor_id = actor_id
        return became_separated

    def _touch(self, now: datetime) -> None:
        self.updated_at = now
        self.version = (self.version or 0) + 1

    def _raise_if_separated(self, became_separated: bool) -> None:
        if became_separated:
            self.raise_(
                RequisitionSeparated(
                    requisition_id=str(self.id),
                    separation_actor_id=str(self.separation_actor_id),
                    separated_at=self.separated_at,
                )
            )

    # -------------------------------------------------------------------
    # Item resolution
    # -------------------------------------------------------------------
    def separate_item(
        self,
        item_id: str,
        separated_qty: float,
        actor_id: str,
        observations: str | None = None,
    ) -> None:
        """Set aside ``separated_qty`` of a pending item."""
        item = self._pending_item(item_id)
        validate_separated_qty(separated_qty, item.requested_qty)

        now = datetime.now(UTC)
        with atomic_change(self):
            item.separated_qty = separated_qty
            item.status = ItemStatus.SEPARATED.value
            item.separated_at = now
            if observations:
                item.observations = observations
            became_separated = self._recompute_status(actor_id, now)
            self._touch(now)

        self.raise_(
            ItemSeparated(
                requisition_id=str(self.id),
                item_id=str(item.id),
                separated_qty=separated_qty,
                separated_by=str(actor_id),
                header_status=self.status,
                separated_at=now,
            )
        )
        self._raise_if_separated(became_separated)

    def mark_shortage(self, item_id: str, observations: str, actor_id: str) -> None:
        """Record that a pending item cannot be supplied. Observations are mandatory."""
        item = self._pending_item(item_id)
        observations = require_text(observations, "observations", "Observations are required for a shortage")

        now = datetime.now(UTC)
        with atomic_change(self):
            item.status = ItemStatus.SHORTAGE.value
            item.observations = observations
            became_separated = self._recompute_status(actor_id, now)
            self._touch(now)

        self.raise_(
            ItemShortageRecorded(
                requisition_id=str(self.id),
                item_id=str(item.id),
                observations=observations,
                recorded_by=str(actor_id),
                header_status=self.status,
                recorded_at=now,
            )
        )
        self._raise_if_separated(became_separated)

    def cancel_item(self, item_id: str, actor_id: str, observations: str | None = None) -> None:
        item = self._pending_item(item_id)

        now = datetime.now(UTC)
        with atomic_change(self):
            item.status = ItemStatus.CANCELLED.value
            if observations:
                item.observations = observations
            became_separated = self._recompute_status(actor_id, now)
            self._touch(now)

        self.raise_(
            ItemCancelled(
                requisition_id=str(self.id),
                item_id=str(item.id),
                cancelled_by=str(actor_id),
                header_status=self.status,
                cancelled_at=now,
            )
        )
        self._raise_if_separated(became_separated)

    # -------------------------------------------------------------------
    # Delivery and receipt
    # -------------------------------------------------------------------
    def register_delivery(self, delivery_actor_id: str) -> None:
        """Hand every separated item over to the sector in one batch."""
        current = RequisitionStatus(self.status)
        if current != RequisitionStatus.SEPARATED:
            raise StateConflictError({"status": [f"Cannot deliver a requisition in {current.value} state"]})

        now = datetime.now(UTC)
        delivered_ids = []
        with atomic_change(self):
            for item in self.items or []:
                if item.status != ItemStatus.SEPARATED.value:
                    continue
                item.delivered_qty = item.separated_qty
                item.status = ItemStatus.DELIVERED.value
                item.delivered_at = now
                delivered_ids.append(str(item.id))
            self.delivered_at = now
            self.delivery_actor_id = delivery_actor_id
            self.status = self.derived_status().value
            self._touch(now)

        self.raise_(
            RequisitionDelivered(
                requisition_id=str(self.id),
                delivery_actor_id=str(delivery_actor_id),
                delivered_item_ids=json.dumps(delivered_ids),
                delivered_at=now,
            )
        )

    def confirm_receipt(self, actor_id: str) -> None:
        """Stamp the requester's acknowledgment. The status stays Delivered."""
        current = RequisitionStatus(self.status)
        if current != RequisitionStatus.DELIVERED:
            raise StateConflictError({"status": [f"Cannot confirm a requisition in {current.value} state"]})
        if self.confirmed_at is not None:
            raise StateConflictError({"confirmed_at": ["Receipt has already been confirmed"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.confirmed_at = now
            self._touch(now)

        self.raise_(
            ReceiptConfirmed(
                requisition_id=str(self.id),
                confirmed_by=str(actor_id),
                confirmed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, actor_id: str) -> None:
        """Cancel the requisition as a whole. Item statuses are left as they are."""
        previous = RequisitionStatus(self.status)
        if previous == RequisitionStatus.CANCELLED:
            raise StateConflictError({"status": ["Requisition is already cancelled"]})

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = RequisitionStatus.CANCELLED.value
            self.cancelled_at = now
            self.cancelled_by = actor_id
            self._touch(now)

        self.raise_(
            RequisitionCancelled(
                requisition_id=str(self.id),
                cancelled_by=str(actor_id),
                previous_status=previous.value,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Historical adjustment
    # -------------------------------------------------------------------
    def adjustment_window_for(
        self, item_id: str, requested_window: AdjustmentWindow | str | None = None
    ) -> AdjustmentWindow:
        """Return the window ``item_id`` can currently be adjusted in."""
        self._assert_not_cancelled()
        item = self.get_item(item_id)
        return resolve_adjustment_window(
            item.status,
            confirmed=self.confirmed_at is not None,
            requested_window=requested_window,
        )

    def adjust_item_quantity(
        self,
        item_id: str,
        new_requested_qty: float,
        justification: str,
        actor_id: str,
        context: AdjustmentWindow | str | None = None,
    ) -> None:
        """Correct the requested quantity of an item after the fact.

        Only ``requested_qty`` changes; the justification is appended to the
        item observations.
        """
        justification = require_text(justification, "justification", "A justification is required")
        window = self.adjustment_window_for(item_id, context)
        item = self.get_item(item_id)
        validate_adjustment(window, new_requested_qty, item.separated_qty, item.delivered_qty)

        previous_qty = item.requested_qty
        note = f"[{window.value}] {previous_qty:g} -> {new_requested_qty:g}: {justification}"
        now = datetime.now(UTC)
        with atomic_change(self):
            item.requested_qty = new_requested_qty
            item.observations = f"{item.observations}\n{note}" if item.observations else note
            self._touch(now)

        self.raise_(
            ItemQuantityAdjusted(
                requisition_id=str(self.id),
                item_id=str(item.id),
                previous_qty=previous_qty,
                new_qty=new_requested_qty,
                window=window.value,
                justification=justification,
                adjusted_by=str(actor_id),
                adjusted_at=now,
            )
        )
