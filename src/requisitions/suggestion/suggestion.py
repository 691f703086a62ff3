"""RequisitionSuggestion aggregate — average quantities per product and weekday.

Sectors tend to order the same quantities on the same weekday. A suggestion
holds, per store, product code and weekday (0 = Sunday ... 6 = Saturday), the
average quantity used to pre-fill a new requisition.
"""

from datetime import UTC, date, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from requisitions.domain import requisitions
from requisitions.suggestion.events import SuggestionSaved

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


def weekday_name(weekday: int) -> str:
    if weekday is None or not 0 <= weekday <= 6:
        return "Invalid day"
    return WEEKDAY_NAMES[weekday]


def weekday_of(day: date) -> int:
    """Weekday number of ``day`` with Sunday as 0."""
    return day.isoweekday() % 7


@requisitions.aggregate
class RequisitionSuggestion:
    store_id = Identifier(required=True)
    product_code = String(required=True, max_length=50)
    product_name = String(required=True, max_length=255)
    weekday = Integer(required=True)
    average_qty = Float(required=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def weekday_must_be_valid(self):
        if self.weekday is not None and not 0 <= self.weekday <= 6:
            raise ValidationError({"weekday": ["Weekday must be between 0 (Sunday) and 6 (Saturday)"]})

    @invariant.post
    def average_must_be_positive(self):
        if self.average_qty is not None and self.average_qty <= 0:
            raise ValidationError({"average_qty": ["Average quantity must be greater than zero"]})

    @classmethod
    def record(cls, store_id, product_code, product_name, weekday, average_qty):
        now = datetime.now(UTC)
        suggestion = cls(
            store_id=store_id,
            product_code=product_code.strip(),
            product_name=product_name,
            weekday=weekday,
            average_qty=average_qty,
            created_at=now,
            updated_at=now,
        )
        suggestion._raise_saved(now)
        return suggestion

    def revise(self, product_name: str, average_qty: float) -> None:
        now = datetime.now(UTC)
        self.product_name = product_name
        self.average_qty = average_qty
        self.updated_at = now
        self._raise_saved(now)

    def _raise_saved(self, now: datetime) -> None:
        self.raise_(
            SuggestionSaved(
                suggestion_id=str(self.id),
                store_id=str(self.store_id),
                product_code=self.product_code,
                weekday=self.weekday,
                average_qty=self.average_qty,
                saved_at=now,
            )
        )
