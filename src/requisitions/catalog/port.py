"""Product catalog port (abstract interface).

Requisition items keep a snapshot of the product attributes taken when the
requisition is created, so later catalog edits do not rewrite history.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class ProductSnapshot:
    """Product attributes copied onto a requisition item."""

    product_id: str
    name: str
    unit: str | None = None
    category: str | None = None
    code: str | None = None
    barcode: str | None = None

    def as_item_fields(self) -> dict:
        data = asdict(self)
        return {
            "product_id": data["product_id"],
            "product_name": data["name"],
            "product_unit": data["unit"],
            "product_category": data["category"],
            "product_code": data["code"],
            "product_barcode": data["barcode"],
        }


class ProductCatalog(ABC):
    """Abstract product catalog interface."""

    @abstractmethod
    def snapshot(self, product_id: str) -> ProductSnapshot | None:
        """Return the current attributes of a product, or None if unknown."""
        ...
