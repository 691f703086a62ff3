"""Repository for the Requisition aggregate.

Adds the filtered listing used by the store screens and the statistics, and
surfaces persistence failures as ``StoreError``.
"""

from sqlalchemy.exc import SQLAlchemyError

from requisitions.domain import requisitions
from requisitions.errors import StoreError
from requisitions.requisition.requisition import Requisition


@requisitions.repository(part_of=Requisition)
class RequisitionRepository:
    def add(self, item):
        try:
            return super().add(item)
        except SQLAlchemyError as exc:
            raise StoreError({"_store": [f"Could not persist requisition: {exc.__class__.__name__}"]}) from exc

    def get(self, identifier):
        try:
            return super().get(identifier)
        except SQLAlchemyError as exc:
            raise StoreError({"_store": [f"Could not load requisition: {exc.__class__.__name__}"]}) from exc

    def _filtered(
        self,
        store_id: str,
        status: str | None = None,
        requester_id: str | None = None,
        sector: str | None = None,
    ):
        criteria = {"store_id": str(store_id)}
        if status:
            criteria["status"] = status
        if requester_id:
            criteria["requester_id"] = str(requester_id)
        if sector:
            criteria["sector"] = sector
        return self._dao.query.filter(**criteria)

    def list_by_filter(
        self,
        store_id: str,
        status: str | None = None,
        requester_id: str | None = None,
        sector: str | None = None,
        limit: int | None = None,
    ) -> list[Requisition]:
        """Requisitions of a store, newest first, narrowed by the given filters.

        Without a ``limit`` every matching requisition is returned.
        """
        query = self._filtered(store_id, status, requester_id, sector).order_by("-created_at").limit(limit or None)
        try:
            return query.all().items
        except SQLAlchemyError as exc:
            raise StoreError({"_store": [f"Could not list requisitions: {exc.__class__.__name__}"]}) from exc

    def count_by_filter(
        self,
        store_id: str,
        status: str | None = None,
        requester_id: str | None = None,
    ) -> int:
        """Number of requisitions of a store matching the given filters."""
        try:
            return self._filtered(store_id, status, requester_id).limit(1).all().total
        except SQLAlchemyError as exc:
            raise StoreError({"_store": [f"Could not count requisitions: {exc.__class__.__name__}"]}) from exc
