"""Read helpers for quantity suggestions."""

from datetime import date

from protean.utils.globals import current_domain

from requisitions.suggestion.management import find_existing
from requisitions.suggestion.suggestion import RequisitionSuggestion, weekday_name, weekday_of


def _repo():
    return current_domain.repository_for(RequisitionSuggestion)


def suggestion_for(store_id: str, product_code: str, weekday: int) -> RequisitionSuggestion | None:
    """The suggestion for one product on one weekday, or None."""
    if not product_code or not product_code.strip():
        return None
    return find_existing(store_id, product_code, weekday)


def suggestions_for_product(store_id: str, product_code: str) -> list[RequisitionSuggestion]:
    """Every weekday suggestion for a product, Sunday first."""
    results = _repo()._dao.query.filter(store_id=str(store_id), product_code=product_code.strip()).all()
    return sorted(results.items, key=lambda s: s.weekday)


def list_suggestions(
    store_id: str,
    product_code: str | None = None,
    weekday: int | None = None,
    limit: int | None = None,
) -> list[RequisitionSuggestion]:
    """Suggestions of a store ordered by product name."""
    criteria = {"store_id": str(store_id)}
    if product_code:
        criteria["product_code"] = product_code.strip()
    if weekday is not None:
        criteria["weekday"] = weekday

    query = _repo()._dao.query.filter(**criteria).order_by("product_name").limit(limit or None)
    return query.all().items


def suggestion_for_delivery_date(store_id: str, product_code: str, delivery_date: date) -> dict:
    """Look up the suggestion matching the weekday of an expected delivery date."""
    weekday = weekday_of(delivery_date)
    return {
        "suggestion": suggestion_for(store_id, product_code, weekday),
        "weekday": weekday,
        "weekday_name": weekday_name(weekday),
    }
