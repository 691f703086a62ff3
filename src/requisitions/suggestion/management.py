"""Quantity suggestion management — commands and handler.

``SaveSuggestion`` is an upsert keyed on (store, product code, weekday).
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from requisitions.domain import requisitions
from requisitions.requisition.handling import resolve_actor
from requisitions.requisition.permissions import Operation, authorize
from requisitions.suggestion.suggestion import RequisitionSuggestion

logger = structlog.get_logger(__name__)


@requisitions.command(part_of="RequisitionSuggestion")
class SaveSuggestion:
    """Create or replace the suggestion for a product on a weekday."""

    store_id = Identifier(required=True)
    product_code = String(required=True, max_length=50)
    product_name = String(required=True, max_length=255)
    weekday = Integer(required=True)
    average_qty = Float(required=True)
    actor_id = Identifier(required=True)


@requisitions.command(part_of="RequisitionSuggestion")
class RemoveSuggestion:
    suggestion_id = Identifier(required=True)
    actor_id = Identifier(required=True)


def find_existing(store_id: str, product_code: str, weekday: int) -> RequisitionSuggestion | None:
    repo = current_domain.repository_for(RequisitionSuggestion)
    results = repo._dao.query.filter(
        store_id=str(store_id),
        product_code=product_code.strip(),
        weekday=weekday,
    ).all()
    return results.items[0] if results.items else None


@requisitions.command_handler(part_of=RequisitionSuggestion)
class SuggestionManagementHandler:
    @handle(SaveSuggestion)
    def save_suggestion(self, command):
        if not 0 <= command.weekday <= 6:
            raise ValidationError({"weekday": ["Weekday must be between 0 (Sunday) and 6 (Saturday)"]})
        if command.average_qty <= 0:
            raise ValidationError({"average_qty": ["Average quantity must be greater than zero"]})
        authorize(resolve_actor(command.actor_id), Operation.MANAGE_SUGGESTIONS)

        repo = current_domain.repository_for(RequisitionSuggestion)
        suggestion = find_existing(command.store_id, command.product_code, command.weekday)
        if suggestion is None:
            suggestion = RequisitionSuggestion.record(
                store_id=command.store_id,
                product_code=command.product_code,
                product_name=command.product_name,
                weekday=command.weekday,
                average_qty=command.average_qty,
            )
        else:
            suggestion.revise(command.product_name, command.average_qty)
        repo.add(suggestion)

        logger.info(
            "Suggestion saved",
            store_id=str(command.store_id),
            product_code=command.product_code,
            weekday=command.weekday,
            average_qty=command.average_qty,
        )
        return str(suggestion.id)

    @handle(RemoveSuggestion)
    def remove_suggestion(self, command):
        authorize(resolve_actor(command.actor_id), Operation.MANAGE_SUGGESTIONS)
        repo = current_domain.repository_for(RequisitionSuggestion)
        try:
            suggestion = repo.get(str(command.suggestion_id))
        except ObjectNotFoundError:
            logger.warning("Suggestion not found for removal", suggestion_id=str(command.suggestion_id))
            raise
        repo._dao.delete(suggestion)
        logger.info("Suggestion removed", suggestion_id=str(command.suggestion_id))
