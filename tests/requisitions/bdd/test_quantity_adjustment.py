"""BDD tests for historical quantity adjustments."""

from protean.exceptions import ValidationError
from pytest_bdd import parsers, scenarios, when
from requisitions.errors import StateConflictError

scenarios("features/quantity_adjustment.feature")


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the "{product}" requested quantity is adjusted to {qty:g} because "{justification}"'))
def adjust_quantity(requisition, item_id_of, product, qty, justification, error):
    try:
        requisition.adjust_item_quantity(
            item_id_of(requisition, product),
            qty,
            justification,
            actor_id="admin-dora",
        )
    except (ValidationError, StateConflictError) as exc:
        error["exc"] = exc
