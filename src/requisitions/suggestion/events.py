"""Quantity suggestion events."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from requisitions.domain import requisitions


@requisitions.event(part_of="RequisitionSuggestion")
class SuggestionSaved:
    __version__ = 1

    suggestion_id = Identifier(required=True)
    store_id = Identifier(required=True)
    product_code = String(required=True)
    weekday = Integer(required=True)
    average_qty = Float(required=True)
    saved_at = DateTime(required=True)
