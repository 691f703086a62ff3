"""Per-store requisition numbering.

Every store owns one ``RequisitionSequence`` row; creating a requisition
advances it inside the same unit of work, so a number is never handed out
twice for a store.
"""

from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from requisitions.domain import requisitions

DEFAULT_PREFIX = "REQ"


@requisitions.aggregate
class RequisitionSequence:
    store_id = Identifier(identifier=True)
    prefix = String(max_length=10, default=DEFAULT_PREFIX)
    current_value = Integer(default=0)

    def advance(self) -> str:
        """Move to the next value and return it formatted as a requisition number."""
        self.current_value = (self.current_value or 0) + 1
        return f"{self.prefix}-{self.current_value:06d}"


def _configured_prefix() -> str:
    custom = current_domain.config.get("custom", {}) or {}
    return custom.get("requisition_number_prefix", DEFAULT_PREFIX)


def next_requisition_number(store_id: str) -> str:
    """Reserve the next requisition number for ``store_id``."""
    repo = current_domain.repository_for(RequisitionSequence)
    try:
        sequence = repo.get(str(store_id))
    except ObjectNotFoundError:
        sequence = RequisitionSequence(store_id=str(store_id), prefix=_configured_prefix())

    number = sequence.advance()
    repo.add(sequence)
    return number
