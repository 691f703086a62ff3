"""Domain errors raised by the requisition lifecycle.

Malformed input uses ``protean.exceptions.ValidationError`` and unknown ids
use ``protean.exceptions.ObjectNotFoundError``. The errors below cover the
remaining failure kinds. Like Protean's exceptions they carry a
``messages`` dict of field -> list of messages.
"""


class RequisitionError(Exception):
    """Base class for requisition domain errors."""

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(messages)

    def __str__(self) -> str:
        return str(self.messages)


class PermissionDeniedError(RequisitionError):
    """The actor lacks the capability or relationship an operation requires."""


class StateConflictError(RequisitionError):
    """The aggregate is not in the state an operation requires."""


class StoreError(RequisitionError):
    """The underlying persistence layer failed; nothing was committed."""
