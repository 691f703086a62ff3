"""Requisitions bounded context — Central Store Requisitions.

Handles stock requisitions raised by consuming sectors against the central
store: creation, picking (separation), delivery and receipt confirmation,
plus per-weekday quantity suggestions. Uses CQRS because the lifecycle is a
short linear state machine and header status is derived from the line items.
"""

import structlog
from protean.domain import Domain

requisitions = Domain(name="requisitions")

logger = structlog.get_logger(__name__)
