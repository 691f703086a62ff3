"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class RequisitionState:
    """Tracks state for a single simulated requisition lifecycle."""

    requisition_id: str | None = None
    store_id: str | None = None
    requester_id: str | None = None
    version: int = 0
    # item_id -> requested quantity
    items: dict[str, float] = field(default_factory=dict)
    current_status: str = "Pending"


@dataclass
class SuggestionState:
    """Tracks suggestions saved by a simulated store keeper."""

    store_id: str | None = None
    suggestion_ids: list[str] = field(default_factory=list)
