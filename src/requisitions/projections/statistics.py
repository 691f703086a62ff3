"""Requisition statistics for a store, optionally from one requester's view.

Computed on read from the requisitions themselves, so the counters always
agree with the header statuses.
"""

from protean.utils.globals import current_domain

from requisitions.requisition.requisition import Requisition
from requisitions.requisition.status import RequisitionStatus


def requisition_statistics(store_id: str, requester_id: str | None = None) -> dict:
    """Count a store's requisitions by status.

    With ``requester_id`` the result also carries that requester's own
    pending requisitions and the deliveries waiting for their confirmation.
    """
    repo = current_domain.repository_for(Requisition)

    stats = {"total": repo.count_by_filter(store_id)}
    for status in RequisitionStatus:
        stats[status.value.lower()] = repo.count_by_filter(store_id, status=status.value)

    if requester_id:
        stats["my_pending"] = repo.count_by_filter(
            store_id, status=RequisitionStatus.PENDING.value, requester_id=requester_id
        )
        delivered = repo.list_by_filter(
            store_id, status=RequisitionStatus.DELIVERED.value, requester_id=requester_id
        )
        stats["awaiting_confirmation"] = sum(1 for r in delivered if r.confirmed_at is None)

    return stats
