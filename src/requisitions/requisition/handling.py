"""Shared steps of the requisition command handlers.

Every mutating handler follows the same order: load the aggregate, check the
caller's expected version, resolve the actor, authorize, then mutate. All of
it happens before ``repository.add``, so a failure leaves nothing behind.
"""

from protean.utils.globals import current_domain

from requisitions.actors import get_actor_directory
from requisitions.actors.port import Actor
from requisitions.requisition.requisition import Requisition


def resolve_actor(actor_id: str) -> Actor:
    return get_actor_directory().resolve(str(actor_id))


def load_requisition(requisition_id: str, expected_version: int):
    """Return ``(repository, requisition)`` after the compare-and-swap check."""
    repo = current_domain.repository_for(Requisition)
    requisition = repo.get(str(requisition_id))
    requisition.check_version(expected_version)
    return repo, requisition
