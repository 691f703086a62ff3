"""Actor directory port (abstract interface).

Resolves the capability set of an actor once per request. The permission
gate works on the resolved :class:`Actor`, never on raw permission flags.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class Capability(Enum):
    REQUEST = "CanRequest"
    MANAGE_STOCK = "CanManageStock"
    ADMINISTER = "CanAdminister"


# Permission flags stored on user records by the back-office app
LEGACY_FLAGS = {
    "criar": Capability.REQUEST,
    "editar": Capability.MANAGE_STOCK,
    "excluir": Capability.ADMINISTER,
}


def capabilities_from_flags(flags: Iterable[str]) -> frozenset[Capability]:
    """Translate legacy permission flags into capabilities, ignoring unknown ones."""
    return frozenset(LEGACY_FLAGS[flag] for flag in flags if flag in LEGACY_FLAGS)


@dataclass(frozen=True)
class Actor:
    """An identity performing an operation, with its capability set."""

    actor_id: str
    capabilities: frozenset[Capability] = field(default_factory=frozenset)

    def has(self, capability: Capability) -> bool:
        # CanAdminister is a superset of every other capability
        return capability in self.capabilities or Capability.ADMINISTER in self.capabilities

    @property
    def is_administrator(self) -> bool:
        return Capability.ADMINISTER in self.capabilities


class ActorDirectory(ABC):
    """Abstract actor directory interface."""

    @abstractmethod
    def capabilities_for(self, actor_id: str) -> frozenset[Capability]:
        """Return the capability set of an actor (empty if unknown)."""
        ...

    def resolve(self, actor_id: str) -> Actor:
        return Actor(actor_id=str(actor_id), capabilities=self.capabilities_for(str(actor_id)))
