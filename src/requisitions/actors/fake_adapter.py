"""In-memory actor directory — for development and testing."""

import json
from collections.abc import Iterable

from requisitions.actors.port import ActorDirectory, Capability, capabilities_from_flags


class InMemoryActorDirectory(ActorDirectory):
    """Actor directory backed by a dict of actor id -> capabilities."""

    def __init__(self):
        self._capabilities: dict[str, frozenset[Capability]] = {}

    def grant(self, actor_id: str, *capabilities: Capability) -> None:
        current = self._capabilities.get(str(actor_id), frozenset())
        self._capabilities[str(actor_id)] = current | frozenset(capabilities)

    def grant_flags(self, actor_id: str, flags: Iterable[str]) -> None:
        """Grant capabilities from legacy permission flags (criar/editar/excluir)."""
        self.grant(actor_id, *capabilities_from_flags(flags))

    def revoke_all(self, actor_id: str) -> None:
        self._capabilities.pop(str(actor_id), None)

    def capabilities_for(self, actor_id: str) -> frozenset[Capability]:
        return self._capabilities.get(str(actor_id), frozenset())

    def load_seed(self, path: str) -> None:
        """Grant capabilities from a JSON file of ``{actor_id: [capability, ...]}``."""
        with open(path) as f:
            seed = json.load(f)
        for actor_id, capabilities in seed.items():
            self.grant(actor_id, *(Capability(c) for c in capabilities))
