"""Actor directory abstraction — resolves who may do what."""

import os

_directory_instance = None


def get_actor_directory():
    """Return the configured actor directory adapter (singleton).

    Uses InMemoryActorDirectory by default. Configure via the
    ACTOR_DIRECTORY_ADAPTER environment variable; ACTOR_DIRECTORY_SEED names
    a JSON file to pre-load the in-memory directory from.
    """
    global _directory_instance
    if _directory_instance is None:
        adapter = os.environ.get("ACTOR_DIRECTORY_ADAPTER", "memory")
        if adapter == "memory":
            from requisitions.actors.fake_adapter import InMemoryActorDirectory

            _directory_instance = InMemoryActorDirectory()
            seed = os.environ.get("ACTOR_DIRECTORY_SEED")
            if seed:
                _directory_instance.load_seed(seed)
        else:
            raise ValueError(f"Unknown actor directory adapter: {adapter}")
    return _directory_instance


def reset_actor_directory():
    """Reset the actor directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
