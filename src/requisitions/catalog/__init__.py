"""Product catalog abstraction — source of item snapshots at creation time."""

import os

_catalog_instance = None


def get_product_catalog():
    """Return the configured product catalog adapter (singleton).

    Uses InMemoryProductCatalog by default. Configure via the
    PRODUCT_CATALOG_ADAPTER environment variable; PRODUCT_CATALOG_SEED names
    a JSON file to pre-load the in-memory catalog from.
    """
    global _catalog_instance
    if _catalog_instance is None:
        adapter = os.environ.get("PRODUCT_CATALOG_ADAPTER", "memory")
        if adapter == "memory":
            from requisitions.catalog.fake_adapter import InMemoryProductCatalog

            _catalog_instance = InMemoryProductCatalog()
            seed = os.environ.get("PRODUCT_CATALOG_SEED")
            if seed:
                _catalog_instance.load_seed(seed)
        else:
            raise ValueError(f"Unknown product catalog adapter: {adapter}")
    return _catalog_instance


def reset_product_catalog():
    """Reset the product catalog singleton (useful for testing)."""
    global _catalog_instance
    _catalog_instance = None
