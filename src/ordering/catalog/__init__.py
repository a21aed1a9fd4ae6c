"""Catalog adapter abstraction — resolves product ids to names and prices."""

import os

_catalog_instance = None


def get_catalog():
    """Return the configured catalog adapter (singleton).

    Uses the in-memory café menu by default. Configure via the
    CATALOG_ADAPTER environment variable.
    """
    global _catalog_instance
    if _catalog_instance is None:
        adapter = os.environ.get("CATALOG_ADAPTER", "memory")
        if adapter == "memory":
            from ordering.catalog.memory_adapter import MemoryCatalog

            _catalog_instance = MemoryCatalog()
        else:
            raise ValueError(f"Unknown catalog adapter: {adapter}")
    return _catalog_instance


def reset_catalog():
    """Reset the catalog singleton (useful for testing)."""
    global _catalog_instance
    _catalog_instance = None
