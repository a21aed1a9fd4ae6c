"""Courier directory abstraction — resolves courier ids to display names."""

import os

_directory_instance = None


def get_courier_directory():
    """Return the configured courier directory (singleton).

    Configure via the COURIER_DIRECTORY_ADAPTER environment variable.
    """
    global _directory_instance
    if _directory_instance is None:
        adapter = os.environ.get("COURIER_DIRECTORY_ADAPTER", "memory")
        if adapter == "memory":
            from ordering.couriers.memory_adapter import MemoryCourierDirectory

            _directory_instance = MemoryCourierDirectory()
        else:
            raise ValueError(f"Unknown courier directory adapter: {adapter}")
    return _directory_instance


def reset_courier_directory():
    """Reset the courier directory singleton (useful for testing)."""
    global _directory_instance
    _directory_instance = None
