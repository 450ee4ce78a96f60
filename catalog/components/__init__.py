"""Component catalog: records, equivalence sets and ranked search."""

from flask import current_app

from .memory_store import InMemoryComponentStore
from .models import STANDARD_CATEGORIES, Component, ComponentRecord, is_standard_category
from .sql_store import SqlComponentStore
from .store import Commit, ComponentStore, Discard, EditResult

EXTENSION_KEY = "component_store"

BACKENDS = {
    "memory": InMemoryComponentStore,
    "sql": SqlComponentStore,
}


def build_store(backend: str) -> ComponentStore:
    """Instantiate the store backend named in ``COMPONENT_STORE``."""
    try:
        factory = BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"Unknown COMPONENT_STORE {backend!r}, expected one of {sorted(BACKENDS)}"
        ) from None
    return factory()


def get_store() -> ComponentStore:
    """Store registered on the current application."""
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "BACKENDS",
    "Commit",
    "Component",
    "ComponentRecord",
    "ComponentStore",
    "Discard",
    "EditResult",
    "InMemoryComponentStore",
    "STANDARD_CATEGORIES",
    "SqlComponentStore",
    "build_store",
    "get_store",
    "is_standard_category",
]
