"""Object stores: the relation-loading boundary of the engine."""

from wireshape.stores.base import ObjectStore
from wireshape.stores.memory import InMemoryStore, RelationLoader
from wireshape.stores.orm import SQLAlchemyStore

__all__ = [
    "ObjectStore",
    "InMemoryStore",
    "RelationLoader",
    "SQLAlchemyStore",
]
