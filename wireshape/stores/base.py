"""Object store protocol consumed by the preload planner.

The store owns the relation cache of source objects. The engine only asks
whether a relation path is loaded and requests loads; it never touches the
cache itself.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ObjectStore(Protocol):
    """Protocol for stores that can report and load object relations.

    Example:
        class MyStore:
            def is_relation_loaded(self, obj, path):
                return path in obj.loaded_relations

            def load_relations(self, objects, paths):
                for path in paths:
                    self._db.eager_load(objects, path)
    """

    def is_relation_loaded(self, obj: Any, path: str) -> bool:
        """Return True if the dot-delimited relation path is loaded on ``obj``."""
        ...

    def load_relations(self, objects: Sequence[Any], paths: Sequence[str]) -> None:
        """Eagerly load the relation paths on every object.

        Errors propagate to the caller unmodified.
        """
        ...
