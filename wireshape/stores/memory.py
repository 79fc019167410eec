"""Object store for plain mappings and in-memory objects."""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional

from wireshape.core.resolver import is_collection

logger = logging.getLogger(__name__)

RelationLoader = Callable[[list[Any], list[str]], None]

_MISSING = object()


class InMemoryStore:
    """Store for source objects that already hold their relations.

    A relation path counts as loaded when every segment is present as a
    mapping key or attribute, across every element of collection-valued
    segments. Loading is delegated to an optional ``loader`` callback; with
    no loader, load requests are logged and ignored.
    """

    def __init__(self, loader: Optional[RelationLoader] = None):
        self._loader = loader

    def is_relation_loaded(self, obj: Any, path: str) -> bool:
        return _has_path(obj, path.split("."))

    def load_relations(self, objects: Sequence[Any], paths: Sequence[str]) -> None:
        if self._loader is None:
            logger.debug(
                f"No relation loader configured; ignoring {len(paths)} relation path(s)",
                extra={"context": {"paths": ",".join(paths)}},
            )
            return
        self._loader(list(objects), list(paths))


def _has_path(value: Any, segments: list[str]) -> bool:
    if not segments or value is None:
        return True
    if is_collection(value):
        return all(_has_path(item, segments) for item in value)

    head, rest = segments[0], segments[1:]
    if isinstance(value, Mapping):
        child = value[head] if head in value else _MISSING
    else:
        child = getattr(value, head, _MISSING)
    if child is _MISSING:
        return False
    return _has_path(child, rest)
