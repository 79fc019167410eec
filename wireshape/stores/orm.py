"""SQLAlchemy-backed object store using select-in eager loading."""

import logging
from collections.abc import Sequence
from typing import Any

try:
    from sqlalchemy import inspect, select, tuple_
    from sqlalchemy.orm import Session, selectinload
except ImportError:
    inspect = None  # type: ignore
    select = None  # type: ignore
    tuple_ = None  # type: ignore
    Session = None  # type: ignore
    selectinload = None  # type: ignore

from wireshape.core.exceptions import StoreError
from wireshape.core.resolver import is_collection

logger = logging.getLogger(__name__)


class SQLAlchemyStore:
    """Object store for SQLAlchemy ORM instances.

    Loaded-ness comes from the instance state (``inspect(obj).unloaded``).
    Loading issues one ``SELECT`` per mapped class and chunk of primary keys,
    with a chained ``selectinload`` option per relation path, so a batch of
    N objects costs a constant number of queries per path depth.

    Only unloaded relationship attributes are filled in. Column values and
    relations already loaded on the instances are left as they are, and
    pending changes are not flushed.
    """

    DEFAULT_CHUNK_SIZE = 500

    def __init__(self, session: "Session", chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize SQLAlchemyStore.

        Args:
            session: Session the source objects are attached to.
            chunk_size: Maximum number of primary keys per query.

        Raises:
            ImportError: If SQLAlchemy is not installed (install with: pip install wireshape[sqlalchemy])
        """
        if select is None:
            raise ImportError(
                "SQLAlchemyStore requires sqlalchemy. "
                "Install it with: pip install wireshape[sqlalchemy]"
            )
        if chunk_size <= 0:
            raise ValueError("chunk_size must be greater than 0")
        self._session = session
        self._chunk_size = chunk_size

    def is_relation_loaded(self, obj: Any, path: str) -> bool:
        return self._is_loaded(obj, path.split("."))

    def load_relations(self, objects: Sequence[Any], paths: Sequence[str]) -> None:
        # Pending edits on the source objects must neither be flushed nor overwritten
        with self._session.no_autoflush:
            self._load([obj for obj in objects if obj is not None], list(paths))

    def _load(self, instances: list[Any], paths: list[str]) -> None:
        by_class: dict[type, list[Any]] = {}
        for obj in instances:
            by_class.setdefault(type(obj), []).append(obj)

        for cls, group in by_class.items():
            mapper = inspect(cls)
            options = [self._loader_option(mapper, path) for path in paths]
            identities = [mapper.primary_key_from_instance(obj) for obj in group]

            for start in range(0, len(identities), self._chunk_size):
                chunk = identities[start : start + self._chunk_size]
                stmt = select(cls).where(self._identity_criterion(mapper, chunk)).options(*options)
                logger.debug(
                    f"Loading {len(paths)} relation path(s) for {len(chunk)} {cls.__name__} instance(s)",
                    extra={"context": {"paths": ",".join(paths)}},
                )
                self._session.execute(stmt).scalars().all()

        # Chained options stop at relations that were already loaded; continue below them
        remaining: dict[str, list[str]] = {}
        for path in paths:
            head, _, rest = path.partition(".")
            if rest:
                remaining.setdefault(head, []).append(rest)

        for head, rests in remaining.items():
            children = self._loaded_children(instances, head)
            pending = [
                rest
                for rest in rests
                if not all(self._is_loaded(child, rest.split(".")) for child in children)
            ]
            if pending:
                self._load(children, pending)

    def _loaded_children(self, instances: list[Any], name: str) -> list[Any]:
        children: dict[int, Any] = {}
        for obj in instances:
            state = inspect(obj)
            if name in state.unloaded:
                continue
            value = state.attrs[name].loaded_value
            for child in value if is_collection(value) else [value]:
                if child is not None:
                    children.setdefault(id(child), child)
        return list(children.values())

    def _is_loaded(self, value: Any, segments: list[str]) -> bool:
        if value is None or not segments:
            return True
        if is_collection(value):
            return all(self._is_loaded(item, segments) for item in value)

        head, rest = segments[0], segments[1:]
        state = inspect(value)
        if head not in state.mapper.relationships:
            raise StoreError(
                f"'{head}' is not a relationship of {state.mapper.class_.__name__}",
                context={"relation": head, "model": state.mapper.class_.__name__},
            )
        if head in state.unloaded:
            return False
        return self._is_loaded(state.attrs[head].loaded_value, rest)

    def _loader_option(self, mapper: Any, path: str) -> Any:
        option = None
        current = mapper
        for name in path.split("."):
            if name not in current.relationships:
                raise StoreError(
                    f"'{name}' is not a relationship of {current.class_.__name__}",
                    context={"path": path, "model": current.class_.__name__},
                )
            attribute = getattr(current.class_, name)
            option = selectinload(attribute) if option is None else option.selectinload(attribute)
            current = current.relationships[name].mapper
        return option

    def _identity_criterion(self, mapper: Any, identities: list[tuple[Any, ...]]) -> Any:
        primary_key = mapper.primary_key
        if len(primary_key) == 1:
            return primary_key[0].in_([identity[0] for identity in identities])
        return tuple_(*primary_key).in_([tuple(identity) for identity in identities])
