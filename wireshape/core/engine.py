"""Transform engine: runs transformers over single objects and collections."""

import logging
from enum import Enum
from typing import Any, Optional

from wireshape.core.exceptions import FormatError
from wireshape.core.ordering import apply_ordering, parse_ordering
from wireshape.core.preload import PreloadPlanner
from wireshape.core.resolver import ValueResolver, is_collection
from wireshape.stores.base import ObjectStore
from wireshape.stores.memory import InMemoryStore
from wireshape.structure import (
    CopyField,
    FormatRule,
    NestedStructure,
    NestedTransformer,
    RenameField,
    Rule,
    StructureSpec,
    ValueMap,
)

logger = logging.getLogger(__name__)


class TransformState(str, Enum):
    """Stages of one transform invocation, entered strictly in order."""

    CREATED = "created"
    PRE_PROCESSED = "pre_processed"
    PRELOADED = "preloaded"
    RESOLVED = "resolved"
    ORDERED = "ordered"
    POST_PROCESSED = "post_processed"
    DONE = "done"


class TransformEngine:
    """Turns source objects into plain dict/list trees.

    The engine holds no mutable state of its own; the only shared resource
    is the store's relation cache. One engine may serve concurrent
    invocations over disjoint objects if the store allows it.
    """

    def __init__(self, store: Optional[ObjectStore] = None):
        self._store = store if store is not None else InMemoryStore()
        self._planner = PreloadPlanner(self._store)

    @property
    def store(self) -> ObjectStore:
        return self._store

    @property
    def planner(self) -> PreloadPlanner:
        return self._planner

    def transform(self, data: Any, transformer: Any) -> Any:
        """Transform a source object, a collection of them, or ``None``.

        Args:
            data: Source object, collection of source objects, or None.
            transformer: Transformer instance (full or minimal variant).

        Returns:
            A dict for a single object, a list for a collection, or the
            transformer's null-state for ``None``.

        Raises:
            SpecError: If the transformer's structure is invalid.
            FormatError: If a format rule cannot format a value.
        """
        if data is None:
            return transformer.null_state

        run = _TransformPass(self, transformer)
        if is_collection(data):
            return run.collection(list(data))
        return run.single(data)


class _TransformPass:
    """One invocation of a transformer: spec, resolver and state."""

    def __init__(self, engine: TransformEngine, transformer: Any):
        self.engine = engine
        self.transformer = transformer
        self.state = TransformState.CREATED
        self.spec = transformer.build_spec()
        self.ordering = parse_ordering(transformer.order_by, self.spec)
        self.resolver = ValueResolver(transformer.accessors())

    def single(self, obj: Any) -> Any:
        self._log_start("single", 1)

        obj = self.transformer.before_transform(obj)
        self._advance(TransformState.PRE_PROCESSED)
        if obj is None:
            self._advance(TransformState.DONE)
            return self.transformer.null_state

        self.engine.planner.execute([obj], self.transformer, self.spec)
        self._advance(TransformState.PRELOADED)

        result = self.resolve(obj, self.spec)
        self._advance(TransformState.RESOLVED)
        self._advance(TransformState.ORDERED)

        result = self.transformer.after_transform(result, obj)
        self._advance(TransformState.POST_PROCESSED)
        self._advance(TransformState.DONE)
        return result

    def collection(self, objects: list[Any]) -> list[Any]:
        self._log_start("collection", len(objects))

        objects = list(self.transformer.before_collection(objects))
        self._advance(TransformState.PRE_PROCESSED)

        self.engine.planner.execute(objects, self.transformer, self.spec)
        self._advance(TransformState.PRELOADED)

        results = [self._element(obj) for obj in objects]
        self._advance(TransformState.RESOLVED)

        results = apply_ordering(results, self.ordering, self.transformer.name)
        self._advance(TransformState.ORDERED)

        results = self.transformer.after_collection(results, objects)
        self._advance(TransformState.POST_PROCESSED)
        self._advance(TransformState.DONE)
        return results

    def _element(self, obj: Any) -> Any:
        if obj is None:
            return self.transformer.null_state
        obj = self.transformer.before_transform(obj)
        if obj is None:
            return self.transformer.null_state
        result = self.resolve(obj, self.spec)
        return self.transformer.after_transform(result, obj)

    def resolve(self, obj: Any, spec: StructureSpec) -> dict[str, Any]:
        """Resolve every rule of ``spec`` against ``obj``, in spec order."""
        return {key: self._resolve_rule(obj, key, rule) for key, rule in spec.items()}

    def _resolve_rule(self, obj: Any, key: str, rule: Rule) -> Any:
        if isinstance(rule, (CopyField, RenameField)):
            return self.resolver.resolve(obj, key, rule.source)

        if isinstance(rule, NestedStructure):
            return self.resolve(obj, rule.spec)

        if isinstance(rule, ValueMap):
            return rule.apply(self.resolver.resolve(obj, key, rule.source))

        if isinstance(rule, FormatRule):
            raw = self.resolver.resolve(obj, key, rule.source)
            try:
                return rule.apply(raw)
            except FormatError as e:
                e.context.setdefault("key", key)
                e.context.setdefault("transformer", self.transformer.name)
                raise

        if isinstance(rule, NestedTransformer):
            related = self.resolver.resolve(obj, key, rule.source)
            return self.engine.transform(related, rule.transformer)

        raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

    def _advance(self, state: TransformState) -> None:
        self.state = state
        logger.debug(
            f"Transform state -> {state.value}",
            extra={"transformer": self.transformer.name},
        )

    def _log_start(self, mode: str, count: int) -> None:
        logger.debug(
            f"Transforming {count} object(s) with {len(self.spec)} output key(s)",
            extra={"transformer": self.transformer.name, "mode": mode},
        )
