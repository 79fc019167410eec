"""Relation preload planning and execution."""

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from wireshape.core.exceptions import SpecError
from wireshape.stores.base import ObjectStore
from wireshape.structure import NestedStructure, StructureSpec, SupportsTransform

logger = logging.getLogger(__name__)


class _PreloadRelated:
    """Sentinel guard: delegate preload declarations to the nested transformer."""

    _instance: Optional["_PreloadRelated"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "PRELOAD_RELATED"

    def __reduce__(self) -> str:
        return "PRELOAD_RELATED"


PRELOAD_RELATED = _PreloadRelated()


class PreloadPlanner:
    """Computes and executes the relation paths to load before resolution.

    Declarations come from ``transformer.preload_relations()``: a sequence of
    relation names (always loaded) or a mapping ``{path: guard}``. Falsy
    guards are skipped. ``PRELOAD_RELATED`` pulls in the declarations of the
    nested transformer bound to the relation, prefixed with ``relation.``;
    when the nested transformer declares nothing the relation itself is
    loaded.

    Paths are de-duplicated in order of first discovery (depth first).
    """

    def __init__(self, store: ObjectStore):
        self._store = store

    def declared(
        self,
        transformer: SupportsTransform,
        spec: Optional[StructureSpec] = None,
    ) -> list[str]:
        """Return every declared relation path, ignoring what is already loaded.

        Raises:
            SpecError: If a declaration is malformed or ``PRELOAD_RELATED``
                names a key without a nested transformer.
        """
        paths: dict[str, None] = {}
        self._collect(transformer, spec, paths)
        return list(paths)

    def plan(
        self,
        objects: Sequence[Any],
        transformer: SupportsTransform,
        spec: Optional[StructureSpec] = None,
    ) -> list[str]:
        """Return declared paths not yet loaded on every non-null object."""
        targets = [obj for obj in objects if obj is not None]
        if not targets:
            return []
        return [
            path
            for path in self.declared(transformer, spec)
            if not all(self._store.is_relation_loaded(obj, path) for obj in targets)
        ]

    def execute(
        self,
        objects: Sequence[Any],
        transformer: SupportsTransform,
        spec: Optional[StructureSpec] = None,
    ) -> list[str]:
        """Plan and load relations in a single store call.

        Store errors propagate unmodified.

        Returns:
            The relation paths that were requested.
        """
        targets = [obj for obj in objects if obj is not None]
        paths = self.plan(targets, transformer, spec)
        if paths:
            logger.debug(
                f"Preloading {len(paths)} relation path(s) on {len(targets)} object(s)",
                extra={
                    "transformer": _transformer_name(transformer),
                    "context": {"paths": ",".join(paths)},
                },
            )
            self._store.load_relations(targets, paths)
        return paths

    def _collect(
        self,
        transformer: SupportsTransform,
        spec: Optional[StructureSpec],
        paths: dict[str, None],
    ) -> None:
        for relation, guard in _normalize_declarations(transformer):
            if guard is PRELOAD_RELATED:
                if spec is None:
                    spec = transformer.build_spec()
                rule = spec.nested_transformers().get(relation)
                if rule is None:
                    if not _renders(spec, relation):
                        # Omitted by a conditional or absent from this variant
                        logger.debug(
                            f"Skipping related preload '{relation}': not rendered",
                            extra={"transformer": _transformer_name(transformer)},
                        )
                        continue
                    raise SpecError(
                        f"Relation '{relation}' is preloaded as related but has no nested transformer",
                        context={
                            "transformer": _transformer_name(transformer),
                            "relation": relation,
                        },
                    )
                nested_paths: dict[str, None] = {}
                self._collect(rule.transformer, None, nested_paths)
                if not nested_paths:
                    paths.setdefault(relation)
                for nested_path in nested_paths:
                    paths.setdefault(f"{relation}.{nested_path}")
            elif guard:
                paths.setdefault(relation)


def _normalize_declarations(transformer: SupportsTransform) -> list[tuple[str, Any]]:
    declared = transformer.preload_relations()
    if not declared:
        return []
    if isinstance(declared, str):
        pairs = [(declared, True)]
    elif isinstance(declared, Mapping):
        pairs = list(declared.items())
    elif isinstance(declared, Sequence):
        pairs = [(relation, True) for relation in declared]
    else:
        raise SpecError(
            "Preload relations must be a sequence of names or a mapping of guards",
            context={
                "transformer": _transformer_name(transformer),
                "preload_type": type(declared).__name__,
            },
        )

    for relation, _ in pairs:
        if not isinstance(relation, str) or not relation or "" in relation.split("."):
            raise SpecError(
                f"Invalid relation path: {relation!r}",
                context={"transformer": _transformer_name(transformer)},
            )
    return pairs


def _renders(spec: StructureSpec, relation: str) -> bool:
    """True when any field of ``spec``, grouped ones included, reads ``relation``."""
    for key, rule in spec.items():
        if relation in (key, getattr(rule, "source", None)):
            return True
        if isinstance(rule, NestedStructure) and _renders(rule.spec, relation):
            return True
    return False


def _transformer_name(transformer: Any) -> str:
    return getattr(transformer, "name", type(transformer).__name__)
