"""Structure specs: ordered output-key-to-rule pairs for one transform variant."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

from wireshape.core.exceptions import SpecError
from wireshape.structure.rules import (
    Conditional,
    CopyField,
    FormatRule,
    NestedStructure,
    NestedTransformer,
    RenameField,
    Rule,
    SupportsTransform,
    ValueMap,
)

_RULE_TYPES = (
    CopyField,
    RenameField,
    NestedStructure,
    ValueMap,
    FormatRule,
    NestedTransformer,
)


class StructureSpec:
    """Immutable, ordered mapping from output key to rule.

    Conditionals are settled on construction: a rule whose guard is falsy
    is dropped and its key recorded in ``omitted``; a truthy guard is
    replaced by the rule it wraps.

    Shorthand accepted by ``build``:
        ["id", "name"]                    -> copy fields
        {"name": "first_name"}            -> rename
        {"contact": {"email": None}}      -> nested structure on the same object
        {"posts": PostTransformer()}      -> nested transformer
        {"status": value_map({...})}      -> any explicit rule
    """

    def __init__(self, pairs: Iterable[tuple[str, Any]] = ()):
        entries: list[tuple[str, Rule]] = []
        declared: set[str] = set()
        omitted: set[str] = set()

        for key, value in pairs:
            if not isinstance(key, str) or not key:
                raise SpecError(
                    "Output keys must be non-empty strings",
                    context={"key": key},
                )
            if key in declared:
                raise SpecError(
                    f"Duplicate output key: '{key}'",
                    context={"key": key},
                )
            declared.add(key)

            rule = _normalize_rule(key, value)
            while isinstance(rule, Conditional):
                if not rule.guard:
                    omitted.add(key)
                    rule = None
                    break
                rule = _normalize_rule(key, rule.rule)
            if rule is None:
                continue
            entries.append((key, rule))

        self._entries: tuple[tuple[str, Rule], ...] = tuple(entries)
        self._index: dict[str, Rule] = dict(entries)
        self._omitted = frozenset(omitted)

    @classmethod
    def build(cls, structure: Any) -> "StructureSpec":
        """Build a spec from shorthand (mapping or sequence) or return a spec as-is.

        Raises:
            SpecError: If the shorthand is malformed.
        """
        if isinstance(structure, StructureSpec):
            return structure
        if structure is None:
            return cls()
        if isinstance(structure, Mapping):
            return cls(structure.items())
        if isinstance(structure, Sequence) and not isinstance(structure, (str, bytes)):
            return cls(_sequence_pairs(structure))
        raise SpecError(
            "Structure must be a mapping or a sequence",
            context={"structure_type": type(structure).__name__},
        )

    @property
    def omitted(self) -> frozenset[str]:
        """Keys declared behind a false conditional."""
        return self._omitted

    def keys(self) -> list[str]:
        return [key for key, _ in self._entries]

    def items(self) -> tuple[tuple[str, Rule], ...]:
        return self._entries

    def get(self, key: str, default: Any = None) -> Rule | Any:
        return self._index.get(key, default)

    def nested_transformers(self) -> dict[str, NestedTransformer]:
        """Return nested transformer rules keyed by the relation they read.

        Nested structures are searched too: their fields read the same
        object, so relation names are not prefixed. The first rule in spec
        order wins for a relation rendered more than once.
        """
        found: dict[str, NestedTransformer] = {}
        for key, rule in self._entries:
            if isinstance(rule, NestedTransformer):
                found.setdefault(rule.source or key, rule)
            elif isinstance(rule, NestedStructure):
                for relation, nested in rule.spec.nested_transformers().items():
                    found.setdefault(relation, nested)
        return found

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StructureSpec({self.keys()!r})"


def _sequence_pairs(structure: Sequence[Any]) -> Iterator[tuple[str, Any]]:
    for item in structure:
        if isinstance(item, str):
            yield item, None
        elif isinstance(item, (tuple, list)) and len(item) == 2:
            yield item[0], item[1]
        else:
            raise SpecError(
                "Sequence structure entries must be field names or (key, rule) pairs",
                context={"entry": item},
            )


def _normalize_rule(key: str, value: Any) -> Rule:
    if value is None:
        return CopyField()
    if isinstance(value, (*_RULE_TYPES, Conditional)):
        return value
    if isinstance(value, str):
        return CopyField() if value == key else RenameField(value)
    if isinstance(value, (Mapping, list, tuple)):
        return NestedStructure(StructureSpec.build(value))
    if isinstance(value, SupportsTransform):
        return NestedTransformer(value)
    raise SpecError(
        f"Unsupported rule for output key '{key}'",
        context={"key": key, "rule_type": type(value).__name__},
    )
