"""Transformers built from YAML definitions."""

from collections.abc import Mapping
from typing import Any, Optional

from wireshape.core.exceptions import DefinitionError
from wireshape.core.ordering import parse_ordering
from wireshape.core.preload import PRELOAD_RELATED, PreloadPlanner
from wireshape.models.definition import (
    DefinitionFile,
    FieldDefinition,
    FieldSpec,
    TransformerDefinition,
)
from wireshape.stores.memory import InMemoryStore
from wireshape.structure import (
    Conditional,
    CopyField,
    FormatRule,
    NestedStructure,
    NestedTransformer,
    RenameField,
    Rule,
    StructureSpec,
    ValueMap,
)
from wireshape.transformers.base import Transformer

_RELATED = "related"


class DeclarativeTransformer(Transformer):
    """Transformer whose structure comes from a TransformerDefinition.

    Nested transformer references are resolved by name through the catalog
    each time the spec is built.
    """

    def __init__(
        self,
        name: str,
        definition: TransformerDefinition,
        catalog: "TransformerCatalog",
        *,
        minimal: bool = False,
    ):
        self._name = name
        self._definition = definition
        self._catalog = catalog
        super().__init__(minimal=minimal)
        self.order_by = definition.order_by
        self.null_state = definition.null_state

    @property
    def name(self) -> str:
        return self._name

    @property
    def definition(self) -> TransformerDefinition:
        return self._definition

    def structure(self) -> StructureSpec:
        return StructureSpec(self._rules(self._definition.field_specs))

    def minimal_structure(self) -> StructureSpec:
        if self._definition.minimal is None:
            return self.structure()
        selected = {
            key: self._definition.field_specs[key] for key in self._definition.minimal
        }
        return StructureSpec(self._rules(selected))

    def preload_relations(self) -> Any:
        preload = self._definition.preload
        if isinstance(preload, Mapping):
            return {
                relation: PRELOAD_RELATED if guard == _RELATED else guard
                for relation, guard in preload.items()
            }
        return list(preload)

    def _rules(self, fields: Mapping[str, FieldSpec]) -> list[tuple[str, Rule]]:
        return [(key, self._rule(key, field)) for key, field in fields.items()]

    def _rule(self, key: str, field: FieldSpec) -> Rule:
        if field is None:
            return CopyField()
        if isinstance(field, str):
            return CopyField() if field == key else RenameField(field)

        rule: Rule
        if field.nested_fields is not None:
            rule = NestedStructure(StructureSpec(self._rules(field.nested_fields)))
        elif field.transformer is not None:
            rule = NestedTransformer(
                self._catalog.create(field.transformer, minimal=field.minimal),
                source=field.source,
            )
        elif field.value_map is not None:
            rule = ValueMap(field.value_map, default=field.default, source=field.source)
        elif field.format is not None:
            rule = FormatRule(field.format, field.params, source=field.source)
        else:
            rule = CopyField(field.source)

        if not field.when:
            return Conditional(False, rule)
        return rule


class TransformerCatalog:
    """Named transformer definitions that can reference each other."""

    def __init__(self, definitions: DefinitionFile | Mapping[str, TransformerDefinition]):
        if isinstance(definitions, DefinitionFile):
            self.name = definitions.name
            self._definitions = dict(definitions.transformers)
        else:
            self.name = None
            self._definitions = dict(definitions)

    def names(self) -> list[str]:
        return list(self._definitions)

    def get_definition(self, name: str) -> TransformerDefinition:
        """Return a definition by name.

        Raises:
            DefinitionError: If no definition has that name.
        """
        definition = self._definitions.get(name)
        if definition is None:
            raise DefinitionError(
                f"Unknown transformer: '{name}'",
                context={"transformer": name, "available": ", ".join(self.names()) or "(none)"},
            )
        return definition

    def create(self, name: str, minimal: bool = False) -> DeclarativeTransformer:
        return DeclarativeTransformer(name, self.get_definition(name), self, minimal=minimal)

    def validate(self) -> None:
        """Check references, cycles, specs, ordering and preloads of every variant.

        Raises:
            DefinitionError: On unknown references or reference cycles.
            SpecError: If a definition builds an invalid spec.
        """
        for name in self._definitions:
            for minimal in (False, True):
                self._check_cycles((name, minimal), [])

        planner = PreloadPlanner(InMemoryStore())
        for name in self._definitions:
            for minimal in (False, True):
                transformer = self.create(name, minimal=minimal)
                spec = transformer.build_spec()
                parse_ordering(transformer.order_by, spec)
                planner.declared(transformer, spec)

    def _check_cycles(self, node: tuple[str, bool], path: list[tuple[str, bool]]) -> None:
        if node in path:
            cycle = " -> ".join(_node_label(n) for n in path[path.index(node):] + [node])
            raise DefinitionError(
                f"Cycle detected in transformer references: {cycle}",
                context={"transformer": node[0]},
            )
        for reference in self._references(*node):
            self._check_cycles(reference, path + [node])

    def _references(self, name: str, minimal: bool) -> list[tuple[str, bool]]:
        definition = self.get_definition(name)
        fields = definition.field_specs
        if minimal and definition.minimal is not None:
            fields = {key: fields[key] for key in definition.minimal}
        return _field_references(fields)


def _field_references(fields: Mapping[str, FieldSpec]) -> list[tuple[str, bool]]:
    references = []
    for field in fields.values():
        if not isinstance(field, FieldDefinition) or not field.when:
            continue
        if field.transformer is not None:
            references.append((field.transformer, field.minimal))
        elif field.nested_fields is not None:
            references.extend(_field_references(field.nested_fields))
    return references


def _node_label(node: tuple[str, bool]) -> str:
    name, minimal = node
    return f"{name} (minimal)" if minimal else name
