"""Structure specs and the rules they are made of."""

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
    date_format,
    format_as,
    group,
    nested,
    rename,
    value_map,
    when,
)
from wireshape.structure.spec import StructureSpec

__all__ = [
    "StructureSpec",
    "Rule",
    "SupportsTransform",
    "CopyField",
    "RenameField",
    "NestedStructure",
    "ValueMap",
    "FormatRule",
    "NestedTransformer",
    "Conditional",
    "rename",
    "value_map",
    "format_as",
    "date_format",
    "nested",
    "when",
    "group",
]
