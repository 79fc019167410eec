"""Structure rules describing how a single output key is produced."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

from wireshape.core.exceptions import FormatError, SpecError
from wireshape.formats import Formatter, get_format

if TYPE_CHECKING:
    from wireshape.structure.spec import StructureSpec


@runtime_checkable
class SupportsTransform(Protocol):
    """Protocol for objects usable as nested transformers."""

    def build_spec(self) -> "StructureSpec":
        """Build the structure spec for one transform pass."""
        ...

    def preload_relations(self) -> Any:
        """Return the declared preload relations."""
        ...


@dataclass(frozen=True)
class CopyField:
    """Copy a field; ``source`` defaults to the output key."""

    source: str | None = None


@dataclass(frozen=True)
class RenameField:
    """Copy a field stored under a different name on the source object."""

    source: str

    def __post_init__(self):
        if not isinstance(self.source, str) or not self.source:
            raise SpecError(
                "RenameField requires a non-empty source name",
                context={"source": self.source},
            )


@dataclass(frozen=True)
class NestedStructure:
    """Group fields of the same source object under one output key."""

    spec: "StructureSpec"


@dataclass(frozen=True)
class ValueMap:
    """Map a raw value through a literal table, falling back to ``default``."""

    mapping: Mapping[Any, Any]
    default: Any = None
    source: str | None = None

    def __post_init__(self):
        if not isinstance(self.mapping, Mapping):
            raise SpecError(
                "ValueMap 'mapping' must be a mapping",
                context={"mapping_type": type(self.mapping).__name__},
            )

    def apply(self, raw: Any) -> Any:
        if isinstance(raw, Hashable) and raw in self.mapping:
            return self.mapping[raw]
        return self.default


@dataclass(frozen=True)
class FormatRule:
    """Format a raw value with a registered formatter.

    The formatter is looked up when the rule is created, so unknown kinds
    and bad params fail before any object is transformed.
    """

    kind: str
    params: Mapping[str, Any] = field(default_factory=dict)
    source: str | None = None
    formatter: Formatter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.params, Mapping):
            raise SpecError(
                "FormatRule 'params' must be a mapping",
                context={"kind": self.kind, "params_type": type(self.params).__name__},
            )
        object.__setattr__(self, "formatter", get_format(self.kind, dict(self.params)))

    def apply(self, raw: Any) -> Any:
        if raw is None:
            return None
        try:
            return self.formatter(raw)
        except FormatError:
            raise
        except Exception as e:
            raise FormatError(
                f"Format '{self.kind}' failed",
                context={"kind": self.kind, "value": raw, "error": str(e)},
            ) from e


@dataclass(frozen=True)
class NestedTransformer:
    """Delegate a relation (object or collection) to another transformer."""

    transformer: SupportsTransform
    source: str | None = None

    def __post_init__(self):
        if not isinstance(self.transformer, SupportsTransform):
            raise SpecError(
                "NestedTransformer requires a transformer instance",
                context={"transformer_type": type(self.transformer).__name__},
            )


@dataclass(frozen=True)
class Conditional:
    """Include ``rule`` only when ``guard`` is truthy at spec-build time."""

    guard: Any
    rule: Any = None


Rule = Union[
    CopyField,
    RenameField,
    NestedStructure,
    ValueMap,
    FormatRule,
    NestedTransformer,
    Conditional,
]


def rename(source: str) -> RenameField:
    return RenameField(source)


def value_map(
    mapping: Mapping[Any, Any], default: Any = None, source: str | None = None
) -> ValueMap:
    return ValueMap(mapping, default=default, source=source)


def format_as(kind: str, source: str | None = None, **params: Any) -> FormatRule:
    return FormatRule(kind, params, source=source)


def date_format(pattern: str = "%Y-%m-%d", source: str | None = None) -> FormatRule:
    return FormatRule("date", {"format": pattern}, source=source)


def nested(transformer: SupportsTransform, source: str | None = None) -> NestedTransformer:
    return NestedTransformer(transformer, source=source)


def when(condition: Any, rule: Any = None) -> Conditional:
    """Include ``rule`` (a plain copy when omitted) only if ``condition`` holds."""
    return Conditional(bool(condition), CopyField() if rule is None else rule)


def group(structure: Any) -> NestedStructure:
    from wireshape.structure.spec import StructureSpec

    return NestedStructure(StructureSpec.build(structure))
