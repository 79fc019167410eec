"""Definition models for transformers declared in YAML."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FieldDefinition(BaseModel):
    """
    Definition of a single output field.

    At most one of ``map``, ``format``, ``transformer`` and ``fields`` may be
    given; with none of them the field is a plain (possibly renamed) copy.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    source: Optional[str] = Field(
        default=None, description="Source field name (defaults to the output key)"
    )
    value_map: Optional[Dict[Any, Any]] = Field(
        default=None, alias="map", description="Literal value mapping"
    )
    default: Any = Field(default=None, description="Result for values missing from 'map'")
    format: Optional[str] = Field(default=None, description="Registered format kind")
    params: Dict[str, Any] = Field(default_factory=dict, description="Format parameters")
    transformer: Optional[str] = Field(
        default=None, description="Name of the nested transformer definition"
    )
    minimal: bool = Field(
        default=False, description="Use the nested transformer's minimal variant"
    )
    nested_fields: Optional[Dict[str, "FieldSpec"]] = Field(
        default=None,
        alias="fields",
        description="Fields grouped under this key, read from the same object",
    )
    when: bool = Field(default=True, description="Include the field only when true")

    @model_validator(mode="after")
    def validate_kind(self):
        """Validate that the field declares a single kind of rule."""
        kinds = [
            name
            for name, value in (
                ("map", self.value_map),
                ("format", self.format),
                ("transformer", self.transformer),
                ("fields", self.nested_fields),
            )
            if value is not None
        ]
        if len(kinds) > 1:
            raise ValueError(f"field may declare only one of {kinds}")
        if self.nested_fields is not None and self.source:
            raise ValueError("'fields' are read from the same object and take no 'source'")
        if self.params and self.format is None:
            raise ValueError("'params' require 'format'")
        if self.minimal and self.transformer is None:
            raise ValueError("'minimal' requires 'transformer'")
        return self


FieldSpec = Union[None, str, FieldDefinition]

FieldDefinition.model_rebuild()


class TransformerDefinition(BaseModel):
    """Declarative transformer: structure variants, preloads and ordering."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    description: Optional[str] = Field(default=None, description="Free-form description")
    field_specs: Dict[str, FieldSpec] = Field(
        alias="fields", description="Output fields of the full structure, in order"
    )
    minimal: Optional[List[str]] = Field(
        default=None, description="Output fields of the minimal structure"
    )
    preload: Union[List[str], Dict[str, Union[bool, Literal["related"]]]] = Field(
        default_factory=dict,
        description="Relations to preload; 'related' delegates to the nested transformer",
    )
    order_by: Optional[Union[str, List[str]]] = Field(
        default=None, description="Ordering field, or [field, direction]"
    )
    null_state: Any = Field(default=None, description="Result for a missing object")

    @field_validator("field_specs")
    @classmethod
    def validate_fields(cls, v):
        """Validate that at least one field is declared."""
        if not v:
            raise ValueError("at least one field is required")
        return v

    @model_validator(mode="after")
    def validate_minimal(self):
        """Validate that minimal fields are a subset of the full fields."""
        if self.minimal is not None:
            unknown = [name for name in self.minimal if name not in self.field_specs]
            if unknown:
                raise ValueError(f"minimal fields not declared in 'fields': {unknown}")
        return self


class DefinitionFile(BaseModel):
    """Top-level document of a definitions file."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, description="Name of the definition set")
    formats: List[str] = Field(
        default_factory=list, description="Modules registering custom formats"
    )
    transformers: Dict[str, TransformerDefinition] = Field(
        description="Transformer definitions by name"
    )

    @classmethod
    def from_dict(cls, data: dict) -> "DefinitionFile":
        """Create DefinitionFile from dictionary (after template rendering)."""
        return cls(**data)
