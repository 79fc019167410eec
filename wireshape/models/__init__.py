"""Definition models and loading for YAML-declared transformers."""

from wireshape.models.definition import (
    DefinitionFile,
    FieldDefinition,
    FieldSpec,
    TransformerDefinition,
)

__all__ = [
    "DefinitionFile",
    "FieldDefinition",
    "FieldSpec",
    "TransformerDefinition",
]
