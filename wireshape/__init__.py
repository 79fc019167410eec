"""Wireshape - declarative object-to-output transformation.

Transformers describe how domain objects look on the wire; the engine
resolves them into plain dicts and lists, preloading relations first.
"""

__version__ = "0.1.0"

# Public API
from wireshape.api import from_yaml, render_from_yaml, transform

# Core classes
from wireshape.core.container import Container
from wireshape.core.engine import TransformEngine
from wireshape.core.preload import PRELOAD_RELATED, PreloadPlanner

# Exceptions
from wireshape.core.exceptions import (
    ConstructionError,
    DefinitionError,
    FormatError,
    SpecError,
    StoreError,
    WireshapeError,
)
from wireshape.formats import register_format
from wireshape.stores import InMemoryStore, ObjectStore, SQLAlchemyStore
from wireshape.structure import (
    StructureSpec,
    date_format,
    format_as,
    group,
    nested,
    rename,
    value_map,
    when,
)
from wireshape.transformers import DeclarativeTransformer, Transformer, TransformerCatalog

__all__ = [
    # Version
    "__version__",
    # Public API
    "transform",
    "from_yaml",
    "render_from_yaml",
    # Core classes
    "Transformer",
    "DeclarativeTransformer",
    "TransformerCatalog",
    "TransformEngine",
    "PreloadPlanner",
    "PRELOAD_RELATED",
    "Container",
    "StructureSpec",
    "ObjectStore",
    "InMemoryStore",
    "SQLAlchemyStore",
    "register_format",
    # Structure helpers
    "rename",
    "value_map",
    "format_as",
    "date_format",
    "nested",
    "when",
    "group",
    # Exceptions
    "WireshapeError",
    "SpecError",
    "ConstructionError",
    "FormatError",
    "StoreError",
    "DefinitionError",
]
