"""Core module for wireshape package.

Only leaf modules are re-exported here; the engine and planner import the
structure package, which itself depends on ``wireshape.core.exceptions``.
"""

from wireshape.core.container import Container
from wireshape.core.exceptions import (
    ConstructionError,
    DefinitionError,
    FormatError,
    SpecError,
    StoreError,
    WireshapeError,
)
from wireshape.core.resolver import ValueResolver, is_collection

__all__ = [
    "Container",
    "ValueResolver",
    "is_collection",
    "WireshapeError",
    "SpecError",
    "ConstructionError",
    "FormatError",
    "StoreError",
    "DefinitionError",
]
