"""Public Python API for wireshape package.

This module provides the main entry points for transforming objects and
loading YAML-declared transformers.
"""

from typing import Any, Dict, Optional

from wireshape.core.engine import TransformEngine
from wireshape.models.loader import load_definitions
from wireshape.stores.base import ObjectStore
from wireshape.transformers.declarative import TransformerCatalog


def transform(data: Any, transformer: Any, store: Optional[ObjectStore] = None) -> Any:
    """Transform a source object or collection into a plain structure.

    This is the single entry point of the engine:
    1. Runs the before-hook (single or collection)
    2. Preloads declared relations through the object store
    3. Resolves the transformer's structure for each object
    4. Orders collection results when the transformer declares order_by
    5. Runs the after-hook

    Args:
        data: Source object, collection of source objects, or None
        transformer: Transformer instance (full or minimal variant)
        store: Object store used for relation preloading (default: InMemoryStore)

    Returns:
        A dict, a list of dicts, or the transformer's null-state for None

    Raises:
        SpecError: If the transformer's structure is invalid
        FormatError: If a value cannot be formatted
        Any error raised by the store while loading relations

    Example:
        >>> from wireshape import Transformer, transform
        >>> class UserTransformer(Transformer):
        ...     def structure(self):
        ...         return ["id", "fullname"]
        ...     def get_fullname(self, user):
        ...         return f"{user['first_name']} {user['last_name']}"
        >>> transform({"id": 1, "first_name": "A", "last_name": "B"}, UserTransformer())
        {'id': 1, 'fullname': 'A B'}
    """
    return TransformEngine(store).transform(data, transformer)


def from_yaml(path: str, cli_vars: Dict[str, str] | None = None) -> TransformerCatalog:
    """Load transformer definitions from a YAML file.

    Args:
        path: Path to definitions YAML file
        cli_vars: Values for {{ var('...') }} templates

    Returns:
        Validated TransformerCatalog

    Raises:
        DefinitionError: If loading or validation fails

    Example:
        >>> catalog = from_yaml(
        ...     "examples/blog/transformers.yaml", cli_vars={"show_emails": "false"}
        ... )
        >>> catalog.names()
        ['author', 'comment', 'post']
    """
    return load_definitions(path, cli_vars)


def render_from_yaml(
    path: str,
    name: str,
    data: Any,
    minimal: bool = False,
    cli_vars: Dict[str, str] | None = None,
    store: Optional[ObjectStore] = None,
) -> Any:
    """Load definitions and transform data with one of them.

    Convenience function that combines `from_yaml()` and `transform()`.

    Args:
        path: Path to definitions YAML file
        name: Name of the transformer definition to use
        data: Source object, collection, or None
        minimal: Use the minimal variant
        cli_vars: Values for {{ var('...') }} templates
        store: Object store used for relation preloading

    Raises:
        DefinitionError: If loading fails or the name is unknown
        SpecError: If the structure is invalid
        FormatError: If a value cannot be formatted
    """
    catalog = from_yaml(path, cli_vars)
    return transform(data, catalog.create(name, minimal=minimal), store)
