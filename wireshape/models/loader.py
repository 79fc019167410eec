"""Definition loader with YAML parsing, templates and validation."""

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from wireshape.core.exceptions import DefinitionError, SpecError
from wireshape.formats.loader import load_custom_formats
from wireshape.models.definition import DefinitionFile
from wireshape.models.templates import render_templates
from wireshape.transformers.declarative import TransformerCatalog


def load_definitions(path: str, cli_vars: Dict[str, str] | None = None) -> TransformerCatalog:
    """
    Load transformer definitions from a YAML file.

    Templates are rendered first, custom format modules listed under
    ``formats`` are imported, then every definition is validated and built
    once so that invalid specs fail here rather than mid-transform.

    Args:
        path: Path to definitions YAML file
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        Validated TransformerCatalog

    Raises:
        DefinitionError: If the file is missing, invalid YAML, fails validation,
            references unknown transformers, or contains reference cycles
    """
    definitions_path = Path(path)
    if not definitions_path.exists():
        raise DefinitionError(f"Definitions file not found: {path}")

    raw = _read_yaml(definitions_path)
    raw = render_templates(raw, cli_vars)

    try:
        definition_file = DefinitionFile.from_dict(raw)
    except Exception as e:
        raise DefinitionError(
            f"Definitions validation failed: {e}", context={"path": str(path)}
        ) from e

    if definition_file.formats:
        base_dir = definitions_path.parent
        resolved = [
            str((base_dir / p).resolve()) if p.endswith(".py") and not os.path.isabs(p) else p
            for p in definition_file.formats
        ]
        load_custom_formats(resolved)

    catalog = TransformerCatalog(definition_file)
    try:
        catalog.validate()
    except SpecError as e:
        raise DefinitionError(
            f"Invalid transformer structure: {e}", context={"path": str(path)}
        ) from e
    return catalog


def _read_yaml(definitions_path: Path) -> Dict[str, Any]:
    try:
        with open(definitions_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DefinitionError(
            f"Invalid YAML in definitions file: {e}",
            context={"path": str(definitions_path)},
        ) from e

    if not isinstance(data, dict):
        raise DefinitionError(
            "Definitions file must contain a YAML dictionary",
            context={"path": str(definitions_path)},
        )
    return data
