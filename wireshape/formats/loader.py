"""Utilities to load modules that register custom formats."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from wireshape.core.exceptions import DefinitionError


def load_custom_formats(paths: list[str]) -> None:
    """Import each module so its @register_format declarations run.

    Entries may be dotted module paths or ``.py`` file paths. A module is
    executed at most once per process.
    """
    for path in paths:
        _import_module(path)


def _import_module(module_path: str) -> ModuleType:
    """Import by module path or file path."""
    path_obj = Path(module_path)
    if path_obj.suffix == ".py" or path_obj.exists():
        resolved = path_obj.resolve()
        module_name = f"wireshape_custom_formats_{abs(hash(str(resolved)))}"
        if module_name in sys.modules:
            return sys.modules[module_name]
        spec = importlib.util.spec_from_file_location(module_name, resolved)
        if spec is None or spec.loader is None:
            raise DefinitionError(f"Cannot load module from path: {module_path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)  # type: ignore[arg-type]
        except FileNotFoundError as exc:
            raise DefinitionError(
                f"Custom format module not found: {module_path}"
            ) from exc
        sys.modules[module_name] = module
        return module

    try:
        return importlib.import_module(module_path)
    except ImportError as exc:
        raise DefinitionError(
            f"Failed to import custom format module '{module_path}': {exc}"
        ) from exc
