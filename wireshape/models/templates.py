"""Rendering of ``{{ ... }}`` expressions in definition documents."""

import os
import re
from collections.abc import Callable, Mapping
from typing import Any, Dict, Optional

from wireshape.core.exceptions import DefinitionError

_EXPRESSION = re.compile(r"\{\{\s*(.+?)\s*\}\}")
_CALL = re.compile(r"""^(\w+)\(\s*(['"])(.*?)\2\s*(?:,\s*(['"])(.*?)\4\s*)?\)$""")

Lookup = Callable[[str, Optional[str]], str]


def render_templates(
    definitions: Dict[str, Any], cli_vars: Dict[str, str] | None = None
) -> Dict[str, Any]:
    """
    Render template expressions in every string value of a definitions document.

    Supports:
    - {{ env_var('NAME') }} and {{ env_var('NAME', 'fallback') }}
    - {{ var('NAME') }} and {{ var('NAME', 'fallback') }}, from --vars
    - {{ definitions.name }}

    Mapping keys are never rendered.

    Args:
        definitions: Parsed YAML document
        cli_vars: Variables passed via CLI (e.g., --vars key=value)

    Returns:
        A rendered copy of the document

    Raises:
        DefinitionError: If a variable is missing and has no fallback, or an
            expression cannot be evaluated
    """
    functions: Dict[str, Lookup] = {
        "env_var": _lookup("Environment variable", "not found", os.environ),
        "var": _lookup("CLI variable", "not provided", cli_vars or {}),
    }
    attributes = {"definitions": {"name": definitions.get("name") or ""}}

    def evaluate(expression: str) -> str:
        return _evaluate(expression, functions, attributes)

    return _render(definitions, evaluate)


def _lookup(label: str, missing: str, source: Mapping[str, str]) -> Lookup:
    def lookup(key: str, fallback: Optional[str] = None) -> str:
        if key in source:
            return source[key]
        if fallback is not None:
            return fallback
        raise DefinitionError(
            f"{label} '{key}' {missing}",
            context={"key": key},
        )

    return lookup


def _render(value: Any, evaluate: Callable[[str], str]) -> Any:
    if isinstance(value, dict):
        return {key: _render(item, evaluate) for key, item in value.items()}
    if isinstance(value, list):
        return [_render(item, evaluate) for item in value]
    if isinstance(value, str):
        return _EXPRESSION.sub(lambda match: evaluate(match.group(1)), value)
    return value


def _evaluate(
    expression: str,
    functions: Mapping[str, Lookup],
    attributes: Mapping[str, Any],
) -> str:
    call = _CALL.match(expression)
    if call:
        name, argument, fallback = call.group(1), call.group(3), call.group(5)
        function = functions.get(name)
        if function is None:
            raise DefinitionError(
                f"Unknown function: {name}",
                context={"expression": expression, "available": ", ".join(functions)},
            )
        return str(function(argument, fallback))

    value: Any = attributes
    for part in expression.split("."):
        if not isinstance(value, Mapping) or part not in value:
            raise DefinitionError(
                f"Template rendering failed: {expression}",
                context={"expression": expression},
            )
        value = value[part]
    return str(value)
