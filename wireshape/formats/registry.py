"""Format registry for managing named value formatters."""

from typing import Any, Callable, overload

from wireshape.core.exceptions import SpecError

Formatter = Callable[[Any], Any]
FormatterFactory = Callable[[dict[str, Any]], Formatter]

_format_registry: dict[str, FormatterFactory] = {}


@overload
def register_format(
    kind: str,
) -> Callable[[FormatterFactory], FormatterFactory]: ...


@overload
def register_format(kind: str, factory: FormatterFactory) -> None: ...


def register_format(
    kind: str,
    factory: FormatterFactory | None = None,
) -> Callable[[FormatterFactory], FormatterFactory] | None:
    """Register a formatter factory.

    Can be used as a decorator or called directly:

        # As decorator
        @register_format("date")
        def create_date_formatter(params):
            return DateFormatter(params)

        # Direct call
        register_format("date", create_date_formatter)

    A factory receives the rule's params and returns a callable that takes
    a non-null value and returns its formatted form. Factories should
    validate params eagerly and raise SpecError on bad input.

    Args:
        kind: Unique identifier for the format (e.g., 'date').
        factory: Factory function (optional if used as decorator).

    Raises:
        SpecError: If a format with the same kind is already registered.
    """

    def _register(f: FormatterFactory) -> FormatterFactory:
        if kind in _format_registry:
            raise SpecError(
                f"Format '{kind}' is already registered",
                context={"kind": kind},
            )
        _format_registry[kind] = f
        return f

    if factory is not None:
        _register(factory)
        return None

    return _register


def get_format(kind: str, params: dict[str, Any]) -> Formatter:
    """Create a formatter using the registered factory.

    Args:
        kind: The format kind to instantiate.
        params: Parameters from the format rule.

    Returns:
        A callable formatting a single value.

    Raises:
        SpecError: If the kind is not registered or the params are invalid.
    """
    factory = _format_registry.get(kind)
    if factory is None:
        available = ", ".join(sorted(_format_registry.keys())) or "(none)"
        raise SpecError(
            f"Unknown format kind: '{kind}'",
            context={"kind": kind, "available_kinds": available},
        )
    return factory(params)


def list_format_kinds() -> list[str]:
    """Return a sorted list of all registered format kinds."""
    return sorted(_format_registry.keys())


def clear_registry() -> None:
    """Clear all registered formats.

    Intended for testing only.
    """
    _format_registry.clear()
