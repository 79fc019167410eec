"""Dependency container used to inject transformer collaborators."""

from collections.abc import Hashable, Mapping
from typing import Any

from wireshape.core.exceptions import ConstructionError


class Container:
    """Maps dependency keys (usually types) to instances or factories.

    Factories are called with the container on every resolve, so they can
    resolve their own dependencies:

        container = Container()
        container.bind(Clock, SystemClock())
        container.bind(UrlBuilder, lambda c: UrlBuilder(*c.resolve(Settings)), factory=True)
    """

    def __init__(self, bindings: Mapping[Hashable, Any] | None = None):
        self._bindings: dict[Hashable, tuple[Any, bool]] = {}
        for key, provider in (bindings or {}).items():
            self.bind(key, provider)

    def bind(self, key: Hashable, provider: Any, *, factory: bool = False) -> None:
        """Bind a key to an instance, or to a factory when ``factory`` is True."""
        if factory and not callable(provider):
            raise ConstructionError(
                f"Factory for '{_key_name(key)}' is not callable",
                context={"key": _key_name(key)},
            )
        self._bindings[key] = (provider, factory)

    def resolve(self, *keys: Hashable) -> tuple[Any, ...]:
        """Resolve each key to an instance, in order.

        Raises:
            ConstructionError: If a key is unbound or its factory fails.
        """
        return tuple(self._resolve_one(key) for key in keys)

    def _resolve_one(self, key: Hashable) -> Any:
        binding = self._bindings.get(key)
        if binding is None:
            raise ConstructionError(
                f"No binding for '{_key_name(key)}'",
                context={
                    "key": _key_name(key),
                    "bound": ", ".join(sorted(_key_name(k) for k in self._bindings)) or "(none)",
                },
            )
        provider, is_factory = binding
        if not is_factory:
            return provider
        try:
            return provider(self)
        except ConstructionError:
            raise
        except Exception as e:
            raise ConstructionError(
                f"Factory for '{_key_name(key)}' failed",
                context={"key": _key_name(key), "error": str(e)},
            ) from e

    def __contains__(self, key: object) -> bool:
        return key in self._bindings


def _key_name(key: Any) -> str:
    return getattr(key, "__name__", str(key))
