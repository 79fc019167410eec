"""Exception hierarchy for the wireshape package."""


class WireshapeError(Exception):
    """Base exception for all wireshape errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class SpecError(WireshapeError):
    """Raised when a structure spec is invalid.

    Always raised while the spec is being built, before any source object
    is touched.
    """

    pass


class ConstructionError(WireshapeError):
    """Raised when a transformer's dependencies cannot be resolved."""

    pass


class FormatError(WireshapeError):
    """Raised when a formatter cannot format a resolved value."""

    pass


class StoreError(WireshapeError):
    """Raised by bundled object stores for misconfigured relation paths."""

    pass


class DefinitionError(WireshapeError):
    """Raised when a transformer definition file cannot be loaded."""

    pass
