"""Single-field value resolution with a fixed precedence order."""

import inspect
from collections.abc import Callable, Collection, Iterator, Mapping
from typing import Any

Accessor = Callable[[Any], Any]

_MISSING = object()


def is_collection(value: Any) -> bool:
    """Return True for values transformed element-wise.

    Sized containers (lists, tuples, sets, dict views, result wrappers) and
    iterators qualify; strings, bytes and mappings are single values.
    """
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, (Collection, Iterator))


class ValueResolver:
    """Resolves the raw value for one output key of a source object.

    Precedence, stopping at the first hit:

    1. An accessor registered on the transformer for the output key,
       called with the source object.
    2. The source field itself: a key of a mapping, or a plain attribute
       (not a function or method) of any other object.
    3. A ``get_<field>()`` accessor defined on the source object.
    4. ``None``.

    Absence never raises; it only advances to the next step.
    """

    def __init__(self, accessors: Mapping[str, Accessor] | None = None):
        self._accessors = dict(accessors or {})

    def has_accessor(self, output_key: str) -> bool:
        return output_key in self._accessors

    def resolve(self, obj: Any, output_key: str, source: str | None = None) -> Any:
        accessor = self._accessors.get(output_key)
        if accessor is not None:
            return accessor(obj)

        field_name = source or output_key

        value = _lookup_field(obj, field_name)
        if value is not _MISSING:
            return value

        value = _call_object_accessor(obj, field_name)
        if value is not _MISSING:
            return value

        return None


def _lookup_field(obj: Any, field_name: str) -> Any:
    if isinstance(obj, Mapping):
        if field_name in obj:
            return obj[field_name]
        return _MISSING
    try:
        value = getattr(obj, field_name)
    except AttributeError:
        return _MISSING
    if inspect.isroutine(value):
        return _MISSING
    return value


def _call_object_accessor(obj: Any, field_name: str) -> Any:
    accessor = getattr(obj, f"get_{field_name}", None)
    if accessor is None or not callable(accessor):
        return _MISSING
    return accessor()
