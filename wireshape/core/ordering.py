"""Ordering of collection results by a resolved output field."""

from collections.abc import Mapping, Sequence
from typing import Any, NamedTuple, Optional

from wireshape.core.exceptions import SpecError
from wireshape.structure import StructureSpec

_DIRECTIONS = {
    "asc": False,
    "ascending": False,
    "desc": True,
    "descending": True,
}


class Ordering(NamedTuple):
    field: str
    descending: bool = False


def parse_ordering(order_by: Any, spec: StructureSpec) -> Optional[Ordering]:
    """Parse an ``order_by`` declaration against the active spec.

    Accepts a field name or a ``[field, direction]`` pair. The field must be
    an output key of ``spec``: ordering reads resolved results, never the
    source objects.

    Raises:
        SpecError: If the declaration is malformed or names an unknown key.
    """
    if order_by is None:
        return None

    if isinstance(order_by, str):
        field, direction = order_by, "asc"
    elif (
        isinstance(order_by, Sequence)
        and len(order_by) == 2
        and all(isinstance(part, str) for part in order_by)
    ):
        field, direction = order_by
    else:
        raise SpecError(
            "order_by must be a field name or a [field, direction] pair",
            context={"order_by": order_by},
        )

    descending = _DIRECTIONS.get(direction.lower())
    if descending is None:
        raise SpecError(
            f"Unknown ordering direction: '{direction}'",
            context={"direction": direction, "supported": ", ".join(_DIRECTIONS)},
        )

    if field not in spec:
        raise SpecError(
            f"Ordering field '{field}' is not an output key",
            context={"field": field, "keys": spec.keys()},
        )

    return Ordering(field, descending)


def apply_ordering(
    results: list[Any], ordering: Optional[Ordering], transformer: Optional[str] = None
) -> list[Any]:
    """Stable-sort results by the ordering field; nulls go last either way.

    Raises:
        SpecError: If the non-null values of the field cannot be compared
            with each other (e.g. numbers mixed with strings).
    """
    if ordering is None:
        return results

    present = []
    missing = []
    for result in results:
        if isinstance(result, Mapping) and result.get(ordering.field) is not None:
            present.append(result)
        else:
            missing.append(result)

    try:
        present.sort(key=lambda result: result[ordering.field], reverse=ordering.descending)
    except TypeError as e:
        raise SpecError(
            f"Ordering field '{ordering.field}' has values that cannot be compared",
            context={
                "field": ordering.field,
                "transformer": transformer,
                "types": ", ".join(sorted({type(r[ordering.field]).__name__ for r in present})),
            },
        ) from e
    return present + missing
