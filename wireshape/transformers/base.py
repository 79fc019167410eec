"""Transformer base class: the extension surface of the engine."""

from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Optional

from wireshape.core.container import Container
from wireshape.core.exceptions import ConstructionError
from wireshape.structure import StructureSpec

_ACCESSOR_PREFIX = "get_"


class Transformer:
    """Describes how one kind of source object looks on the wire.

    Subclasses implement ``structure()`` and optionally override any of the
    other capabilities, all of which have working defaults:

    - ``minimal_structure()``: the minimal variant (defaults to ``structure()``)
    - ``preload``: relations to load before resolution, either a list of names
      or ``{relation: guard}`` where guard may be ``PRELOAD_RELATED``
    - ``get_<key>(self, obj)``: computed values for output keys
    - ``order_by``: field name or ``[field, direction]`` for collections
    - ``null_state``: result for a ``None`` source object
    - ``before_transform`` / ``after_transform`` / ``before_collection`` /
      ``after_collection``: hooks around resolution

    Collaborators are declared in ``dependencies`` as ``{attribute: key}`` and
    are injected once, at construction, from keyword arguments or a
    ``Container``:

        class PostTransformer(Transformer):
            dependencies = {"urls": UrlBuilder}
            preload = {"comments": PRELOAD_RELATED}

            def structure(self):
                return {
                    "id": None,
                    "title": None,
                    "url": None,
                    "comments": CommentTransformer(minimal=True),
                }

            def get_url(self, post):
                return self.urls.post(post.id)
    """

    dependencies: ClassVar[Mapping[str, Any]] = {}
    preload: ClassVar[Any] = ()
    order_by: ClassVar[Any] = None
    null_state: ClassVar[Any] = None

    def __init__(
        self,
        *,
        minimal: bool = False,
        container: Optional[Container] = None,
        **dependencies: Any,
    ):
        """Initialize the transformer.

        Args:
            minimal: Use the minimal structure variant.
            container: Container used for dependencies not passed explicitly.
            **dependencies: Explicit dependency instances, by attribute name.

        Raises:
            ConstructionError: If a dependency is unknown or cannot be resolved.
        """
        self.minimal = minimal
        self._inject(container, dependencies)
        self._accessors = self._collect_accessors()

    @property
    def name(self) -> str:
        return type(self).__name__

    def structure(self) -> Any:
        """Return the full structure, as a StructureSpec or shorthand."""
        raise NotImplementedError(f"{self.name} must implement structure()")

    def minimal_structure(self) -> Any:
        """Return the minimal structure; defaults to the full one."""
        return self.structure()

    def build_spec(self) -> StructureSpec:
        """Build the spec of the active variant for one transform pass."""
        structure = self.minimal_structure() if self.minimal else self.structure()
        return StructureSpec.build(structure)

    def preload_relations(self) -> Any:
        """Return preload declarations; override for guards computed per instance."""
        return self.preload

    def accessors(self) -> dict[str, Callable[[Any], Any]]:
        """Return the ``{output_key: accessor}`` mapping used before field lookup."""
        return dict(self._accessors)

    def before_transform(self, obj: Any) -> Any:
        return obj

    def after_transform(self, result: dict[str, Any], obj: Any) -> Any:
        return result

    def before_collection(self, objects: list[Any]) -> list[Any]:
        return objects

    def after_collection(self, results: list[Any], objects: list[Any]) -> list[Any]:
        return results

    def _inject(self, container: Optional[Container], provided: dict[str, Any]) -> None:
        unexpected = sorted(set(provided) - set(self.dependencies))
        if unexpected:
            raise ConstructionError(
                f"Unexpected dependencies for {self.name}: {unexpected}",
                context={"transformer": self.name, "declared": list(self.dependencies)},
            )

        missing = [attr for attr in self.dependencies if attr not in provided]
        if missing and container is None:
            raise ConstructionError(
                f"Missing dependencies for {self.name}: {missing}",
                context={"transformer": self.name},
            )

        resolved: tuple[Any, ...] = ()
        if missing:
            try:
                resolved = container.resolve(*(self.dependencies[attr] for attr in missing))
            except ConstructionError as e:
                raise ConstructionError(
                    f"Cannot construct {self.name}: {e.message}",
                    context={"transformer": self.name, **e.context},
                ) from e

        for attr, value in zip(missing, resolved):
            setattr(self, attr, value)
        for attr, value in provided.items():
            setattr(self, attr, value)

    def _collect_accessors(self) -> dict[str, Callable[[Any], Any]]:
        accessors = {}
        for attr in dir(type(self)):
            if not attr.startswith(_ACCESSOR_PREFIX) or attr == _ACCESSOR_PREFIX:
                continue
            accessor = getattr(self, attr)
            if callable(accessor):
                accessors[attr[len(_ACCESSOR_PREFIX):]] = accessor
        return accessors
