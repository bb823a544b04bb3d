"""Convention -> default -> override resolution shared by every entity kind."""

from collections import defaultdict
from typing import Any, Callable

from api_spec_builder.description.conventions import Conventions, EntityKind

Override = Callable[[Any, Any], Any]


class Overrides:
    """Caller-registered override functions, applied in registration order."""

    def __init__(self):
        self._hooks: dict[EntityKind, list[Override]] = defaultdict(list)

    def register(self, kind: EntityKind | str, override: Override) -> "Overrides":
        self._hooks[EntityKind(kind)].append(override)
        return self

    def apply(self, kind: EntityKind, source: Any, node: Any) -> Any:
        for override in self._hooks.get(kind, ()):
            node = override(source, node)
        return node


class DescriptionAssembler:
    """Resolves one node at a time.

    ``build`` receives the convention's description (possibly None) and must
    return a node with every absent field defaulted from metadata. The
    override for ``kind`` then sees that node and returns the one emitted.
    """

    def __init__(self, conventions: Conventions, overrides: Overrides | None = None):
        self.conventions = conventions
        self.overrides = overrides or Overrides()

    def describe(self, kind: EntityKind, source: Any) -> Any:
        return self.conventions.describe(kind, source)

    def assemble(
        self,
        kind: EntityKind,
        source: Any,
        build: Callable[[Any], Any],
        convention: EntityKind | None = None,
        target: Any = None,
    ) -> Any:
        description = self.describe(convention or kind, source)
        node = build(description)
        return self.finish(kind, source if target is None else target, node)

    def finish(self, kind: EntityKind, source: Any, node: Any) -> Any:
        return self.overrides.apply(kind, source, node)
