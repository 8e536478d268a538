from dataclasses import dataclass
from typing import Tuple

NAMESPACE_SEPARATOR = "::"
MEMBER_SEPARATOR = "#"


@dataclass(frozen=True)
class QualifiedName:
    """
    Structured path from the tree root to a node.

    Segments are kept apart internally so that names which themselves contain
    "::" (e.g. `class Foo::Bar`) never collide with nesting. The combined string
    form is only produced by `__str__`.
    """

    namespace: Tuple[str, ...]
    name: str
    is_member: bool = False

    @property
    def path(self) -> Tuple[str, ...]:
        return self.namespace + (self.name,)

    def child(self, name: str, is_member: bool = False) -> "QualifiedName":
        if self.is_member:
            raise ValueError(f"Member '{self}' cannot own children")
        return QualifiedName(self.path, name, is_member)

    def is_within(self, path: Tuple[str, ...]) -> bool:
        return self.namespace[: len(path)] == path

    def __str__(self) -> str:
        prefix = NAMESPACE_SEPARATOR.join(self.namespace)
        if not prefix:
            return self.name
        separator = MEMBER_SEPARATOR if self.is_member else NAMESPACE_SEPARATOR
        return f"{prefix}{separator}{self.name}"
