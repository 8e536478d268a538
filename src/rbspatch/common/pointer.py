from typing import Any, Tuple


class SemanticPointer:
    """
    Attribute-built message id: `L.merge.layer.applied` is "merge.layer.applied".
    """

    __slots__ = ("_segments",)

    def __init__(self, *segments: str):
        self._segments: Tuple[str, ...] = segments

    def __getattr__(self, name: str) -> "SemanticPointer":
        # Private and dunder lookups (copy, pickle) are never message keys.
        if name.startswith("_"):
            raise AttributeError(name)
        return SemanticPointer(*self._segments, name)

    def __str__(self) -> str:
        return ".".join(self._segments)

    def __repr__(self) -> str:
        return f"<SemanticPointer: '{self}'>"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SemanticPointer):
            return self._segments == other._segments
        return str(other) == str(self)

    def __hash__(self) -> int:
        return hash(str(self))


L = SemanticPointer()
