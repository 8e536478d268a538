from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class NodeKind(str, Enum):
    # Container declarations
    CLASS = "class"
    MODULE = "module"
    INTERFACE = "interface"
    # Leaf declarations
    CONSTANT = "constant"
    GLOBAL = "global"
    TYPE_ALIAS = "type_alias"
    CLASS_ALIAS = "class_alias"
    MODULE_ALIAS = "module_alias"
    # `use` clause, a leaf kept ahead of all declarations
    USE = "use"
    # Members
    METHOD = "method"
    INSTANCE_VARIABLE = "instance_variable"
    CLASS_INSTANCE_VARIABLE = "class_instance_variable"
    CLASS_VARIABLE = "class_variable"
    INCLUDE = "include"
    EXTEND = "extend"
    PREPEND = "prepend"
    ATTR_READER = "attr_reader"
    ATTR_WRITER = "attr_writer"
    ATTR_ACCESSOR = "attr_accessor"
    PUBLIC = "public"
    PRIVATE = "private"
    ALIAS = "alias"


CONTAINER_KINDS = frozenset({NodeKind.CLASS, NodeKind.MODULE, NodeKind.INTERFACE})

LEAF_DECLARATION_KINDS = frozenset(
    {
        NodeKind.CONSTANT,
        NodeKind.GLOBAL,
        NodeKind.TYPE_ALIAS,
        NodeKind.CLASS_ALIAS,
        NodeKind.MODULE_ALIAS,
        NodeKind.USE,
    }
)

VARIABLE_KINDS = frozenset(
    {
        NodeKind.INSTANCE_VARIABLE,
        NodeKind.CLASS_INSTANCE_VARIABLE,
        NodeKind.CLASS_VARIABLE,
    }
)

MIXIN_KINDS = frozenset({NodeKind.INCLUDE, NodeKind.EXTEND, NodeKind.PREPEND})

ATTRIBUTE_KINDS = frozenset(
    {NodeKind.ATTR_READER, NodeKind.ATTR_WRITER, NodeKind.ATTR_ACCESSOR}
)

VISIBILITY_KINDS = frozenset({NodeKind.PUBLIC, NodeKind.PRIVATE})

MEMBER_KINDS = (
    VARIABLE_KINDS
    | MIXIN_KINDS
    | ATTRIBUTE_KINDS
    | VISIBILITY_KINDS
    | {NodeKind.METHOD, NodeKind.ALIAS}
)


@dataclass(frozen=True)
class Location:
    """Formatting-location token: the source lines a node was parsed from."""

    start_line: int
    end_line: int


@dataclass
class Annotation:
    string: str  # Payload inside the delimiters, e.g. "patch:override"
    source: str  # Exact token text, e.g. "%a{patch:override}"


@dataclass
class Node:
    kind: NodeKind
    name: str
    # Declaration text without annotations/comments. Type expressions stay opaque.
    text: List[str] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)
    location: Optional[Location] = None

    @property
    def has_children(self) -> bool:
        return False

    @property
    def is_member(self) -> bool:
        return self.kind in MEMBER_KINDS

    @property
    def is_variable(self) -> bool:
        return self.kind in VARIABLE_KINDS


@dataclass
class ContainerDeclaration(Node):
    children: List[Node] = field(default_factory=list)
    # Comments between the last child and `end`.
    trailing_comments: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.kind not in CONTAINER_KINDS:
            raise ValueError(f"{self.kind.value} is not a container kind")

    @property
    def has_children(self) -> bool:
        return True


@dataclass
class LeafDeclaration(Node):
    def __post_init__(self):
        if self.kind not in LEAF_DECLARATION_KINDS:
            raise ValueError(f"{self.kind.value} is not a declaration kind")


@dataclass
class Member(Node):
    # Only set for aliases: `alias new_name old_name`
    old_name: Optional[str] = None

    def __post_init__(self):
        if self.kind not in MEMBER_KINDS:
            raise ValueError(f"{self.kind.value} is not a member kind")


@dataclass
class SignatureTree:
    """The merged forest. Acts as the owning container of top-level declarations."""

    children: List[Node] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return True

    def walk(self):
        """Yields every node in document pre-order."""
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, ContainerDeclaration):
                stack.extend(reversed(node.children))
