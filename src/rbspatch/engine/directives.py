import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from rbspatch.spec import Annotation, Node


class DirectiveKind(str, Enum):
    OVERRIDE = "override"
    DELETE = "delete"
    APPEND_AFTER = "append_after"
    PREPEND_BEFORE = "prepend_before"


# Lower value wins.
PRIORITY = {
    DirectiveKind.OVERRIDE: 0,
    DirectiveKind.DELETE: 1,
    DirectiveKind.APPEND_AFTER: 2,
    DirectiveKind.PREPEND_BEFORE: 3,
}

_DIRECTIVE_RE = re.compile(
    r"^\s*patch:(?P<kind>override|delete|append_after|prepend_before)"
    r"(?:\(\s*(?P<anchor>[^()\s]+)\s*\))?\s*$"
)


@dataclass(frozen=True)
class Directive:
    kind: DirectiveKind
    annotation: Annotation
    anchor: Optional[str] = None


def parse_directive(annotation: Annotation) -> Optional[Directive]:
    match = _DIRECTIVE_RE.match(annotation.string)
    if not match:
        return None

    kind = DirectiveKind(match.group("kind"))
    anchor = match.group("anchor")
    needs_anchor = kind in (DirectiveKind.APPEND_AFTER, DirectiveKind.PREPEND_BEFORE)
    # `patch:delete(x)` or a bare `patch:append_after` are not directives.
    if needs_anchor != (anchor is not None):
        return None
    return Directive(kind=kind, annotation=annotation, anchor=anchor)


def classify(annotations: List[Annotation]) -> Optional[Directive]:
    """
    Returns the single directive that applies to a node, or None.

    Annotations are scanned in source order; among recognized directives the one
    with the highest priority wins (override > delete > append_after >
    prepend_before). Ties keep the earliest token.
    """
    winner: Optional[Directive] = None
    for annotation in annotations:
        directive = parse_directive(annotation)
        if directive is None:
            continue
        if winner is None or PRIORITY[directive.kind] < PRIORITY[winner.kind]:
            winner = directive
    return winner


def strip_directive(node: Node, directive: Directive) -> None:
    # Identity comparison: two identical tokens on one node are distinct annotations.
    node.annotations = [a for a in node.annotations if a is not directive.annotation]
