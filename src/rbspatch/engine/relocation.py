import logging
from typing import TYPE_CHECKING, Optional

from rbspatch.spec import ContainerDeclaration, Node
from .directives import Directive, DirectiveKind, strip_directive
from .indexer import IndexEntry, Owner

if TYPE_CHECKING:
    from .merger import MergeEngine

log = logging.getLogger(__name__)


def _move(owner: Owner, source: int, target: int, after: bool) -> int:
    """
    Moves the child at `source` next to the child currently at `target`.

    Returns the new position of the moved child.
    """
    node = owner.children.pop(source)
    if target > source:
        target -= 1
    position = target + 1 if after else target
    owner.children.insert(position, node)
    return position


def _find_child(container: ContainerDeclaration, name: str) -> Optional[int]:
    for position, child in enumerate(container.children):
        if child.name == name:
            return position
    return None


class RelocationPass:
    """
    Repositions an already merged container declaration among its siblings.

    A container that reappears in a later layer with append_after/prepend_before
    merges into the existing declaration rather than adding a second one, so the
    directive moves the existing declaration (with its whole subtree) instead.
    """

    def __init__(self, engine: "MergeEngine", sync_stand_ins: bool = False):
        self.engine = engine
        self.sync_stand_ins = sync_stand_ins

    def relocate(
        self,
        owner: Owner,
        existing: IndexEntry,
        incoming: ContainerDeclaration,
        directive: Directive,
    ) -> None:
        index = self.engine.index
        container = existing.node
        strip_directive(incoming, directive)

        anchor = index.find_sibling(owner, directive.anchor)
        if anchor is None or anchor.node is container:
            log.debug(
                f"Cannot relocate '{index.qualified_name(owner, container)}' "
                f"relative to '{directive.anchor}', keeping its position"
            )
        else:
            after = directive.kind == DirectiveKind.APPEND_AFTER
            _move(owner, existing.position, anchor.position, after)
            container.location = anchor.node.location
            index.moved(owner, container)
            if self.sync_stand_ins:
                self._sync_stand_ins(owner, container, anchor.node, after)

        self.engine.absorb(container, incoming)

    def _sync_stand_ins(
        self, owner: Owner, relocated: Node, anchor: Node, after: bool
    ) -> None:
        for sibling in owner.children:
            if sibling is relocated or not isinstance(sibling, ContainerDeclaration):
                continue
            stand_in = _find_child(sibling, relocated.name)
            target = _find_child(sibling, anchor.name)
            if stand_in is None or target is None or stand_in == target:
                continue
            moved = sibling.children[stand_in]
            _move(sibling, stand_in, target, after)
            self.engine.index.moved(sibling, moved)
