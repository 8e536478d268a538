import logging
from typing import List, Optional

from rbspatch.spec import (
    VISIBILITY_KINDS,
    ContainerDeclaration,
    Node,
    NodeKind,
    SignatureTree,
)
from .directives import Directive, DirectiveKind, classify, strip_directive
from .indexer import DeclarationIndex, IndexEntry, Owner
from .relocation import RelocationPass

log = logging.getLogger(__name__)


class MergeEngine:
    """
    Merges patch layers into a live SignatureTree.

    Every incoming node is visited in document pre-order: the node's directive is
    resolved against its intended owner first, then its children are merged into
    whatever container now represents it. Directives whose target or anchor is
    missing are dropped silently; a layer is never rejected half-way.
    """

    def __init__(self, tree: Optional[SignatureTree] = None, sync_stand_ins: bool = False):
        self.tree = tree if tree is not None else SignatureTree()
        self.index = DeclarationIndex(self.tree)
        self.relocation = RelocationPass(self, sync_stand_ins=sync_stand_ins)

    def merge(self, incoming: List[Node]) -> SignatureTree:
        self.merge_children(self.tree, incoming)
        return self.tree

    def merge_children(
        self, owner: Owner, incoming: List[Node], fresh: bool = False
    ) -> None:
        # `fresh` marks a container this layer just created: its own plain
        # children keep their source order instead of being placed heuristically.
        for node in incoming:
            self._merge_node(owner, node, fresh)

    def absorb(
        self, container: ContainerDeclaration, incoming: ContainerDeclaration
    ) -> None:
        """Merges a re-declaration of `container` into the existing declaration."""
        for comment in incoming.trailing_comments:
            if comment not in container.trailing_comments:
                container.trailing_comments.append(comment)
        self.merge_children(container, self._detach_children(incoming))

    def _merge_node(self, owner: Owner, node: Node, fresh: bool) -> None:
        qn = self.index.qualified_name(owner, node)
        existing = self.index.get(qn)
        directive = classify(node.annotations)

        if directive is None:
            self._merge_plain(owner, node, existing, fresh)
        elif directive.kind == DirectiveKind.OVERRIDE:
            self._override(owner, node, existing, directive)
        elif directive.kind == DirectiveKind.DELETE:
            self._delete(owner, node, existing)
        else:
            self._insert_relative(owner, node, existing, directive)

    # --- Directives ---

    def _override(
        self,
        owner: Owner,
        node: Node,
        existing: Optional[IndexEntry],
        directive: Directive,
    ) -> None:
        if existing is None:
            log.debug(f"Override target '{self._describe(owner, node)}' not found, dropped")
            return

        strip_directive(node, directive)
        node.location = existing.node.location
        pending = self._detach_children(node)

        positions = self.index.positions_of(owner, self.index.qualified_name(owner, node))
        # Replace the first occurrence in place and collapse any later duplicates.
        for position in reversed(positions[1:]):
            self.index.removed(owner, owner.children.pop(position))
        replaced, owner.children[positions[0]] = owner.children[positions[0]], node
        self.index.removed(owner, replaced)
        self.index.inserted(owner, node)

        if pending:
            self.merge_children(node, pending, fresh=True)

    def _delete(self, owner: Owner, node: Node, existing: Optional[IndexEntry]) -> None:
        if existing is None:
            log.debug(f"Delete target '{self._describe(owner, node)}' not found, ignored")
            return

        positions = self.index.positions_of(owner, self.index.qualified_name(owner, node))
        for position in reversed(positions):
            self.index.removed(owner, owner.children.pop(position))

    def _insert_relative(
        self,
        owner: Owner,
        node: Node,
        existing: Optional[IndexEntry],
        directive: Directive,
    ) -> None:
        if (
            isinstance(node, ContainerDeclaration)
            and existing is not None
            and isinstance(existing.node, ContainerDeclaration)
        ):
            self.relocation.relocate(owner, existing, node, directive)
            return

        anchor = self.index.find_sibling(owner, directive.anchor)
        if anchor is None:
            log.debug(
                f"Anchor '{directive.anchor}' for '{self._describe(owner, node)}' "
                "not found, dropped"
            )
            return

        strip_directive(node, directive)
        node.location = anchor.node.location
        position = anchor.position
        if directive.kind == DirectiveKind.APPEND_AFTER:
            position += 1
        self._insert(owner, position, node)

    # --- Directive-less additions ---

    def _merge_plain(
        self,
        owner: Owner,
        node: Node,
        existing: Optional[IndexEntry],
        fresh: bool,
    ) -> None:
        if (
            isinstance(node, ContainerDeclaration)
            and existing is not None
            and isinstance(existing.node, ContainerDeclaration)
        ):
            self.absorb(existing.node, node)
            return

        if node.kind == NodeKind.USE:
            if existing is not None:
                log.debug(f"'{node.name}' already present")
                return
            self._place_use(owner, node)
            return

        if fresh:
            self._insert(owner, len(owner.children), node)
            return

        if node.is_variable:
            if existing is not None:
                log.debug(f"Variable '{self._describe(owner, node)}' already declared")
                return
            self._place_variable(owner, node)
            return

        if node.kind in VISIBILITY_KINDS and any(
            child.kind == node.kind for child in owner.children
        ):
            return

        self._insert(owner, len(owner.children), node)

    def _place_use(self, owner: Owner, node: Node) -> None:
        # `use` clauses stay grouped ahead of every declaration.
        position = 0
        for i, child in enumerate(owner.children):
            if child.kind == NodeKind.USE:
                position = i + 1
        self._insert(owner, position, node)

    def _place_variable(self, owner: Owner, node: Node) -> None:
        children = owner.children
        same_kind = [i for i, child in enumerate(children) if child.kind == node.kind]
        if same_kind:
            neighbour = same_kind[-1]
            position = neighbour + 1
        else:
            methods = [
                i for i, child in enumerate(children) if child.kind == NodeKind.METHOD
            ]
            if not methods:
                self._insert(owner, len(children), node)
                return
            neighbour = position = methods[0]

        node.location = children[neighbour].location
        self._insert(owner, position, node)

    # --- Helpers ---

    def _insert(self, owner: Owner, position: int, node: Node) -> None:
        pending = self._detach_children(node)
        owner.children.insert(position, node)
        self.index.inserted(owner, node)
        if pending:
            self.merge_children(node, pending, fresh=True)

    @staticmethod
    def _detach_children(node: Node) -> List[Node]:
        if not isinstance(node, ContainerDeclaration):
            return []
        children, node.children = node.children, []
        return children

    def _describe(self, owner: Owner, node: Node) -> str:
        return str(self.index.qualified_name(owner, node))
