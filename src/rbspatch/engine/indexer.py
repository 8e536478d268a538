import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from rbspatch.spec import ContainerDeclaration, Node, QualifiedName, SignatureTree

log = logging.getLogger(__name__)

Owner = Union[SignatureTree, ContainerDeclaration]

# (simple name, is_member) identifies a node among its siblings.
_Key = Tuple[str, bool]


def _key(node: Node) -> _Key:
    return (node.name, node.is_member)


@dataclass
class IndexEntry:
    node: Node
    owner: Owner

    @property
    def position(self) -> int:
        # Resolved on demand so that sibling inserts never invalidate an entry.
        for position, child in enumerate(self.owner.children):
            if child is self.node:
                return position
        raise ValueError(f"'{self.node.name}' is no longer a child of its owner")


class DeclarationIndex:
    """
    Maps every qualified name in a tree to `(node, owner)`.

    Each container keeps its own sibling table, so a mutation only touches the
    container it happens in. Callers that mutate `children` directly report it
    through `inserted`, `removed` or `moved`; `rebuild` starts over after
    arbitrary edits. When one container holds several nodes with
    the same qualified name, the first of them is indexed.
    """

    def __init__(self, tree: SignatureTree):
        self.tree = tree
        # Namespace path and sibling table of every container, keyed by identity.
        self._paths: Dict[int, Tuple[str, ...]] = {}
        self._local: Dict[int, Dict[_Key, Node]] = {}
        self.rebuild()

    def rebuild(self) -> None:
        self._paths.clear()
        self._local.clear()
        self._index_owner(self.tree, ())

    def _index_owner(self, owner: Owner, path: Tuple[str, ...]) -> None:
        self._paths[id(owner)] = path
        local = self._local[id(owner)] = {}
        for node in owner.children:
            key = _key(node)
            if key in local:
                log.debug(f"Duplicate declaration '{QualifiedName(path, *key)}'")
            else:
                local[key] = node
            if isinstance(node, ContainerDeclaration):
                self._index_owner(node, path + (node.name,))

    # --- Incremental updates ---

    def inserted(self, owner: Owner, node: Node) -> None:
        """Records `node`, already placed in `owner.children`."""
        local = self._local_of(owner)
        key = _key(node)
        current = local.get(key)
        if current is None:
            local[key] = node
        elif current is not node:
            log.debug(f"Duplicate declaration '{self.qualified_name(owner, node)}'")
            local[key] = self._first_with(owner, key)
        if isinstance(node, ContainerDeclaration):
            self._index_owner(node, self.path_of(owner) + (node.name,))

    def removed(self, owner: Owner, node: Node) -> None:
        """Forgets `node`, already taken out of `owner.children`."""
        local = self._local_of(owner)
        key = _key(node)
        if local.get(key) is node:
            first = self._first_with(owner, key)
            if first is None:
                del local[key]
            else:
                local[key] = first
        if isinstance(node, ContainerDeclaration):
            self._forget(node)

    def moved(self, owner: Owner, node: Node) -> None:
        """Re-resolves which duplicate comes first after `node` changed position."""
        self._local_of(owner)[_key(node)] = self._first_with(owner, _key(node))

    @staticmethod
    def _first_with(owner: Owner, key: _Key) -> Optional[Node]:
        for child in owner.children:
            if _key(child) == key:
                return child
        return None

    def _forget(self, container: ContainerDeclaration) -> None:
        stack: List[Node] = [container]
        while stack:
            node = stack.pop()
            if isinstance(node, ContainerDeclaration):
                self._paths.pop(id(node), None)
                self._local.pop(id(node), None)
                stack.extend(node.children)

    def _local_of(self, owner: Owner) -> Dict[_Key, Node]:
        self.path_of(owner)
        return self._local[id(owner)]

    # --- Queries ---

    def path_of(self, owner: Owner) -> Tuple[str, ...]:
        try:
            return self._paths[id(owner)]
        except KeyError:
            raise KeyError(f"Container {owner!r} is not part of the indexed tree")

    def qualified_name(self, owner: Owner, node: Node) -> QualifiedName:
        return QualifiedName(self.path_of(owner), node.name, node.is_member)

    def __contains__(self, qn: QualifiedName) -> bool:
        return self.get(qn) is not None

    def __iter__(self) -> Iterator[QualifiedName]:
        return self._iter_owner(self.tree, ())

    def _iter_owner(self, owner: Owner, path: Tuple[str, ...]) -> Iterator[QualifiedName]:
        local = self._local.get(id(owner), {})
        for node in owner.children:
            if local.get(_key(node)) is not node:
                continue
            yield QualifiedName(path, node.name, node.is_member)
            if isinstance(node, ContainerDeclaration):
                yield from self._iter_owner(node, path + (node.name,))

    def get(self, qn: QualifiedName) -> Optional[IndexEntry]:
        owner = self.container_for(qn.namespace)
        if owner is None:
            return None
        node = self._local.get(id(owner), {}).get((qn.name, qn.is_member))
        return IndexEntry(node, owner) if node is not None else None

    def position_of(self, qn: QualifiedName) -> Optional[int]:
        entry = self.get(qn)
        return entry.position if entry else None

    def container_for(self, path: Tuple[str, ...]) -> Optional[Owner]:
        """Resolves a namespace path to the container that owns it."""
        owner: Owner = self.tree
        for name in path:
            node = self._local.get(id(owner), {}).get((name, False))
            if not isinstance(node, ContainerDeclaration):
                return None
            owner = node
        return owner

    def find_sibling(self, owner: Owner, name: str) -> Optional[IndexEntry]:
        """Resolves an anchor: a simple name local to `owner`, of any kind."""
        local = self._local_of(owner)
        for is_member in (True, False):
            node = local.get((name, is_member))
            if node is not None:
                return IndexEntry(node, owner)
        return None

    def positions_of(self, owner: Owner, qn: QualifiedName) -> List[int]:
        """All positions in `owner` holding `qn`, duplicates included."""
        return [
            position
            for position, node in enumerate(owner.children)
            if node.name == qn.name and node.is_member == qn.is_member
        ]
