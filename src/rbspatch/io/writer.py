from typing import List, Optional

from rbspatch.spec import ContainerDeclaration, Node, SignatureTree


class SignatureWriter:
    def __init__(self, indent_spaces: int = 2):
        self._indent_str = " " * indent_spaces

    def write(self, tree: SignatureTree) -> str:
        lines: List[str] = []
        self._write_nodes(tree.children, 0, lines)
        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def _indent(self, level: int) -> str:
        return self._indent_str * level

    def _write_nodes(self, nodes: List[Node], level: int, lines: List[str]) -> None:
        prev: Optional[Node] = None
        for node in nodes:
            if prev is not None and self._preserve_empty_line(prev, node):
                lines.append("")
            self._write_node(node, level, lines)
            prev = node

    @staticmethod
    def _preserve_empty_line(prev: Node, node: Node) -> bool:
        # Siblings that were separated in their source stay separated.
        # Nodes without a location (built in code) are written back to back.
        if prev.location is None or node.location is None:
            return False
        return node.location.start_line - prev.location.end_line > 1

    def _write_node(self, node: Node, level: int, lines: List[str]) -> None:
        indent = self._indent(level)

        for comment in node.comments:
            lines.append(f"{indent}{comment}")
        for annotation in node.annotations:
            lines.append(f"{indent}{annotation.source}")
        for text in node.text:
            lines.append(f"{indent}{text}" if text else "")

        if isinstance(node, ContainerDeclaration):
            self._write_nodes(node.children, level + 1, lines)
            for comment in node.trailing_comments:
                lines.append(f"{self._indent(level + 1)}{comment}")
            lines.append(f"{indent}end")
