import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from rbspatch.spec import (
    Annotation,
    ContainerDeclaration,
    LeafDeclaration,
    Location,
    Member,
    Node,
    NodeKind,
    SignatureSyntaxError,
)

_ANNOTATION_RE = re.compile(
    r"%a(?:\{(?P<brace>[^}]*)\}|\((?P<paren>[^)]*)\)|\[(?P<bracket>[^\]]*)\]"
    r"|<(?P<angle>[^>]*)>|\|(?P<pipe>[^|]*)\|)"
)

_CONST = r"(?:::)?[A-Z]\w*(?:::[A-Z]\w*)*"
_INTERFACE = r"(?:::)?(?:[A-Z]\w*::)*_\w+"

_CONTAINER_RE = re.compile(
    rf"^(?P<keyword>class|module)\s+(?P<name>{_CONST})(?P<rest>.*)$"
    rf"|^(?P<ikeyword>interface)\s+(?P<iname>{_INTERFACE})(?P<irest>.*)$"
)
_ALIAS_DECL_RE = re.compile(r"^\s*=")
_INLINE_END_RE = re.compile(r"\s+end\s*$")
_TYPE_ALIAS_RE = re.compile(
    r"^type\s+(?P<name>(?:::)?(?:[A-Z]\w*::)*[a-z_]\w*)"
)
_GLOBAL_RE = re.compile(r"^(?P<name>\$\w+)\s*:")
_CONSTANT_RE = re.compile(rf"^(?P<name>{_CONST})\s*:(?!:)")

_METHOD_RE = re.compile(
    r"^(?:(?:public|private)\s+)?def\s+(?P<name>(?:self\??\.)?(?:`[^`]+`|[^\s:]+))\s*:"
)
_CLASS_INSTANCE_VARIABLE_RE = re.compile(r"^(?P<name>self\.@\w+)\s*:")
_CLASS_VARIABLE_RE = re.compile(r"^(?P<name>@@\w+)\s*:")
_INSTANCE_VARIABLE_RE = re.compile(r"^(?P<name>@\w+)\s*:")
_MIXIN_RE = re.compile(r"^(?P<keyword>include|extend|prepend)\s+(?P<name>[^\s\[]+)")
_ATTRIBUTE_RE = re.compile(
    r"^(?:(?:public|private)\s+)?(?P<keyword>attr_reader|attr_writer|attr_accessor)"
    r"\s+(?P<name>(?:self\.)?\w+[?!]?)"
)
_VISIBILITY_RE = re.compile(r"^(?P<keyword>public|private)\s*(?:#.*)?$")
_ALIAS_RE = re.compile(r"^alias\s+(?P<new>\S+)\s+(?P<old>\S+)")
_END_RE = re.compile(r"^end\s*(?:#.*)?$")
_USE_RE = re.compile(r"^use\s+\S")

# end_line of a container whose `end` has not been read yet
_OPEN = -1

_OPENERS = "([{"
_CLOSERS = ")]}"


@dataclass
class _Statement:
    lines: List[str]
    start_line: int
    end_line: int

    @property
    def head(self) -> str:
        return self.lines[0]


def _bracket_depth(text: str) -> int:
    depth = 0
    for char in text:
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
    return depth


def _take_annotations(text: str) -> Tuple[List[Annotation], str]:
    annotations = []
    rest = text
    while True:
        match = _ANNOTATION_RE.match(rest)
        if not match:
            return annotations, rest
        payload = next(group for group in match.groups() if group is not None)
        annotations.append(Annotation(string=payload, source=match.group(0)))
        rest = rest[match.end() :].lstrip()


class _ParseSession:
    def __init__(self, source: str, file_path: str):
        self.lines = source.splitlines()
        self.file_path = file_path
        self.cursor = 0
        self.roots: List[Node] = []
        self.stack: List[ContainerDeclaration] = []
        self.annotations: List[Annotation] = []
        self.annotation_line: Optional[int] = None
        self.comments: List[str] = []
        self.comment_line: Optional[int] = None

    def error(self, message: str, line: Optional[int]) -> SignatureSyntaxError:
        return SignatureSyntaxError(message, self.file_path, line)

    def parse(self) -> List[Node]:
        while self.cursor < len(self.lines):
            line_no = self.cursor + 1
            raw = self.lines[self.cursor]
            self.cursor += 1
            text = raw.strip()

            if not text:
                # Comments only attach to the declaration directly below them.
                self.comments, self.comment_line = [], None
                continue
            if text.startswith("#"):
                self.comments.append(text)
                self.comment_line = self.comment_line or line_no
                continue

            annotations, text = _take_annotations(text)
            if annotations:
                self.annotations.extend(annotations)
                self.annotation_line = self.annotation_line or line_no
            if not text:
                continue

            if _END_RE.match(text):
                self._close(line_no)
                continue

            statement = self._read_statement(raw, text, line_no)
            self._dispatch(statement)

        if self.stack:
            raise self.error(
                f"'{self.stack[-1].name}' is missing 'end'", len(self.lines) or 1
            )
        if self.annotations:
            raise self.error(
                "Annotation is not followed by a declaration", self.annotation_line
            )
        return self.roots

    def _read_statement(self, raw: str, text: str, line_no: int) -> _Statement:
        indent = len(raw) - len(raw.lstrip())
        lines = [text]
        depth = _bracket_depth(text)
        end_line = line_no
        while self.cursor < len(self.lines):
            nxt = self.lines[self.cursor]
            stripped = nxt.strip()
            # Overloads and union alternatives continue on lines starting with `|`.
            # A trailing comma continues a `use` clause list.
            continues = stripped.startswith("|") or lines[-1].endswith(",")
            if depth <= 0 and not continues:
                break
            if stripped:
                relative = max(0, len(nxt) - len(nxt.lstrip()) - indent)
                lines.append(" " * relative + stripped)
            else:
                lines.append("")
            depth += _bracket_depth(stripped)
            self.cursor += 1
            end_line = self.cursor
        if depth > 0:
            raise self.error("Unbalanced brackets", line_no)
        return _Statement(lines=lines, start_line=line_no, end_line=end_line)

    def _take_pending(self, statement: _Statement) -> Dict[str, Any]:
        lines = [
            line
            for line in (self.comment_line, self.annotation_line, statement.start_line)
            if line is not None
        ]
        pending = {
            "annotations": self.annotations,
            "comments": self.comments,
            "location": Location(min(lines), statement.end_line),
        }
        self.annotations, self.annotation_line = [], None
        self.comments, self.comment_line = [], None
        return pending

    def _close(self, line_no: int) -> None:
        if not self.stack:
            raise self.error("Unexpected 'end'", line_no)
        if self.annotations:
            raise self.error(
                "Annotation is not followed by a declaration", self.annotation_line
            )
        container = self.stack.pop()
        container.location = Location(container.location.start_line, line_no)
        container.trailing_comments = self.comments
        self.comments, self.comment_line = [], None

    def _dispatch(self, statement: _Statement) -> None:
        node = self._build_declaration(statement) or self._build_member(statement)
        if node is None:
            raise self.error(
                f"Unexpected token: {statement.head!r}", statement.start_line
            )

        if self.stack:
            self.stack[-1].children.append(node)
        elif node.is_member:
            raise self.error(
                f"{node.kind.value} '{node.name}' must be declared inside a class, "
                "module or interface",
                statement.start_line,
            )
        else:
            self.roots.append(node)

        if isinstance(node, ContainerDeclaration) and node.location.end_line == _OPEN:
            self.stack.append(node)

    def _build_declaration(self, statement: _Statement) -> Optional[Node]:
        head = statement.head

        if _USE_RE.match(head):
            return self._build_use(statement)

        match = _CONTAINER_RE.match(head)
        if match:
            if match.group("keyword"):
                keyword, name, rest = match.group("keyword", "name", "rest")
            else:
                keyword, name, rest = match.group("ikeyword", "iname", "irest")

            if keyword != "interface" and _ALIAS_DECL_RE.match(rest):
                kind = (
                    NodeKind.CLASS_ALIAS if keyword == "class" else NodeKind.MODULE_ALIAS
                )
                return LeafDeclaration(
                    kind=kind, name=name, text=statement.lines, **self._take_pending(statement)
                )

            lines = list(statement.lines)
            pending = self._take_pending(statement)
            inline_end = _INLINE_END_RE.search(lines[-1])
            if inline_end:
                lines[-1] = lines[-1][: inline_end.start()]
            else:
                # Closed by a later `end` line.
                pending["location"] = Location(pending["location"].start_line, _OPEN)
            return ContainerDeclaration(
                kind=NodeKind(keyword), name=name, text=lines, **pending
            )

        for pattern, kind in (
            (_TYPE_ALIAS_RE, NodeKind.TYPE_ALIAS),
            (_GLOBAL_RE, NodeKind.GLOBAL),
            (_CONSTANT_RE, NodeKind.CONSTANT),
        ):
            match = pattern.match(head)
            if match:
                return LeafDeclaration(
                    kind=kind,
                    name=match.group("name"),
                    text=statement.lines,
                    **self._take_pending(statement),
                )
        return None

    def _build_use(self, statement: _Statement) -> LeafDeclaration:
        if self.stack or any(node.kind != NodeKind.USE for node in self.roots):
            raise self.error(
                "'use' clauses must come before any declaration", statement.start_line
            )
        # The whole clause is the name, so it never collides with a constant.
        name = " ".join(" ".join(statement.lines).split())
        return LeafDeclaration(
            kind=NodeKind.USE,
            name=name,
            text=statement.lines,
            **self._take_pending(statement),
        )

    def _build_member(self, statement: _Statement) -> Optional[Member]:
        head = statement.head
        kind: Optional[NodeKind] = None
        name = ""
        old_name = None

        match = _ALIAS_RE.match(head)
        if match:
            kind, name, old_name = NodeKind.ALIAS, match.group("new"), match.group("old")
        else:
            for pattern, fixed_kind in (
                (_METHOD_RE, NodeKind.METHOD),
                (_CLASS_INSTANCE_VARIABLE_RE, NodeKind.CLASS_INSTANCE_VARIABLE),
                (_CLASS_VARIABLE_RE, NodeKind.CLASS_VARIABLE),
                (_INSTANCE_VARIABLE_RE, NodeKind.INSTANCE_VARIABLE),
                (_MIXIN_RE, None),
                (_ATTRIBUTE_RE, None),
                (_VISIBILITY_RE, None),
            ):
                match = pattern.match(head)
                if not match:
                    continue
                groups = match.groupdict()
                kind = fixed_kind or NodeKind(groups["keyword"])
                name = groups.get("name") or groups["keyword"]
                break

        if kind is None:
            return None

        return Member(
            kind=kind,
            name=name,
            text=statement.lines,
            old_name=old_name,
            **self._take_pending(statement),
        )


class SignatureParser:
    """
    Line-oriented parser for the structural subset of RBS.

    It recognises declarations, members and annotations so they can be
    addressed by name; type expressions are carried as opaque text.
    """

    def parse(self, source: str, file_path: str = "") -> List[Node]:
        return _ParseSession(source, file_path).parse()


def parse_signature(source: str, file_path: str = "") -> List[Node]:
    return SignatureParser().parse(source, file_path)
