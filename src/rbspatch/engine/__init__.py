from .directives import (
    Directive,
    DirectiveKind,
    classify,
    parse_directive,
    strip_directive,
)
from .indexer import DeclarationIndex, IndexEntry
from .merger import MergeEngine
from .relocation import RelocationPass

__all__ = [
    "Directive",
    "DirectiveKind",
    "classify",
    "parse_directive",
    "strip_directive",
    "DeclarationIndex",
    "IndexEntry",
    "MergeEngine",
    "RelocationPass",
]
