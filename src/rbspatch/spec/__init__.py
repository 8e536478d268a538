from .models import (
    ATTRIBUTE_KINDS,
    CONTAINER_KINDS,
    LEAF_DECLARATION_KINDS,
    MEMBER_KINDS,
    MIXIN_KINDS,
    VARIABLE_KINDS,
    VISIBILITY_KINDS,
    Annotation,
    ContainerDeclaration,
    LeafDeclaration,
    Location,
    Member,
    Node,
    NodeKind,
    SignatureTree,
)
from .names import MEMBER_SEPARATOR, NAMESPACE_SEPARATOR, QualifiedName
from .errors import PatchError, SignatureSyntaxError
from .protocols import SignatureParserProtocol, SignatureWriterProtocol

__all__ = [
    "ATTRIBUTE_KINDS",
    "CONTAINER_KINDS",
    "LEAF_DECLARATION_KINDS",
    "MEMBER_KINDS",
    "MIXIN_KINDS",
    "VARIABLE_KINDS",
    "VISIBILITY_KINDS",
    "Annotation",
    "ContainerDeclaration",
    "LeafDeclaration",
    "Location",
    "Member",
    "Node",
    "NodeKind",
    "SignatureTree",
    "MEMBER_SEPARATOR",
    "NAMESPACE_SEPARATOR",
    "QualifiedName",
    # Errors
    "PatchError",
    "SignatureSyntaxError",
    # Protocols
    "SignatureParserProtocol",
    "SignatureWriterProtocol",
]
