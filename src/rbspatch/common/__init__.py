from .pointer import L, SemanticPointer
from .catalog import MessageCatalog, catalog
from .messaging import MessageBus, Renderer, bus

__all__ = [
    "L",
    "SemanticPointer",
    "MessageCatalog",
    "catalog",
    "MessageBus",
    "Renderer",
    "bus",
]
