from .core import PatchApp

__all__ = ["PatchApp"]
