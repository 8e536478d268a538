from .app import PatchApp
from .config import PatchConfig, load_config_from_path
from .spec import PatchError, SignatureSyntaxError

__all__ = [
    "PatchApp",
    "PatchConfig",
    "load_config_from_path",
    "PatchError",
    "SignatureSyntaxError",
]
