from .loader import PatchConfig, load_config_from_path

__all__ = ["PatchConfig", "load_config_from_path"]
