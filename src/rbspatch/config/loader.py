import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib


@dataclass
class PatchConfig:
    patch_paths: List[str] = field(default_factory=list)
    output: Optional[str] = None
    suffixes: List[str] = field(default_factory=lambda: [".rbs"])
    sync_stand_ins: bool = False
    # Directory holding the pyproject.toml the values came from; relative
    # paths above resolve against it.
    root: Optional[Path] = None

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute() or self.root is None:
            return candidate
        return self.root / candidate


def _find_pyproject_toml(search_path: Path) -> Path:
    current_dir = search_path.resolve()
    while True:
        pyproject_path = current_dir / "pyproject.toml"
        if pyproject_path.is_file():
            return pyproject_path
        if current_dir.parent == current_dir:
            break
        current_dir = current_dir.parent
    raise FileNotFoundError("Could not find pyproject.toml in any parent directory.")


def load_config_from_path(search_path: Path) -> PatchConfig:
    try:
        config_path = _find_pyproject_toml(search_path)
    except FileNotFoundError:
        return PatchConfig()

    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    tool_data: Dict[str, Any] = data.get("tool", {}).get("rbs-patch", {})

    defaults = PatchConfig()
    return PatchConfig(
        patch_paths=[str(p) for p in tool_data.get("patch_paths", [])],
        output=tool_data.get("output"),
        suffixes=list(tool_data.get("suffixes", defaults.suffixes)),
        sync_stand_ins=bool(tool_data.get("sync_stand_ins", False)),
        root=config_path.parent,
    )
