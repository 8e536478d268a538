import json
import os
from importlib import resources
from typing import Dict, Optional, Union

from .pointer import SemanticPointer


class MessageCatalog:
    """
    Resolves semantic pointers to message templates.

    Templates ship as JSON under `assets/needle/<lang>/`. Lookup falls back from
    the requested language to the default one, then to the key itself.
    """

    def __init__(self, default_lang: str = "en"):
        self.default_lang = default_lang
        self._registry: Dict[str, Dict[str, str]] = {}

    def _load(self, lang: str) -> Dict[str, str]:
        if lang in self._registry:
            return self._registry[lang]

        merged: Dict[str, str] = {}
        root = resources.files("rbspatch.common") / "assets" / "needle" / lang
        if root.is_dir():
            for entry in sorted(root.iterdir(), key=lambda e: e.name):
                if not entry.name.endswith(".json"):
                    continue
                content = json.loads(entry.read_text(encoding="utf-8"))
                merged.update({str(k): str(v) for k, v in content.items()})

        self._registry[lang] = merged
        return merged

    def get(
        self, pointer: Union[SemanticPointer, str], lang: Optional[str] = None
    ) -> str:
        key = str(pointer)
        target_lang = lang or os.getenv("RBS_PATCH_LANG", self.default_lang)

        val = self._load(target_lang).get(key)
        if val is None and target_lang != self.default_lang:
            val = self._load(self.default_lang).get(key)
        return key if val is None else val


catalog = MessageCatalog()
