import logging
from pathlib import Path
from typing import List, Optional, Set, Union

from rbspatch.config import PatchConfig
from rbspatch.engine import MergeEngine
from rbspatch.io import SignatureParser, SignatureWriter, iter_signature_files
from rbspatch.spec import (
    SignatureParserProtocol,
    SignatureTree,
    SignatureWriterProtocol,
)

log = logging.getLogger(__name__)


class PatchApp:
    """
    Owns one merged signature tree and applies patch layers to it in order.

    Each `apply` call is a patch layer. Layer order is significant: a later
    layer sees the result of every earlier one, so anchors and override/delete
    targets resolve against what has been merged so far.
    """

    def __init__(
        self,
        source: Optional[str] = None,
        parser: Optional[SignatureParserProtocol] = None,
        writer: Optional[SignatureWriterProtocol] = None,
        config: Optional[PatchConfig] = None,
    ):
        self.config = config or PatchConfig()
        self.parser = parser or SignatureParser()
        self.writer = writer or SignatureWriter()
        self.engine = MergeEngine(sync_stand_ins=self.config.sync_stand_ins)
        self._seen: Set[Path] = set()
        if source is not None:
            self.apply(source)

    @property
    def tree(self) -> SignatureTree:
        return self.engine.tree

    def apply(
        self, source: Optional[str] = None, *, path: Union[str, Path, None] = None
    ) -> List[Path]:
        """
        Applies one patch layer from `source` text, or every signature file
        under `path`.

        Returns the files applied by this call; files seen by an earlier call
        are skipped. Parse errors propagate before the tree is touched.
        """
        if (source is None) == (path is None):
            raise ValueError("apply() takes either source text or path=, not both")

        if source is not None:
            self._apply_text(source)
            return []

        applied: List[Path] = []
        for file_path in iter_signature_files(Path(path), self.config.suffixes):
            resolved = file_path.resolve()
            if resolved in self._seen:
                log.debug(f"Skipping already applied file {file_path}")
                continue
            self._apply_text(file_path.read_text(encoding="utf-8"), str(file_path))
            self._seen.add(resolved)
            applied.append(file_path)
        return applied

    def _apply_text(self, source: str, file_path: str = "") -> None:
        nodes = self.parser.parse(source, file_path)
        log.debug(f"Merging {len(nodes)} declarations from {file_path or '<string>'}")
        self.engine.merge(nodes)

    def render(self) -> str:
        return self.writer.write(self.tree)

    def __str__(self) -> str:
        return self.render()
