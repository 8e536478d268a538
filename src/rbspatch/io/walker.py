from pathlib import Path
from typing import Iterable, Iterator, Sequence

DEFAULT_SUFFIXES = (".rbs",)


def iter_signature_files(
    path: Path, suffixes: Sequence[str] = DEFAULT_SUFFIXES
) -> Iterator[Path]:
    """
    Yields signature files under `path` in a stable order.

    Entries of a directory are visited sorted by name, files and subdirectories
    interleaved, recursing depth-first. A file given directly is yielded as is,
    whatever its suffix.
    """
    if not path.exists():
        raise FileNotFoundError(f"No such file or directory: '{path}'")
    if path.is_file():
        yield path
        return
    yield from _walk(path, tuple(suffixes))


def _walk(directory: Path, suffixes: Iterable[str]) -> Iterator[Path]:
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            yield from _walk(entry, suffixes)
        elif entry.suffix in suffixes:
            yield entry
