from typing import Protocol


class Renderer(Protocol):
    """
    Presents a fully formatted bus message.

    `level` is one of "debug", "info", "success", "warning" or "error".
    """

    def render(self, message: str, level: str) -> None: ...
