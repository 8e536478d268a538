import typer

from rbspatch.common.messaging import protocols

_COLORS = {
    "debug": typer.colors.BRIGHT_BLACK,
    "success": typer.colors.GREEN,
    "warning": typer.colors.YELLOW,
    "error": typer.colors.RED,
}


class CliRenderer(protocols.Renderer):
    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def render(self, message: str, level: str) -> None:
        if level == "debug" and not self.verbose:
            return
        # stdout carries the merged signatures, so messages go to stderr.
        typer.secho(message, fg=_COLORS.get(level), err=True)
