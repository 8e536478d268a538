import logging

import typer

from rbspatch.common import L, bus, catalog
from .commands import merge_command
from .rendering import CliRenderer

app = typer.Typer(
    name="rbs-patch",
    help=catalog.get(L.cli.app.description),
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=catalog.get(L.cli.option.verbose.help)
    ),
):
    # The CLI is the composition root: it picks the renderer and log level.
    bus.set_renderer(CliRenderer(verbose=verbose))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command(name="merge", help=catalog.get(L.cli.command.merge.help))(merge_command)


if __name__ == "__main__":
    app()
