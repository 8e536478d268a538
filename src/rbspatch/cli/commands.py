from pathlib import Path
from typing import List, Optional

import typer

from rbspatch.app import PatchApp
from rbspatch.common import L, bus, catalog
from rbspatch.config import load_config_from_path
from rbspatch.spec import SignatureSyntaxError


def merge_command(
    paths: Optional[List[Path]] = typer.Argument(
        None, help=catalog.get(L.cli.argument.paths.help)
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help=catalog.get(L.cli.option.output.help)
    ),
):
    config = load_config_from_path(Path.cwd())
    inputs = list(paths or [config.resolve(p) for p in config.patch_paths])
    if not inputs:
        bus.error(L.merge.error.no_inputs)
        raise typer.Exit(code=1)

    app = PatchApp(config=config)
    total = 0
    for path in inputs:
        try:
            applied = app.apply(path=path)
        except FileNotFoundError:
            bus.error(L.merge.error.not_found, path=path)
            raise typer.Exit(code=1)
        except SignatureSyntaxError as e:
            bus.error(L.merge.error.syntax, error=e)
            raise typer.Exit(code=1)
        if not applied:
            bus.debug(L.merge.layer.skipped, path=path)
        for file_path in applied:
            bus.debug(L.merge.layer.applied, path=file_path)
        total += len(applied)
    bus.info(L.merge.summary, count=total)

    rendered = app.render()
    target = output or (config.resolve(config.output) if config.output else None)
    if target is None:
        typer.echo(rendered, nl=False)
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(rendered, encoding="utf-8")
    bus.success(L.merge.output.written, path=target)
