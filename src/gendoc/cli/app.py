from typing import Annotated

import typer

from gendoc.cli.console import configure_logging, err_console
from gendoc.cli.plugin import plugin
from gendoc.cli.render import comments, render
from gendoc.config import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV, make_config
from gendoc.core.errors import ConfigError

app = typer.Typer(
    name="gendoc",
    help="gendoc: attach .proto comments to schema elements and render documentation.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("plugin")(plugin)
app.command("render")(render)
app.command("comments")(comments)


@app.callback()
def _configure(
    log_level: Annotated[
        str, typer.Option("--log-level", envvar=LOG_LEVEL_ENV, help="Logging level (DEBUG, INFO, WARNING, ...).")
    ] = DEFAULT_LOG_LEVEL,
) -> None:
    try:
        config = make_config({"log_level": log_level})
    except ConfigError as exc:
        err_console.print(f"[red]error:[/red] {exc}")
        raise typer.Exit(code=2) from exc
    configure_logging(config.level)


def main() -> None:
    app()
