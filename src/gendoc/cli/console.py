import logging

from rich.console import Console
from rich.logging import RichHandler

# stdout carries the plugin protocol, everything human-readable goes to stderr.
err_console = Console(stderr=True)


def configure_logging(level: int | str = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=False)],
        force=True,
    )
