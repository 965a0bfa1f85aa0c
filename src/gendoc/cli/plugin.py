import logging
import sys
from typing import BinaryIO

import typer

from gendoc.cli.console import configure_logging
from gendoc.config import load_config
from gendoc.core.errors import ConfigError, InputError
from gendoc.core.plugin import run_plugin
from gendoc.core.request import error_response, parse_request

logger = logging.getLogger(__name__)


def run_plugin_io(stdin: BinaryIO, stdout: BinaryIO) -> int:
    """Read a CodeGeneratorRequest from ``stdin`` and write the response to ``stdout``."""
    try:
        request = parse_request(stdin.read())
    except InputError as exc:
        logger.error("%s", exc)
        return 1

    try:
        config = load_config(request.parameter)
    except ConfigError as exc:
        logger.error("%s", exc)
        response = error_response(str(exc))
    else:
        configure_logging(config.level)
        response = run_plugin(request, config)

    stdout.write(response.SerializeToString())
    stdout.flush()
    return 0


def plugin() -> None:
    """Run as a protoc plugin (request on stdin, response on stdout)."""
    code = run_plugin_io(sys.stdin.buffer, sys.stdout.buffer)
    if code:
        raise typer.Exit(code=code)


def protoc_main() -> None:
    configure_logging()
    raise SystemExit(run_plugin_io(sys.stdin.buffer, sys.stdout.buffer))
