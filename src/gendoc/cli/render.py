from pathlib import Path
from typing import Annotated

import typer
from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gendoc.cli.console import err_console
from gendoc.config import DEFAULT_OUTPUT, make_config
from gendoc.core.comments import CollectionSummary, collect_comments, resolve_comments
from gendoc.core.diagnostics import Diagnostics
from gendoc.core.errors import GenDocError, ResolutionError
from gendoc.core.request import read_request
from gendoc.doctree import create_tree

console = Console()

RequestArg = Annotated[
    Path,
    typer.Argument(help="Serialized CodeGeneratorRequest, or FileDescriptorSet with --descriptor-set."),
]
DescriptorSetOpt = Annotated[
    bool,
    typer.Option("--descriptor-set", help="Input was written by protoc --include_source_info --descriptor_set_out."),
]
FileOpt = Annotated[
    list[str] | None,
    typer.Option("--file", "-f", help="Proto file to document (repeatable, default: all requested files)."),
]


def _load(request_file: Path, descriptor_set: bool, files: list[str] | None) -> CodeGeneratorRequest:
    try:
        return read_request(request_file, descriptor_set=descriptor_set, files=files or ())
    except GenDocError as exc:
        err_console.print(f"[red]error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


def _fail(exc: ResolutionError) -> typer.Exit:
    err_console.print(f"[red]error:[/red] {exc} ({exc.location})")
    return typer.Exit(code=1)


def render(
    request_file: RequestArg,
    descriptor_set: DescriptorSetOpt = False,
    file: FileOpt = None,
    output_format: Annotated[str, typer.Option("--format", help="Documentation format: markdown or tree.")] = "markdown",
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write to this path instead of stdout.")] = None,
) -> None:
    """Render documentation for a compiled schema."""
    try:
        config = make_config({"format": output_format, "output": output.name if output else DEFAULT_OUTPUT})
    except GenDocError as exc:
        err_console.print(f"[red]error:[/red] {exc}")
        raise typer.Exit(code=2) from exc

    request = _load(request_file, descriptor_set, file)
    tree = create_tree(request, config.format)
    try:
        summary = collect_comments(request.file_to_generate, request.proto_file, tree, Diagnostics())
    except ResolutionError as exc:
        raise _fail(exc) from exc

    text = tree.render()
    if output is None:
        typer.echo(text, nl=False)
    else:
        output.write_text(text, encoding="utf-8")
        err_console.print(f"[green]Wrote[/green] {output}")
    err_console.print(f"[green]Attached[/green] {summary.attached} comment(s), skipped {summary.stale} stale location(s)")


def comments(
    request_file: RequestArg,
    descriptor_set: DescriptorSetOpt = False,
    file: FileOpt = None,
) -> None:
    """List every comment together with the element it documents."""
    request = _load(request_file, descriptor_set, file)
    targets = set(request.file_to_generate)
    summary = CollectionSummary()

    table = Table(show_lines=False)
    for header in ("file", "element", "path", "comment"):
        table.add_column(header)

    for proto_file in request.proto_file:
        if proto_file.name not in targets:
            continue
        try:
            resolved = resolve_comments(proto_file, Diagnostics(), summary)
        except ResolutionError as exc:
            raise _fail(exc) from exc
        for item in resolved:
            table.add_row(proto_file.name, item.qualified_name, str(item.path), escape(item.comment.strip()))

    console.print(table)
    console.print(f"({summary.walked} walked, {summary.stale} stale)")
