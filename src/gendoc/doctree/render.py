import textwrap
from collections.abc import Sequence

from gendoc.doctree.node import DocNode

_INDENT = "    "


def clean_comment(comment: str) -> str:
    """Strip the leading space protoc keeps after ``//`` on every line."""
    return textwrap.dedent(comment).strip()


def _cell(comment: str) -> str:
    text = " ".join(line.strip() for line in clean_comment(comment).splitlines() if line.strip())
    return text.replace("|", "\\|")


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def _md_comment(lines: list[str], comment: str) -> None:
    text = clean_comment(comment)
    if text:
        lines.extend([text, ""])


def _md_fields(lines: list[str], fields: list[DocNode]) -> None:
    if not fields:
        return
    lines.append("| Field | Type | Number | Description |")
    lines.append("| --- | --- | --- | --- |")
    for fd in fields:
        lines.append(f"| {fd.name} | `{fd.signature}` | {fd.number} | {_cell(fd.comment)} |")
    lines.append("")


def _md_enum(lines: list[str], enum: DocNode, qualified: str, level: int) -> None:
    lines.extend([f"{'#' * level} enum {qualified}", ""])
    _md_comment(lines, enum.comment)
    lines.append("| Value | Number | Description |")
    lines.append("| --- | --- | --- |")
    for value in enum.children_of("value"):
        lines.append(f"| {value.name} | {value.number} | {_cell(value.comment)} |")
    lines.append("")


def _md_message(lines: list[str], message: DocNode, qualified: str, level: int) -> None:
    lines.extend([f"{'#' * level} message {qualified}", ""])
    _md_comment(lines, message.comment)
    _md_fields(lines, message.children_of("field") + message.children_of("extension"))
    for oneof in message.children_of("oneof"):
        if clean_comment(oneof.comment):
            lines.extend([f"oneof `{oneof.name}`: {_cell(oneof.comment)}", ""])
    for nested in message.children_of("message"):
        _md_message(lines, nested, f"{qualified}.{nested.name}", level)
    for enum in message.children_of("enum"):
        _md_enum(lines, enum, f"{qualified}.{enum.name}", level)


def _md_service(lines: list[str], service: DocNode, level: int) -> None:
    lines.extend([f"{'#' * level} service {service.name}", ""])
    _md_comment(lines, service.comment)
    for method in service.children_of("method"):
        lines.extend([f"{'#' * (level + 1)} {method.name}", "", f"`{method.signature}`", ""])
        _md_comment(lines, method.comment)


def render_markdown(files: Sequence[DocNode]) -> str:
    lines: list[str] = []
    for file in files:
        lines.extend([f"# {file.name}", ""])
        if file.signature:
            lines.extend([f"Package: `{file.signature}`", ""])
        _md_comment(lines, file.comment)
        for service in file.children_of("service"):
            _md_service(lines, service, 2)
        for message in file.children_of("message"):
            _md_message(lines, message, message.name, 2)
        for enum in file.children_of("enum"):
            _md_enum(lines, enum, enum.name, 2)
        extensions = file.children_of("extension")
        if extensions:
            lines.extend(["## Extensions", ""])
            _md_fields(lines, extensions)
    return "\n".join(lines).rstrip() + "\n" if lines else ""


# ---------------------------------------------------------------------------
# Plain tree
# ---------------------------------------------------------------------------


def _tree_node(lines: list[str], node: DocNode, depth: int) -> None:
    parts = [node.kind, node.name]
    if node.signature:
        parts.append(node.signature)
    if node.number is not None:
        parts.append(f"= {node.number}")
    lines.append(f"{_INDENT * depth}{' '.join(parts)}")
    for line in clean_comment(node.comment).splitlines():
        lines.append(f"{_INDENT * (depth + 1)}// {line}".rstrip())
    for child in node.children:
        _tree_node(lines, child, depth + 1)


def render_tree(files: Sequence[DocNode]) -> str:
    lines: list[str] = []
    for file in files:
        _tree_node(lines, file, 0)
    return "".join(f"{line}\n" for line in lines)


def render(files: Sequence[DocNode], output_format: str = "markdown") -> str:
    if output_format == "tree":
        return render_tree(files)
    if output_format == "markdown":
        return render_markdown(files)
    raise ValueError(f"Unsupported output format '{output_format}'")
