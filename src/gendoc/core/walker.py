from collections.abc import Sequence
from typing import Any

from google.protobuf.message import Message

from gendoc.core.diagnostics import Diagnostics
from gendoc.core.errors import MalformedCoordinateError, StaleCoordinateError, StructuralMismatchError
from gendoc.core.fields import resolve_field


def node_name(node: Any, path: Sequence[int] = ()) -> str:
    """Return the display name of a schema tree node.

    Strings name themselves. Messages whose type declares no ``name`` field
    (options, reserved ranges) are unnamed pass-through nodes and yield ``""``.
    """
    if isinstance(node, str):
        return node
    if not isinstance(node, Message):
        raise StructuralMismatchError(f"Expected a message or string node, found '{type(node).__name__}'", path)

    if "name" not in node.DESCRIPTOR.fields_by_name:
        return ""
    name = node.name
    if not isinstance(name, str):
        return ""
    if not name:
        raise StructuralMismatchError(f"Node of type '{node.DESCRIPTOR.full_name}' has no name", path)
    return name


def resolve_path(
    path: Sequence[int],
    node: Any,
    diagnostics: Diagnostics | None = None,
    depth: int = 0,
) -> list[str]:
    """Walk ``path`` down from ``node`` and return the chain of names it addresses.

    Raises ``StaleCoordinateError`` when a repeated-field index is out of range,
    and ``StructuralMismatchError`` or ``MalformedCoordinateError`` when the path
    cannot belong to this tree at all.
    """
    path = tuple(path)
    name = node_name(node, path)

    if not path:
        if diagnostics is not None:
            diagnostics.debug(depth, "Name of terminus struct: '%s'", name)
        return [name]

    if diagnostics is not None:
        diagnostics.debug(depth, "Name of current struct: '%s' %s", name, list(path))

    try:
        field = resolve_field(node, path[0], diagnostics, depth + 1)
    except StructuralMismatchError as exc:
        raise StructuralMismatchError(str(exc), path) from exc

    # A path ending on the field number points at the field label itself.
    if len(path) == 1:
        raise MalformedCoordinateError(
            f"Path ends on field '{field.label}' of '{name}' instead of an element",
            path,
        )

    if not field.repeated:
        return [name, *resolve_path(path[1:], field.value, diagnostics, depth + 1)]

    index = path[1]
    length = len(field.value)
    if index < 0 or index >= length:
        if diagnostics is not None:
            diagnostics.warning(
                depth,
                "Encountered field '%s' with length '%d' not matching path %s currently being walked",
                field.label,
                length,
                list(path),
            )
        raise StaleCoordinateError(
            f"Index {index} is out of range for field '{field.label}' of length {length}",
            path,
            label=field.label,
            length=length,
        )

    return [name, *resolve_path(path[2:], field.value[index], diagnostics, depth + 1)]
