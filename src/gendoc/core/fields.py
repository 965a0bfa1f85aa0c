from dataclasses import dataclass
from typing import Any

from google.protobuf.message import Message

from gendoc.core.diagnostics import Diagnostics
from gendoc.core.errors import StructuralMismatchError

_SCALAR_TYPES = (str, bytes, int, float, bool)


@dataclass(frozen=True)
class ResolvedField:
    value: Any
    label: str
    repeated: bool


def is_repeated_slot(value: Any) -> bool:
    """Repeated protobuf fields surface as containers, never as messages or scalars."""
    return not isinstance(value, (Message, *_SCALAR_TYPES))


def resolve_field(
    node: Any,
    field_number: int,
    diagnostics: Diagnostics | None = None,
    depth: int = 0,
) -> ResolvedField:
    """Return the slot of ``node`` tagged with ``field_number``.

    The lookup goes through the descriptor attached to the node's message type,
    so fields added to descriptor.proto later are resolved without changes here.
    """
    if not isinstance(node, Message):
        raise StructuralMismatchError(
            f"Cannot resolve field {field_number} on non-message node of type '{type(node).__name__}'"
        )

    descriptor = node.DESCRIPTOR
    field = descriptor.fields_by_number.get(field_number)
    if field is None:
        raise StructuralMismatchError(
            f"Couldn't find a proto field with the given index '{field_number}' on '{descriptor.full_name}'"
        )

    value = getattr(node, field.name)
    repeated = is_repeated_slot(value)
    if diagnostics is not None:
        diagnostics.debug(
            depth,
            "Field '%02d' labeled '%s' on '%s' (%s)",
            field_number,
            field.name,
            descriptor.name,
            "repeated" if repeated else "singular",
        )
    return ResolvedField(value=value, label=field.name, repeated=repeated)
