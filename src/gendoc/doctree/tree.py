import logging
from collections.abc import Sequence

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest
from google.protobuf.descriptor_pb2 import (
    DescriptorProto,
    EnumDescriptorProto,
    FieldDescriptorProto,
    FileDescriptorProto,
    MethodDescriptorProto,
    ServiceDescriptorProto,
)

from gendoc.doctree.node import DocNode
from gendoc.doctree.render import render

logger = logging.getLogger(__name__)

_SCALAR_TYPE_NAMES = {
    FieldDescriptorProto.TYPE_DOUBLE: "double",
    FieldDescriptorProto.TYPE_FLOAT: "float",
    FieldDescriptorProto.TYPE_INT64: "int64",
    FieldDescriptorProto.TYPE_UINT64: "uint64",
    FieldDescriptorProto.TYPE_INT32: "int32",
    FieldDescriptorProto.TYPE_FIXED64: "fixed64",
    FieldDescriptorProto.TYPE_FIXED32: "fixed32",
    FieldDescriptorProto.TYPE_BOOL: "bool",
    FieldDescriptorProto.TYPE_STRING: "string",
    FieldDescriptorProto.TYPE_BYTES: "bytes",
    FieldDescriptorProto.TYPE_UINT32: "uint32",
    FieldDescriptorProto.TYPE_SFIXED32: "sfixed32",
    FieldDescriptorProto.TYPE_SFIXED64: "sfixed64",
    FieldDescriptorProto.TYPE_SINT32: "sint32",
    FieldDescriptorProto.TYPE_SINT64: "sint64",
}


class DocTree:
    """Documentation elements of the files being generated, keyed by name chains."""

    def __init__(self, files: Sequence[DocNode] = (), output_format: str = "markdown") -> None:
        self.files: list[DocNode] = list(files)
        self.output_format = output_format
        self.unmatched: list[list[str]] = []

    def find(self, name_chain: Sequence[str]) -> DocNode | None:
        if not name_chain:
            return None
        node = next((f for f in self.files if f.name == name_chain[0]), None)
        for name in name_chain[1:]:
            if node is None:
                return None
            node = node.child(name)
        return node

    def attach_comment(self, name_chain: Sequence[str], comment: str) -> None:
        node = self.find(name_chain)
        if node is None:
            logger.warning("No documented element matches %s", list(name_chain))
            self.unmatched.append(list(name_chain))
            return
        node.comment = comment

    def render(self) -> str:
        return render(self.files, self.output_format)


# ---------------------------------------------------------------------------
# Construction from descriptors
# ---------------------------------------------------------------------------


def _field_label(fd: FieldDescriptorProto, syntax: str) -> str:
    if fd.label == FieldDescriptorProto.LABEL_REPEATED:
        return "repeated "
    if fd.label == FieldDescriptorProto.LABEL_REQUIRED:
        return "required "
    if fd.proto3_optional or syntax == "proto2":
        return "optional "
    return ""


def _type_name(fd: FieldDescriptorProto) -> str:
    if fd.type in _SCALAR_TYPE_NAMES:
        return _SCALAR_TYPE_NAMES[fd.type]
    return fd.type_name.lstrip(".")


def _map_entries(message: DescriptorProto) -> dict[str, DescriptorProto]:
    return {nested.name: nested for nested in message.nested_type if nested.options.map_entry}


def _field_signature(fd: FieldDescriptorProto, syntax: str, map_entries: dict[str, DescriptorProto]) -> str:
    entry_name = fd.type_name.rsplit(".", 1)[-1]
    if fd.type == FieldDescriptorProto.TYPE_MESSAGE and entry_name in map_entries:
        key, value = map_entries[entry_name].field[0], map_entries[entry_name].field[1]
        return f"map<{_type_name(key)}, {_type_name(value)}>"
    return f"{_field_label(fd, syntax)}{_type_name(fd)}"


def _field_node(fd: FieldDescriptorProto, syntax: str, map_entries: dict[str, DescriptorProto], kind: str) -> DocNode:
    signature = _field_signature(fd, syntax, map_entries)
    if kind == "extension":
        signature = f"{signature} (extends {fd.extendee.lstrip('.')})"
    return DocNode(kind=kind, name=fd.name, signature=signature, number=fd.number)


def _enum_node(enum: EnumDescriptorProto) -> DocNode:
    node = DocNode(kind="enum", name=enum.name)
    for value in enum.value:
        node.children.append(DocNode(kind="value", name=value.name, number=value.number))
    return node


def _message_node(message: DescriptorProto, syntax: str) -> DocNode:
    node = DocNode(kind="message", name=message.name)
    map_entries = _map_entries(message)
    oneofs = [oneof.name for oneof in message.oneof_decl]

    for fd in message.field:
        child = _field_node(fd, syntax, map_entries, "field")
        if fd.HasField("oneof_index") and not fd.proto3_optional:
            child.signature = f"{child.signature} (oneof {oneofs[fd.oneof_index]})"
        node.children.append(child)
    for fd in message.extension:
        node.children.append(_field_node(fd, syntax, map_entries, "extension"))
    for index, name in enumerate(oneofs):
        # Synthetic oneofs only wrap a proto3 optional field.
        synthetic = any(fd.proto3_optional and fd.oneof_index == index for fd in message.field)
        if not synthetic:
            node.children.append(DocNode(kind="oneof", name=name))
    for nested in message.nested_type:
        if nested.name not in map_entries:
            node.children.append(_message_node(nested, syntax))
    for enum in message.enum_type:
        node.children.append(_enum_node(enum))
    return node


def _method_signature(method: MethodDescriptorProto) -> str:
    request = f"stream {method.input_type.lstrip('.')}" if method.client_streaming else method.input_type.lstrip(".")
    response = f"stream {method.output_type.lstrip('.')}" if method.server_streaming else method.output_type.lstrip(".")
    return f"rpc {method.name}({request}) returns ({response})"


def _service_node(service: ServiceDescriptorProto) -> DocNode:
    node = DocNode(kind="service", name=service.name)
    for method in service.method:
        node.children.append(DocNode(kind="method", name=method.name, signature=_method_signature(method)))
    return node


def file_node(file: FileDescriptorProto) -> DocNode:
    syntax = file.syntax or "proto2"
    node = DocNode(kind="file", name=file.name, signature=file.package)
    for message in file.message_type:
        node.children.append(_message_node(message, syntax))
    for enum in file.enum_type:
        node.children.append(_enum_node(enum))
    for service in file.service:
        node.children.append(_service_node(service))
    for fd in file.extension:
        node.children.append(_field_node(fd, syntax, {}, "extension"))
    return node


def create_tree(request: CodeGeneratorRequest, output_format: str = "markdown") -> DocTree:
    targets = set(request.file_to_generate)
    files = [file_node(file) for file in request.proto_file if file.name in targets]
    logger.debug("Created documentation tree for %d file(s)", len(files))
    return DocTree(files, output_format)
