import logging
from collections.abc import Sequence
from pathlib import Path

from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest, CodeGeneratorResponse
from google.protobuf.descriptor_pb2 import FileDescriptorSet
from google.protobuf.message import DecodeError

from gendoc.core.errors import InputError

logger = logging.getLogger(__name__)


def parse_request(data: bytes) -> CodeGeneratorRequest:
    """Decode the ``CodeGeneratorRequest`` written by protoc."""
    logger.debug("Parsing code generator request (%d bytes)", len(data))
    if not data:
        raise InputError("Empty code generator request")

    request = CodeGeneratorRequest()
    try:
        request.ParseFromString(data)
    except DecodeError as exc:
        raise InputError(f"Failed to unmarshal code generator request: {exc}") from exc

    if not request.proto_file:
        raise InputError("Code generator request contains no proto files")
    logger.debug("Successfully parsed code generator request")
    return request


def request_from_descriptor_set(data: bytes, files: Sequence[str] = ()) -> CodeGeneratorRequest:
    """Build a request from a ``FileDescriptorSet`` as written by ``protoc --descriptor_set_out``.

    Without ``files`` every file in the set is documented.
    """
    if not data:
        raise InputError("Empty descriptor set")

    descriptor_set = FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(data)
    except DecodeError as exc:
        raise InputError(f"Failed to unmarshal descriptor set: {exc}") from exc

    if not descriptor_set.file:
        raise InputError("Descriptor set contains no proto files")

    known = [file.name for file in descriptor_set.file]
    missing = [name for name in files if name not in known]
    if missing:
        raise InputError(f"Files not found in descriptor set: {', '.join(missing)}")

    request = CodeGeneratorRequest()
    request.proto_file.extend(descriptor_set.file)
    request.file_to_generate.extend(files or known)
    return request


def read_request(path: str | Path, descriptor_set: bool = False, files: Sequence[str] = ()) -> CodeGeneratorRequest:
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise InputError(f"Cannot read request file {file_path}: {exc}") from exc

    if descriptor_set:
        return request_from_descriptor_set(data, files)

    request = parse_request(data)
    if files:
        request.ClearField("file_to_generate")
        request.file_to_generate.extend(files)
    return request


def build_response(files: Sequence[tuple[str, str]]) -> CodeGeneratorResponse:
    response = CodeGeneratorResponse(supported_features=CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL)
    for name, content in files:
        response.file.add(name=name, content=content)
    return response


def error_response(message: str) -> CodeGeneratorResponse:
    return CodeGeneratorResponse(
        error=message,
        supported_features=CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL,
    )
