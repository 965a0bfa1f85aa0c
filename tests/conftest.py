"""Shared fixtures and helpers for tests."""

import pytest
from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest
from google.protobuf.descriptor_pb2 import FileDescriptorProto

from tests.builders import F, RecordingTree, add_order_comments, build_order_file, build_request


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


@pytest.fixture
def order_file() -> FileDescriptorProto:
    return build_order_file()


@pytest.fixture
def commented_order_file() -> FileDescriptorProto:
    return add_order_comments(build_order_file())


@pytest.fixture
def minimal_file() -> FileDescriptorProto:
    """File 'OrderFile' with message 'Order' holding the single field 'id'."""
    file = FileDescriptorProto(name="OrderFile", syntax="proto3")
    order = file.message_type.add(name="Order")
    order.field.add(name="id", number=1, label=F.LABEL_OPTIONAL, type=F.TYPE_STRING)
    return file


@pytest.fixture
def request_message() -> CodeGeneratorRequest:
    return build_request()


@pytest.fixture
def recording_tree() -> RecordingTree:
    return RecordingTree()
