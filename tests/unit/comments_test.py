"""Unit tests for the comment collector."""

from typing import Any

import logging

import pytest
from google.protobuf.compiler.plugin_pb2 import CodeGeneratorRequest
from google.protobuf.descriptor_pb2 import FileDescriptorProto

from gendoc.core import comments as comments_module
from gendoc.core.comments import (
    CollectionSummary,
    collect_comments,
    collect_file_comments,
    iter_comment_records,
    resolve_comments,
)
from gendoc.core.diagnostics import Diagnostics
from gendoc.core.errors import MalformedCoordinateError, StructuralMismatchError
from tests.builders import RecordingTree, add_location

EXPECTED_COMMENTS = [
    (["OrderFile", "Order"], " An order.\n"),
    (["OrderFile", "Order", "id"], " Unique id.\n"),
    (["OrderFile", "Order", "Line", "sku"], " Stock keeping unit.\n"),
    (["OrderFile", "Order", "payment"], " How it was paid.\n"),
    (["OrderFile", "Status", "STATUS_PAID"], " Paid in full.\n"),
    (["OrderFile", "OrderService"], " Order lookups.\n"),
    (["OrderFile", "OrderService", "GetOrder"], " Fetch one order.\n"),
]


def test_iter_comment_records(commented_order_file: FileDescriptorProto) -> None:
    records = list(iter_comment_records(commented_order_file))

    assert len(records) == len(commented_order_file.source_code_info.location)
    assert records[1].file_name == "OrderFile"
    assert records[1].path == [4, 0]
    assert records[1].leading == " An order.\n"
    assert records[7].detached == [" Requests follow.\n"]


def test_collect_comments_attaches_in_location_order(
    request_message: CodeGeneratorRequest, recording_tree: RecordingTree
) -> None:
    summary = collect_comments(request_message.file_to_generate, request_message.proto_file, recording_tree)

    assert recording_tree.comments == EXPECTED_COMMENTS
    assert summary.files == 1
    assert summary.attached == len(EXPECTED_COMMENTS)
    assert summary.stale == 0


def test_files_outside_generate_set_are_skipped(
    request_message: CodeGeneratorRequest, recording_tree: RecordingTree
) -> None:
    # dep.proto holds a malformed path that would abort the run if it were walked.
    summary = collect_comments(["OrderFile"], request_message.proto_file, recording_tree)
    assert all(chain[0] == "OrderFile" for chain, _ in recording_tree.comments)
    assert summary.files == 1

    with pytest.raises(MalformedCoordinateError):
        collect_comments(["dep.proto"], request_message.proto_file, RecordingTree())


def test_nothing_is_processed_when_no_file_is_requested(
    request_message: CodeGeneratorRequest, recording_tree: RecordingTree
) -> None:
    summary = collect_comments([], request_message.proto_file, recording_tree)
    assert recording_tree.comments == []
    assert summary == CollectionSummary()


def test_trivial_comments_never_reach_the_walker(
    order_file: FileDescriptorProto, recording_tree: RecordingTree, monkeypatch: pytest.MonkeyPatch
) -> None:
    add_location(order_file, [4, 0], "x", ["", "y"])
    add_location(order_file, [4, 0, 2], "")
    add_location(order_file, [99], "\n")
    walked: list[Any] = []
    monkeypatch.setattr(comments_module, "resolve_path", lambda path, *args, **kwargs: walked.append(path))

    summary = collect_file_comments(order_file, recording_tree)

    assert walked == []
    assert summary.locations == 3
    assert summary.walked == 0
    assert recording_tree.comments == []


def test_two_character_comment_is_significant(order_file: FileDescriptorProto, recording_tree: RecordingTree) -> None:
    add_location(order_file, [4, 0], "ok")
    collect_file_comments(order_file, recording_tree)
    assert recording_tree.comments == [(["OrderFile", "Order"], "ok")]


def test_detached_comments_are_logged_but_not_walked(
    order_file: FileDescriptorProto, recording_tree: RecordingTree
) -> None:
    add_location(order_file, [4, 1], "", [" Section header.\n", " Another.\n"])
    diagnostics = Diagnostics()

    summary = collect_file_comments(order_file, recording_tree, diagnostics)

    assert summary.walked == 0
    assert summary.detached == 2
    assert recording_tree.comments == []
    assert "Leading detached comment: 'Section header.'" in diagnostics.render()


def test_stale_record_is_skipped_and_run_continues(
    minimal_file: FileDescriptorProto, recording_tree: RecordingTree
) -> None:
    add_location(minimal_file, [4, 0, 2, 5], " Written against an older revision.\n")
    add_location(minimal_file, [4, 0, 2, 0], " The id.\n")

    summary = collect_file_comments(minimal_file, recording_tree)

    assert summary.stale == 1
    assert summary.attached == 1
    assert recording_tree.comments == [(["OrderFile", "Order", "id"], " The id.\n")]


def test_stale_record_warns_once(
    minimal_file: FileDescriptorProto, recording_tree: RecordingTree, caplog: pytest.LogCaptureFixture
) -> None:
    add_location(minimal_file, [4, 0, 2, 5], " Written against an older revision.\n")

    with caplog.at_level(logging.DEBUG, logger="gendoc"):
        collect_file_comments(minimal_file, recording_tree)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "not matching path" in warnings[0].getMessage()
    assert "Skipping stale comment in OrderFile at path [4, 0, 2, 5]" in caplog.text


def test_structural_mismatch_aborts(order_file: FileDescriptorProto, recording_tree: RecordingTree) -> None:
    add_location(order_file, [4, 0, 99, 0], " Unknown field.\n")
    with pytest.raises(StructuralMismatchError) as excinfo:
        collect_file_comments(order_file, recording_tree)

    assert excinfo.value.path == [4, 0, 99, 0]
    assert excinfo.value.file_name == "OrderFile"
    assert excinfo.value.location == "OrderFile at path [4, 0, 99, 0]"


def test_field_label_path_aborts(order_file: FileDescriptorProto, recording_tree: RecordingTree) -> None:
    add_location(order_file, [12], " Comment above the syntax statement.\n")
    with pytest.raises(MalformedCoordinateError):
        collect_file_comments(order_file, recording_tree)


def test_license_header_above_syntax_is_not_walked(
    order_file: FileDescriptorProto, recording_tree: RecordingTree
) -> None:
    add_location(order_file, [12], "", [" Copyright 2024 Shop Inc.\n Licensed under the Apache License.\n"])
    add_location(order_file, [4, 0], " An order.\n")
    add_location(order_file, [4, 0, 2, 0], " Unique id.\n")

    summary = collect_file_comments(order_file, recording_tree)

    assert summary.walked == 2
    assert summary.detached == 1
    assert recording_tree.comments == [
        (["OrderFile", "Order"], " An order.\n"),
        (["OrderFile", "Order", "id"], " Unique id.\n"),
    ]


def test_resolve_comments(commented_order_file: FileDescriptorProto) -> None:
    summary = CollectionSummary()
    resolved = resolve_comments(commented_order_file, summary=summary)

    assert [item.name_chain for item in resolved] == [chain for chain, _ in EXPECTED_COMMENTS]
    assert resolved[2].qualified_name == "Order.Line.sku"
    assert resolved[2].path == [4, 0, 3, 0, 2, 0]
    assert summary.walked == len(EXPECTED_COMMENTS)
