import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from google.protobuf.descriptor_pb2 import FileDescriptorProto

from gendoc.core.diagnostics import Diagnostics
from gendoc.core.errors import ResolutionError, StaleCoordinateError
from gendoc.core.ports.doctree import DocumentationTree
from gendoc.core.walker import resolve_path
from gendoc.models import CommentRecord, ResolvedComment, is_significant

logger = logging.getLogger(__name__)


@dataclass
class CollectionSummary:
    files: int = 0
    locations: int = 0
    walked: int = 0
    attached: int = 0
    stale: int = 0
    detached: int = 0


def iter_comment_records(file: FileDescriptorProto) -> Iterator[CommentRecord]:
    for location in file.source_code_info.location:
        yield CommentRecord(
            file_name=file.name,
            path=list(location.path),
            leading=location.leading_comments,
            detached=list(location.leading_detached_comments),
        )


def _log_comments(record: CommentRecord, diagnostics: Diagnostics) -> None:
    if record.has_leading:
        diagnostics.info(1, "Leading Comments: '%s' %s", record.leading.strip(), record.path)
    for comment in record.detached:
        diagnostics.info(1, "Leading detached comment: '%s'", comment.strip())


def _resolve_records(
    file: FileDescriptorProto,
    diagnostics: Diagnostics,
    summary: CollectionSummary,
) -> Iterator[ResolvedComment]:
    for record in iter_comment_records(file):
        summary.locations += 1
        _log_comments(record, diagnostics)
        summary.detached += sum(1 for comment in record.detached if is_significant(comment))

        # Detached comments are logged above but never attached; only a leading comment is walked.
        if not record.has_leading:
            continue

        summary.walked += 1
        try:
            name_chain = resolve_path(record.path, file, diagnostics, depth=1)
        except StaleCoordinateError as exc:
            exc.locate(file.name, record.path)
            summary.stale += 1
            diagnostics.debug(1, "Skipping stale comment in %s", exc.location)
            continue
        except ResolutionError as exc:
            exc.locate(file.name, record.path)
            raise

        yield ResolvedComment(name_chain=name_chain, comment=record.leading, path=record.path)


def resolve_comments(
    file: FileDescriptorProto,
    diagnostics: Diagnostics | None = None,
    summary: CollectionSummary | None = None,
) -> list[ResolvedComment]:
    """Resolve every significant leading comment of ``file`` to its name chain."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    summary = summary if summary is not None else CollectionSummary()
    return list(_resolve_records(file, diagnostics, summary))


def collect_file_comments(
    file: FileDescriptorProto,
    sink: DocumentationTree,
    diagnostics: Diagnostics | None = None,
    summary: CollectionSummary | None = None,
) -> CollectionSummary:
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    summary = summary if summary is not None else CollectionSummary()
    summary.files += 1
    for resolved in _resolve_records(file, diagnostics, summary):
        sink.attach_comment(resolved.name_chain, resolved.comment)
        summary.attached += 1
    return summary


def collect_comments(
    files_to_generate: Sequence[str],
    proto_files: Sequence[FileDescriptorProto],
    sink: DocumentationTree,
    diagnostics: Diagnostics | None = None,
) -> CollectionSummary:
    """Attach the comments of every file being generated to ``sink``.

    Files outside ``files_to_generate`` are dependencies and are skipped.
    Stale coordinates skip one record; any other resolution error propagates.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    summary = CollectionSummary()
    targets = set(files_to_generate)
    for file in proto_files:
        if file.name not in targets:
            diagnostics.debug(0, "Skipping comments for dependency '%s'", file.name)
            continue
        diagnostics.info(0, "Collecting comments for '%s'", file.name)
        collect_file_comments(file, sink, diagnostics, summary)

    logger.info(
        "collected comments: %d file(s), %d location(s), %d walked, %d attached, %d stale",
        summary.files,
        summary.locations,
        summary.walked,
        summary.attached,
        summary.stale,
    )
    return summary
