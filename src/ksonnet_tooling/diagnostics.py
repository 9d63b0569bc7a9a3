"""Turn compiler error output into per-file diagnostics.

The compiler reports either a static error, with a single location::

    STATIC ERROR: main.jsonnet:3:1-10: Unknown variable: x

or a runtime error followed by a stack trace::

    RUNTIME ERROR: Field does not exist: foo
        main.jsonnet:(3:1)-(4:5)    object <anonymous>
        During manifestation

The first line of the message handed to ``DiagnosticAggregator.report`` is a
banner (the failed command) and carries no diagnostic content.
"""

import enum
import logging
import os
import re
from typing import NamedTuple

from pygls import uris

from .constants import (
    MANIFESTATION_PREFIX,
    RUNTIME_ERROR_PREFIX,
    STATIC_ERROR_PREFIX,
)
from .error_handling import DiagnosticBatch, DiagnosticRecord
from .location import match_range, to_lsp_range
from .sinks import DiagnosticsSink
from .stack_frame import match_stack_frame

logger = logging.getLogger("ksonnet.tooling.diagnostics")

_LINE_BREAK = re.compile(r"\r?\n")


class ErrorKind(enum.Enum):
    STATIC = "static"
    RUNTIME = "runtime"
    UNRECOGNIZED = "unrecognized"


class ClassifiedError(NamedTuple):
    kind: ErrorKind
    message: str
    stack_trace: list[str]


def classify(raw_message: str) -> ClassifiedError:
    """Split off the banner line and classify what follows."""
    lines = _LINE_BREAK.split(raw_message)
    if lines[-1] == "":
        lines.pop()

    lines = lines[1:]
    if not lines:
        return ClassifiedError(ErrorKind.UNRECOGNIZED, "", [])

    error_message, stack_trace = lines[0], lines[1:]

    if error_message.startswith(STATIC_ERROR_PREFIX):
        return ClassifiedError(ErrorKind.STATIC, error_message, [])

    if error_message.startswith(RUNTIME_ERROR_PREFIX):
        return ClassifiedError(ErrorKind.RUNTIME, error_message, stack_trace)

    return ClassifiedError(ErrorKind.UNRECOGNIZED, error_message, [])


def static_error_diagnostics(message: str) -> DiagnosticBatch:
    static_error = message[len(STATIC_ERROR_PREFIX) :]

    frame = match_stack_frame(static_error)
    if frame is None:
        logger.debug(f"Could not parse filename from compiler error: '{message}'")
        return {}

    loc_and_message = static_error[len(frame.full_match) :]
    range_match = match_range(loc_and_message, file=frame.file)
    if range_match is None:
        logger.debug(f"Could not parse location range from compiler error: '{message}'")
        return {}

    detail = range_match.remainder.lstrip(": \t")
    record = DiagnosticRecord(
        file=frame.file,
        range=to_lsp_range(range_match.location_range),
        message=detail if detail else loc_and_message.strip(),
    )
    return {frame.file: [record]}


def runtime_error_diagnostics(message: str, stack_trace: list[str]) -> DiagnosticBatch:
    diagnostics: DiagnosticBatch = {}

    for line in stack_trace:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(MANIFESTATION_PREFIX):
            continue

        frame = match_stack_frame(line)
        if frame is None:
            logger.debug(f"Could not parse filename from compiler error: '{line}'")
            continue

        loc = line[len(frame.leading_whitespace_and_file) :]
        range_match = match_range(loc, file=frame.file)
        if range_match is None:
            logger.debug(f"Could not parse location range from compiler error: '{line}'")
            continue

        # Every frame carries the top level error message.
        diagnostics.setdefault(frame.file, []).append(
            DiagnosticRecord(
                file=frame.file,
                range=to_lsp_range(range_match.location_range),
                message=message,
            )
        )

    return diagnostics


class DiagnosticAggregator:
    """Publishes compiler errors for a document to a diagnostics sink."""

    def __init__(self, sink: DiagnosticsSink):
        self.sink = sink
        # Other files published on behalf of a reported document.
        self._published_for: dict[str, set[str]] = {}

    def report(
        self, file_uri: str, raw_message: str, cwd: str | None = None
    ) -> DiagnosticBatch:
        """Replace all published diagnostics with those in ``raw_message``.

        The whole sink is cleared first, so the last report wins even across
        documents. For runtime errors only the frames located in the reported
        document are published; the returned batch holds every parsed frame.

        Relative file names are resolved against ``cwd``, the directory the
        compiler ran in, falling back to the document's directory.
        """
        document_path = to_fs_path(file_uri)
        classified = classify(raw_message)

        base = cwd if cwd else os.path.dirname(document_path)

        self.sink.clear_all()
        self._published_for = {}

        if classified.kind == ErrorKind.STATIC:
            batch = static_error_diagnostics(classified.message)
            for file, records in batch.items():
                path = _resolve(base, file)
                self.sink.set(path, records)
                if path != document_path:
                    self._published_for.setdefault(document_path, set()).add(path)

            return batch

        if classified.kind == ErrorKind.RUNTIME:
            batch = runtime_error_diagnostics(classified.message, classified.stack_trace)
            document_records = [
                record
                for file, records in batch.items()
                if _resolve(base, file) == document_path
                for record in records
            ]
            if document_records:
                self.sink.set(document_path, document_records)

            return batch

        return {}

    def clear(self, file_uri: str) -> None:
        """Drop the document's diagnostics and any it published elsewhere."""
        document_path = to_fs_path(file_uri)
        self.sink.delete(document_path)
        for path in sorted(self._published_for.pop(document_path, ())):
            self.sink.delete(path)


def to_fs_path(file_uri: str) -> str:
    """Filesystem path for a ``file:`` URI; plain paths are only normalized."""
    if file_uri.startswith("file:"):
        path = uris.to_fs_path(file_uri)
        if path:
            return os.path.normpath(path)

    return os.path.normpath(file_uri)


def _resolve(base: str, file: str) -> str:
    """Resolve a compiler-reported file against the compiler's directory."""
    return os.path.normpath(os.path.join(base, file))
