"""Destinations for published diagnostics"""

from typing import NamedTuple, Protocol, Sequence

from .error_handling import DiagnosticRecord
from .events import EventEmitter


class DiagnosticsSink(Protocol):
    def set(self, file_path: str, records: Sequence[DiagnosticRecord]) -> None: ...

    def delete(self, file_path: str) -> None: ...

    def clear_all(self) -> None: ...


class DiagnosticsChange(NamedTuple):
    """Paths whose published diagnostics changed."""

    paths: tuple[str, ...]


class DiagnosticCollection:
    """In-memory sink, the equivalent of an editor's diagnostic collection.

    Subscribers to ``on_did_change`` are told which paths changed after every
    mutation.
    """

    def __init__(self):
        self._records: dict[str, list[DiagnosticRecord]] = {}
        self.on_did_change = EventEmitter[DiagnosticsChange]()

    def set(self, file_path: str, records: Sequence[DiagnosticRecord]) -> None:
        self._records[file_path] = list(records)
        self.on_did_change.notify(DiagnosticsChange(paths=(file_path,)))

    def delete(self, file_path: str) -> None:
        if self._records.pop(file_path, None) is None:
            return

        self.on_did_change.notify(DiagnosticsChange(paths=(file_path,)))

    def clear_all(self) -> None:
        paths = tuple(self._records)
        self._records.clear()
        if paths:
            self.on_did_change.notify(DiagnosticsChange(paths=paths))

    def get(self, file_path: str) -> list[DiagnosticRecord]:
        return list(self._records.get(file_path, []))

    def paths(self) -> list[str]:
        return list(self._records)

    def __contains__(self, file_path: str) -> bool:
        return file_path in self._records

    def __len__(self) -> int:
        return len(self._records)
