"""Diagnostic and failure records produced from compiler output"""

from dataclasses import dataclass
from typing import Any

from lsprotocol import types

from .constants import DIAGNOSTIC_SOURCE


@dataclass(frozen=True)
class DiagnosticRecord:
    """A single located compiler error, in LSP (0-based) coordinates"""

    file: str
    range: types.Range
    message: str
    severity: types.DiagnosticSeverity = types.DiagnosticSeverity.Error
    source: str = DIAGNOSTIC_SOURCE

    def to_diagnostic(self) -> types.Diagnostic:
        """Convert to LSP Diagnostic"""
        return types.Diagnostic(
            range=self.range,
            message=self.message,
            severity=self.severity,
            source=self.source,
        )


@dataclass(frozen=True)
class RuntimeFailure:
    """A failed compilation, carrying the compiler's error text.

    ``cwd`` is the directory the compiler ran in; relative file names in
    ``error`` are relative to it.
    """

    error: str
    cwd: str | None = None


def is_runtime_failure(thing: Any) -> bool:
    return isinstance(thing, RuntimeFailure)


DiagnosticBatch = dict[str, list[DiagnosticRecord]]
