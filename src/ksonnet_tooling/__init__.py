"""ksonnet tooling package initialization"""

import logging

from .app_root import is_in_app, resolve_root
from .diagnostics import DiagnosticAggregator, ErrorKind, classify
from .error_handling import DiagnosticRecord, RuntimeFailure, is_runtime_failure
from .location import LocationRange, parse_range, to_lsp_range
from .preview import PreviewCache
from .sinks import DiagnosticCollection, DiagnosticsSink
from .stack_frame import match_stack_frame

# Module-level logger
logger = logging.getLogger("ksonnet.tooling")

__all__ = [
    # Application roots
    "is_in_app",
    "resolve_root",
    # Diagnostics
    "DiagnosticAggregator",
    "DiagnosticCollection",
    "DiagnosticRecord",
    "DiagnosticsSink",
    "ErrorKind",
    "classify",
    # Parsing
    "LocationRange",
    "match_stack_frame",
    "parse_range",
    "to_lsp_range",
    # Preview
    "PreviewCache",
    "RuntimeFailure",
    "is_runtime_failure",
]
