"""Diagnostics sink publishing to an LSP client"""

import logging
from typing import Sequence

from lsprotocol import types
from pygls import uris
from pygls.lsp.server import LanguageServer

from ksonnet_tooling.error_handling import DiagnosticRecord

logger = logging.getLogger("ksonnet.tooling.langserver.publisher")


class LspDiagnosticsSink:
    """Publishes diagnostics with ``textDocument/publishDiagnostics``.

    The client has no "clear everything" notification, so the sink remembers
    which paths it published to and sends them empty lists on ``clear_all``.
    """

    def __init__(self, server: LanguageServer):
        self.server = server
        self._published: set[str] = set()

    def set(self, file_path: str, records: Sequence[DiagnosticRecord]) -> None:
        self._publish(file_path, [record.to_diagnostic() for record in records])
        self._published.add(file_path)

    def delete(self, file_path: str) -> None:
        self._publish(file_path, [])
        self._published.discard(file_path)

    def clear_all(self) -> None:
        for file_path in sorted(self._published):
            self._publish(file_path, [])

        self._published.clear()

    def _publish(self, file_path: str, diagnostics: list[types.Diagnostic]) -> None:
        uri = uris.from_fs_path(file_path)
        if not uri:
            logger.debug(f"Could not build a URI for '{file_path}'")
            return

        self.server.text_document_publish_diagnostics(
            types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )
