"""Document lifecycle handling: compile, report diagnostics, serve previews"""

from typing import NamedTuple

from lsprotocol import types

from ksonnet_tooling.diagnostics import DiagnosticAggregator
from ksonnet_tooling.error_handling import DiagnosticBatch, RuntimeFailure
from ksonnet_tooling.preview import PreviewCache, SourceDocument
from ksonnet_tooling.rendering import render_preview
from ksonnet_tooling.settings import Settings
from ksonnet_tooling.sinks import DiagnosticsSink

from .preview_uri import file_uri_from_preview_uri, is_preview_uri


class HandleResult(NamedTuple):
    success: bool
    diagnostics: DiagnosticBatch | None = None
    logs: list[types.LogMessageParams] | None = None


class PreviewResult(NamedTuple):
    html: str
    logs: list[types.LogMessageParams] | None = None


class DocumentOrchestrator:
    """Owns the preview cache and diagnostics aggregator for one server.

    Created at server start and torn down with ``shutdown``.
    """

    def __init__(self, cache: PreviewCache, sink: DiagnosticsSink):
        self.cache = cache
        self.aggregator = DiagnosticAggregator(sink)

    @property
    def settings(self) -> Settings:
        return self.cache.settings

    def update_settings(self, settings: Settings) -> None:
        self.cache.settings = settings

    async def handle_save(self, document: SourceDocument) -> HandleResult:
        """Recompile a saved document, dropping any cached preview first."""
        self.cache.delete(document)
        return await self.handle_open(document)

    async def handle_open(self, document: SourceDocument) -> HandleResult:
        await self.cache.generate_preview(document)

        entry = self.cache.get(document)
        if not isinstance(entry, RuntimeFailure):
            self.aggregator.clear(document.uri)
            return HandleResult(success=True)

        batch = self.aggregator.report(document.uri, entry.error, cwd=entry.cwd)
        record_count = sum(len(records) for records in batch.values())

        return HandleResult(
            success=False,
            diagnostics=batch,
            logs=[
                types.LogMessageParams(
                    type=types.MessageType.Info,
                    message=(
                        f"Compilation of '{document.path}' failed, "
                        f"{record_count} location(s) reported."
                    ),
                )
            ],
        )

    def handle_close(self, document: SourceDocument) -> None:
        self.cache.delete(document)
        self.aggregator.clear(document.uri)

    async def render(self, document: SourceDocument) -> PreviewResult:
        await self.cache.generate_preview(document)

        entry = self.cache.get(document)
        logs = None
        if isinstance(entry, RuntimeFailure):
            logs = [
                types.LogMessageParams(
                    type=types.MessageType.Warning,
                    message=f"Could not render '{document.path}'.",
                )
            ]

        return PreviewResult(
            html=render_preview(entry, self.settings.output_format), logs=logs
        )

    def shutdown(self) -> None:
        self.cache.close()


def source_uri(uri: str) -> str:
    """Map a preview URI back to its source document, other URIs pass through."""
    if is_preview_uri(uri):
        return file_uri_from_preview_uri(uri)

    return uri
