"""Tests for document lifecycle handling in the language server"""

import asyncio
import html
from unittest.mock import Mock

from lsprotocol import types

from ksonnet_tooling.commands import CompilerResult
from ksonnet_tooling.error_handling import DiagnosticRecord
from ksonnet_tooling.langserver.orchestrator import DocumentOrchestrator, source_uri
from ksonnet_tooling.langserver.preview_uri import canonical_preview_uri
from ksonnet_tooling.langserver.publisher import LspDiagnosticsSink
from ksonnet_tooling.preview import PreviewCache
from ksonnet_tooling.settings import Settings
from ksonnet_tooling.sinks import DiagnosticCollection

OK = CompilerResult(exit_code=0, stdout='{"a": 1}', stderr="", command="jsonnet main.jsonnet")


def _failure(path) -> CompilerResult:
    return CompilerResult(
        exit_code=1,
        stdout="",
        stderr=(
            "RUNTIME ERROR: boom\n"
            f"\t{path}:(2:3)-(2:9)\tobject <anonymous>\n"
            "\tDuring manifestation\n"
        ),
        command=f"jsonnet {path}",
    )


def _orchestrator(invoker, settings=None):
    collection = DiagnosticCollection()
    orchestrator = DocumentOrchestrator(
        cache=PreviewCache(invoker, settings=settings), sink=collection
    )
    return orchestrator, collection


class TestDocumentOrchestrator:
    """Test open / save / close handling"""

    def test_failure_reports_diagnostics(self, standalone_file, make_document, make_invoker):
        orchestrator, collection = _orchestrator(make_invoker(_failure(standalone_file)))
        document = make_document(standalone_file)

        result = asyncio.run(orchestrator.handle_open(document))

        assert not result.success
        assert result.logs[0].type == types.MessageType.Info
        (record,) = collection.get(str(standalone_file))
        assert record.message == "RUNTIME ERROR: boom"
        assert record.range.start == types.Position(line=1, character=2)

    def test_application_failure_reports_diagnostics(
        self, app_component, make_document, make_invoker
    ):
        """ksonnet names files relative to the app root it runs in"""
        orchestrator, collection = _orchestrator(
            make_invoker(_failure("components/db/redis.jsonnet"))
        )

        result = asyncio.run(orchestrator.handle_open(make_document(app_component)))

        assert not result.success
        assert collection.paths() == [str(app_component)]

    def test_success_clears_diagnostics(self, standalone_file, make_document, make_invoker):
        orchestrator, collection = _orchestrator(
            make_invoker(_failure(standalone_file), OK)
        )
        document = make_document(standalone_file)

        asyncio.run(orchestrator.handle_open(document))
        result = asyncio.run(orchestrator.handle_save(document))

        assert result.success
        assert collection.get(str(standalone_file)) == []

    def test_save_recompiles(self, standalone_file, make_document, make_invoker):
        invoker = make_invoker(OK)
        orchestrator, _ = _orchestrator(invoker)
        document = make_document(standalone_file)

        asyncio.run(orchestrator.handle_open(document))
        asyncio.run(orchestrator.handle_open(document))
        asyncio.run(orchestrator.handle_save(document))

        assert len(invoker.calls) == 2

    def test_close_drops_cache_and_diagnostics(self, standalone_file, make_document, make_invoker):
        orchestrator, collection = _orchestrator(make_invoker(_failure(standalone_file)))
        document = make_document(standalone_file)
        asyncio.run(orchestrator.handle_open(document))

        orchestrator.handle_close(document)

        assert document not in orchestrator.cache
        assert len(collection) == 0

    def test_render_success(self, standalone_file, make_document, make_invoker):
        orchestrator, _ = _orchestrator(make_invoker(OK), Settings(output_format="json"))

        result = asyncio.run(orchestrator.render(make_document(standalone_file)))

        assert html.escape('"a": 1') in result.html
        assert result.logs is None

    def test_render_failure(self, standalone_file, make_document, make_invoker):
        orchestrator, _ = _orchestrator(make_invoker(_failure(standalone_file)))

        result = asyncio.run(orchestrator.render(make_document(standalone_file)))

        assert result.html.startswith("<html><body><i><pre>Command failed: ")
        assert "RUNTIME ERROR: boom" in result.html
        assert result.logs[0].type == types.MessageType.Warning

    def test_update_settings(self, make_invoker):
        orchestrator, _ = _orchestrator(make_invoker(OK))

        orchestrator.update_settings(Settings(output_format="json"))

        assert orchestrator.settings.output_format == "json"


class TestSourceUri:
    def test_preview_uri_maps_to_source(self):
        file_uri = "file:///work/main.jsonnet"

        assert source_uri(canonical_preview_uri(file_uri)) == file_uri

    def test_file_uri_passes_through(self):
        assert source_uri("file:///work/main.jsonnet") == "file:///work/main.jsonnet"


class TestLspDiagnosticsSink:
    """Test publishing through the language server"""

    def _record(self):
        return DiagnosticRecord(
            file="main.jsonnet",
            range=types.Range(
                start=types.Position(line=0, character=0),
                end=types.Position(line=0, character=1),
            ),
            message="boom",
        )

    def test_set_publishes_diagnostics(self):
        server = Mock()
        sink = LspDiagnosticsSink(server)

        sink.set("/work/main.jsonnet", [self._record()])

        params = server.text_document_publish_diagnostics.call_args.args[0]
        assert params.uri == "file:///work/main.jsonnet"
        assert [d.message for d in params.diagnostics] == ["boom"]

    def test_clear_all_empties_published_paths(self):
        server = Mock()
        sink = LspDiagnosticsSink(server)
        sink.set("/work/a.jsonnet", [self._record()])
        sink.set("/work/b.jsonnet", [self._record()])
        server.reset_mock()

        sink.clear_all()
        sink.clear_all()

        published = [
            call.args[0] for call in server.text_document_publish_diagnostics.call_args_list
        ]
        assert [params.uri for params in published] == [
            "file:///work/a.jsonnet",
            "file:///work/b.jsonnet",
        ]
        assert all(params.diagnostics == [] for params in published)

    def test_delete_publishes_empty_list(self):
        server = Mock()
        sink = LspDiagnosticsSink(server)

        sink.delete("/work/main.jsonnet")

        params = server.text_document_publish_diagnostics.call_args.args[0]
        assert params.diagnostics == []
