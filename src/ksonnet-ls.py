from typing import Any

from pygls.lsp.server import LanguageServer
from lsprotocol import types

from ksonnet_tooling import constants
from ksonnet_tooling.commands import ShellInvoker
from ksonnet_tooling.langserver.orchestrator import DocumentOrchestrator, source_uri
from ksonnet_tooling.langserver.preview_uri import canonical_preview_uri
from ksonnet_tooling.langserver.publisher import LspDiagnosticsSink
from ksonnet_tooling.preview import PreviewCache
from ksonnet_tooling.settings import Settings

KSONNET_LSP_NAME = "ksonnet-ls"
KSONNET_LSP_VERSION = "v0.1.0"

server = LanguageServer(KSONNET_LSP_NAME, KSONNET_LSP_VERSION)

__SETTINGS = Settings.from_env()
__ORCHESTRATOR = DocumentOrchestrator(
    cache=PreviewCache(invoker=ShellInvoker(__SETTINGS), settings=__SETTINGS),
    sink=LspDiagnosticsSink(server),
)


def _apply_configuration(config: Any):
    if not isinstance(config, dict):
        return

    section = config.get(constants.CONFIGURATION_SECTION, config)
    settings = Settings.from_dict(section).with_env()

    __ORCHESTRATOR.update_settings(settings)
    __ORCHESTRATOR.cache.invoker = ShellInvoker(settings)

    server.window_log_message(
        params=types.LogMessageParams(
            type=types.MessageType.Debug, message=f"settings: {settings}"
        )
    )


def _log(logs: list[types.LogMessageParams] | None):
    if not logs:
        return

    for log in logs:
        server.window_log_message(params=log)


@server.feature(types.INITIALIZE)
def initialize(params: types.InitializeParams):
    _apply_configuration(params.initialization_options)


@server.feature(types.WORKSPACE_DID_CHANGE_CONFIGURATION)
def change_workspace_config(params: types.DidChangeConfigurationParams):
    _apply_configuration(params.settings)


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
async def open_processor(params: types.DidOpenTextDocumentParams):
    if params.text_document.language_id != constants.LANGUAGE_ID:
        return

    doc = server.workspace.get_text_document(params.text_document.uri)
    result = await __ORCHESTRATOR.handle_open(doc)
    _log(result.logs)


@server.feature(types.TEXT_DOCUMENT_DID_SAVE)
async def save_processor(params: types.DidSaveTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    if doc.language_id and doc.language_id != constants.LANGUAGE_ID:
        return

    result = await __ORCHESTRATOR.handle_save(doc)
    _log(result.logs)


@server.feature(types.TEXT_DOCUMENT_DID_CLOSE)
def close_processor(params: types.DidCloseTextDocumentParams):
    doc = server.workspace.get_text_document(params.text_document.uri)
    __ORCHESTRATOR.handle_close(doc)


@server.command(constants.PREVIEW_COMMAND)
async def preview(args):
    if not args:
        return None

    doc = server.workspace.get_text_document(source_uri(args[0]))

    result = await __ORCHESTRATOR.render(doc)
    _log(result.logs)

    return result.html


@server.command(constants.PREVIEW_URI_COMMAND)
def preview_uri(args):
    if not args:
        return None

    return canonical_preview_uri(args[0])


@server.feature(types.SHUTDOWN)
def shutdown(*_, **__):
    __ORCHESTRATOR.shutdown()


if __name__ == "__main__":
    server.start_io()
