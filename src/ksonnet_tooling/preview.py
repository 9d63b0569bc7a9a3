"""Compiled-output cache backing the document preview"""

import logging
import os
from pathlib import Path, PurePath
from typing import Protocol

from .app_root import resolve_root
from .commands import (
    CompilerInvoker,
    CompilerResult,
    InvocationMode,
    application_args,
    standalone_args,
)
from .constants import COMMAND_FAILED_BANNER, COMPONENTS_DIR
from .error_handling import RuntimeFailure
from .events import EventEmitter
from .settings import Settings

logger = logging.getLogger("ksonnet.tooling.preview")

# Returned in place of content when compilation failed.
FAILED_PREVIEW = ""

PreviewEntry = str | RuntimeFailure


class SourceDocument(Protocol):
    @property
    def uri(self) -> str: ...

    @property
    def path(self) -> str: ...


def component_name(app_root: str, source_file: str) -> str:
    """Name of the ksonnet component defined by ``source_file``.

    Nested components keep their directories, ``components/db/redis.jsonnet``
    is ``db/redis``. Files outside ``components`` use their stem.
    """
    source = PurePath(source_file)
    try:
        relative = source.relative_to(PurePath(app_root) / COMPONENTS_DIR)
    except ValueError:
        return source.stem

    return relative.with_suffix("").as_posix()


class PreviewCache:
    """Holds the latest compilation result for each open document.

    Entries are served until removed with ``delete``; there is no staleness
    check. Fires ``on_did_change`` with the document URI after each store.
    """

    def __init__(self, invoker: CompilerInvoker, settings: Settings | None = None):
        self.invoker = invoker
        self.settings = settings if settings else Settings()
        self.on_did_change = EventEmitter[str]()
        self._documents: dict[str, PreviewEntry] = {}

    async def generate_preview(self, document: SourceDocument) -> str:
        key = document.uri

        if key in self._documents:
            return _content(self._documents[key])

        source_file = document.path
        app_root = resolve_root(source_file, marker=self.settings.marker)
        if app_root:
            cwd = app_root
            result = await self._application_preview(app_root, source_file)
        else:
            cwd = str(Path(source_file).parent)
            result = await self._standalone_preview(source_file, cwd)

        if result.exit_code == 0:
            entry: PreviewEntry = result.stdout
        else:
            banner = COMMAND_FAILED_BANNER.format(command=result.command)
            entry = RuntimeFailure(
                error=f"{banner}{os.linesep}{result.stderr}", cwd=cwd
            )

        self._documents[key] = entry
        self.on_did_change.notify(key)

        return _content(entry)

    async def _application_preview(self, app_root: str, source_file: str) -> CompilerResult:
        component = component_name(app_root, source_file)
        logger.info(
            f"Generating ksonnet preview for '{source_file}' "
            f"(component '{component}') at '{app_root}'"
        )

        return await self._invoke(
            InvocationMode.APPLICATION,
            application_args(self.settings.environment, component),
            app_root,
        )

    async def _standalone_preview(self, source_file: str, cwd: str) -> CompilerResult:
        logger.info(f"Generating jsonnet preview for '{source_file}'")

        return await self._invoke(
            InvocationMode.STANDALONE,
            standalone_args(self.settings, source_file),
            cwd,
        )

    async def _invoke(self, mode: InvocationMode, args: list[str], cwd: str) -> CompilerResult:
        try:
            return await self.invoker.invoke(mode, args, cwd)
        except OSError as err:
            logger.debug(f"Compiler invocation failed: {err}")
            return CompilerResult(
                exit_code=-1, stdout="", stderr=f"{err}", command=" ".join(args)
            )

    def get(self, document: SourceDocument) -> PreviewEntry | None:
        return self._documents.get(document.uri)

    def delete(self, document: SourceDocument) -> None:
        self._documents.pop(document.uri, None)

    def close(self) -> None:
        self._documents.clear()
        self.on_did_change.clear()

    def __contains__(self, document: SourceDocument) -> bool:
        return document.uri in self._documents

    def __len__(self) -> int:
        return len(self._documents)


def _content(entry: PreviewEntry) -> str:
    if isinstance(entry, RuntimeFailure):
        return FAILED_PREVIEW

    return entry
