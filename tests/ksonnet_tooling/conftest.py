from pathlib import Path
from typing import NamedTuple, Sequence

import pytest
from pygls import uris

from ksonnet_tooling.commands import CompilerResult, InvocationMode


class FakeDocument(NamedTuple):
    uri: str
    path: str


def document_for(path: Path) -> FakeDocument:
    return FakeDocument(uri=uris.from_fs_path(str(path)), path=str(path))


class RecordingInvoker:
    """Stands in for the compiler, replaying canned results."""

    def __init__(self, *results: CompilerResult):
        self.results = list(results)
        self.calls: list[tuple[InvocationMode, list[str], str]] = []

    async def invoke(
        self, mode: InvocationMode, args: Sequence[str], cwd: str
    ) -> CompilerResult:
        self.calls.append((mode, list(args), cwd))
        if len(self.results) > 1:
            return self.results.pop(0)

        return self.results[0]


@pytest.fixture
def standalone_file(tmp_path) -> Path:
    source = tmp_path / "standalone" / "main.jsonnet"
    source.parent.mkdir(parents=True)
    source.write_text("{ a: 1 }")
    return source


@pytest.fixture
def app_component(tmp_path) -> Path:
    app = tmp_path / "app"
    (app / "components" / "db").mkdir(parents=True)
    (app / "app.yaml").write_text("apiVersion: 0.1.0\n")
    source = app / "components" / "db" / "redis.jsonnet"
    source.write_text("{ kind: 'Service' }")
    return source


@pytest.fixture
def make_document():
    return document_for


@pytest.fixture
def make_invoker():
    return RecordingInvoker
