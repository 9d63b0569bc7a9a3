from urllib.parse import unquote, urlsplit, urlunsplit

from pygls import uris

from ksonnet_tooling.constants import PREVIEW_SCHEME, PREVIEW_SUFFIX


def canonical_preview_uri(file_uri: str) -> str:
    """``file:///a/b.jsonnet`` -> ``ksonnet-preview:///a/b.jsonnet.rendered?file:///a/b.jsonnet``"""
    parts = urlsplit(file_uri)
    return f"{PREVIEW_SCHEME}://{parts.netloc}{parts.path}{PREVIEW_SUFFIX}?{file_uri}"


def is_preview_uri(uri: str) -> bool:
    return urlsplit(uri).scheme == PREVIEW_SCHEME


def file_uri_from_preview_uri(preview_uri: str) -> str:
    parts = urlsplit(preview_uri)
    if parts.query:
        return unquote(parts.query)

    path = parts.path
    if path.endswith(PREVIEW_SUFFIX):
        path = path[: -len(PREVIEW_SUFFIX)]

    return uris.from_fs_path(unquote(path)) or urlunsplit(("file", "", path, "", ""))
