"""Locate the root of the ksonnet application containing a file"""

import logging
import os
from pathlib import Path

from .constants import APP_MARKER

logger = logging.getLogger("ksonnet.tooling.app_root")


def resolve_root(file_path: str | os.PathLike, marker: str = APP_MARKER) -> str | None:
    """Return the nearest ancestor directory of ``file_path`` holding ``marker``.

    Walks from the containing directory up to the filesystem root, one
    existence check per level. Errors while probing count as "not found".
    Nothing is cached, the filesystem may change between calls.
    """
    directory = Path(os.path.abspath(file_path)).parent

    while True:
        if _has_marker(directory, marker):
            return str(directory)

        parent = directory.parent
        if parent == directory:
            return None

        directory = parent


def is_in_app(file_path: str | os.PathLike, marker: str = APP_MARKER) -> bool:
    return resolve_root(file_path, marker=marker) is not None


def _has_marker(directory: Path, marker: str) -> bool:
    try:
        return (directory / marker).is_file()
    except OSError as err:
        logger.debug(f"Could not check for '{marker}' in '{directory}': {err}")
        return False
