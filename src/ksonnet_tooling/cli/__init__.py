"""Command line entry points for ksonnet tooling"""

import argparse
import dataclasses
import logging
import pathlib
from typing import NamedTuple

from pygls import uris

from ksonnet_tooling.commands import ShellInvoker
from ksonnet_tooling.preview import PreviewCache
from ksonnet_tooling.settings import Settings


class FileDocument(NamedTuple):
    uri: str
    path: str


def file_document(path: pathlib.Path) -> FileDocument:
    resolved = path.resolve()
    return FileDocument(uri=uris.from_fs_path(str(resolved)), path=str(resolved))


def build_cache(args) -> PreviewCache:
    settings = Settings.from_env()
    if getattr(args, "output", None):
        settings = dataclasses.replace(settings, output_format=args.output)

    if getattr(args, "env", None):
        settings = dataclasses.replace(settings, environment=args.env)

    return PreviewCache(invoker=ShellInvoker(settings), settings=settings)


def add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "path",
        type=pathlib.Path,
        help="Path to the Jsonnet file or ksonnet component",
    )

    parser.add_argument(
        "--env",
        help="ksonnet environment used for application components",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging for debugging",
    )


def configure_logging(args):
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
