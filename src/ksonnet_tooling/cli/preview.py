"""CLI command printing the compiled output of a file"""

import argparse
import asyncio
import json
import sys

from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from ksonnet_tooling.constants import OUTPUT_FORMATS
from ksonnet_tooling.error_handling import RuntimeFailure
from ksonnet_tooling.rendering import format_output, render_preview

from . import add_common_arguments, build_cache, configure_logging, file_document

console = Console()


async def preview_file(args) -> int:
    document = file_document(args.path)
    cache = build_cache(args)

    await cache.generate_preview(document)
    entry = cache.get(document)
    output_format = cache.settings.output_format

    if args.html:
        print(render_preview(entry, output_format))
        return 1 if isinstance(entry, RuntimeFailure) else 0

    if isinstance(entry, RuntimeFailure):
        console.print(Text(entry.error, "red"))
        return 1

    try:
        console.print(Syntax(format_output(entry, output_format), output_format))
    except json.JSONDecodeError:
        print(entry)

    return 0


def register_preview_subcommand(subparsers):
    """Register the preview subcommand"""
    preview_parser = subparsers.add_parser(
        "preview",
        help="Print the compiled output of a Jsonnet file",
        description="Print the compiled output of a Jsonnet file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    add_common_arguments(preview_parser)

    preview_parser.add_argument(
        "--output", "-o",
        choices=OUTPUT_FORMATS,
        help="Output serialization (defaults to the configured format)",
    )

    preview_parser.add_argument(
        "--html",
        action="store_true",
        help="Print the HTML preview document instead",
    )

    preview_parser.set_defaults(func=preview_command)


def preview_command(args):
    configure_logging(args)

    if not args.path.exists():
        print(f"Error: Path '{args.path}' does not exist", file=sys.stderr)
        sys.exit(1)

    sys.exit(asyncio.run(preview_file(args)))
