"""CLI command compiling a file and reporting located errors"""

import argparse
import asyncio
import sys

from rich.console import Console
from rich.text import Text

from ksonnet_tooling.diagnostics import DiagnosticAggregator
from ksonnet_tooling.error_handling import DiagnosticBatch, RuntimeFailure
from ksonnet_tooling.sinks import DiagnosticCollection

from . import add_common_arguments, build_cache, configure_logging, file_document

console = Console()

ERROR_STYLE = "red bold"
LOCATION_STYLE = "blue"
OK_STYLE = "green"


def format_batch(batch: DiagnosticBatch) -> list[Text]:
    lines = []
    for file, records in batch.items():
        for record in records:
            start = record.range.start
            end = record.range.end
            line = Text()
            line.append(
                f"{file}:{start.line + 1}:{start.character + 1}-"
                f"{end.line + 1}:{end.character} ",
                LOCATION_STYLE,
            )
            line.append("error: ", ERROR_STYLE)
            line.append(record.message)
            lines.append(line)

    return lines


async def check_file(args) -> int:
    document = file_document(args.path)
    cache = build_cache(args)

    await cache.generate_preview(document)
    entry = cache.get(document)

    if not isinstance(entry, RuntimeFailure):
        if not args.quiet:
            console.print(Text(f"{document.path}: OK", OK_STYLE))
        return 0

    collection = DiagnosticCollection()
    aggregator = DiagnosticAggregator(collection)
    batch = aggregator.report(document.uri, entry.error, cwd=entry.cwd)

    lines = format_batch(batch)
    if lines:
        for line in lines:
            console.print(line)
    else:
        console.print(Text(entry.error, ERROR_STYLE))

    return 1


def register_check_subcommand(subparsers):
    """Register the check subcommand"""
    check_parser = subparsers.add_parser(
        "check",
        help="Compile a Jsonnet file and report errors with their locations",
        description="Compile a Jsonnet file and report errors with their locations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ksonnet-tooling check main.jsonnet                  # Standalone file
  ksonnet-tooling check app/components/redis.jsonnet  # ksonnet component
        """,
    )

    add_common_arguments(check_parser)

    check_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only output errors",
    )

    check_parser.set_defaults(func=check_command)


def check_command(args):
    configure_logging(args)

    if not args.path.exists():
        print(f"Error: Path '{args.path}' does not exist", file=sys.stderr)
        sys.exit(1)

    sys.exit(asyncio.run(check_file(args)))
