"""HTML rendering of compiled output for the preview pane"""

import html
import json
import logging

import yaml

from .error_handling import RuntimeFailure

logger = logging.getLogger("ksonnet.tooling.rendering")


def body(content: str) -> str:
    return f"<html><body>{content}</body></html>"


def code_literal(code: str) -> str:
    return f"<pre><code>{html.escape(code)}</code></pre>"


def error_message(message: str) -> str:
    return f"<i><pre>{html.escape(message)}</pre></i>"


def format_output(json_text: str, output_format: str) -> str:
    """Re-serialize compiler JSON output as YAML or 4-space indented JSON."""
    value = json.loads(json_text)
    if output_format == "yaml":
        return yaml.safe_dump(value, default_flow_style=False, sort_keys=False)

    return json.dumps(value, indent=4)


def pretty_print_object(json_text: str, output_format: str) -> str:
    try:
        formatted = format_output(json_text, output_format)
    except json.JSONDecodeError as err:
        logger.debug(f"Compiler output is not JSON, rendering it verbatim: {err}")
        formatted = json_text

    return code_literal(formatted)


def render_preview(entry: str | RuntimeFailure | None, output_format: str) -> str:
    """Full HTML document for a preview cache entry."""
    if entry is None:
        return body(error_message("No preview available."))

    if isinstance(entry, RuntimeFailure):
        return body(error_message(entry.error))

    return body(pretty_print_object(entry, output_format))
