import re


STATIC_ERROR_PREFIX = "STATIC ERROR: "
RUNTIME_ERROR_PREFIX = "RUNTIME ERROR: "

# Explanatory continuation lines in a runtime stack trace.
MANIFESTATION_PREFIX = "During manifestation"

APP_MARKER = "app.yaml"
COMPONENTS_DIR = "components"
DEFAULT_ENVIRONMENT = "default"

LANGUAGE_ID = "jsonnet"
CONFIGURATION_SECTION = "jsonnet"

PREVIEW_SCHEME = "ksonnet-preview"
PREVIEW_SUFFIX = ".rendered"

PREVIEW_COMMAND = "ksonnet.preview"
PREVIEW_URI_COMMAND = "ksonnet.previewUri"

COMMAND_FAILED_BANNER = "Command failed: {command}"

OUTPUT_FORMATS = ("json", "yaml")

DIAGNOSTIC_SOURCE = "ksonnet"


POSITION = r"(?P<{prefix}_line>\d+):(?P<{prefix}_column>\d+)"

LOCATION_RANGE = re.compile(
    r"^:?\s*"
    r"(?:"
    r"\((?P<paren_begin_line>\d+):(?P<paren_begin_column>\d+)\)"
    r"-"
    r"\((?P<paren_end_line>\d+):(?P<paren_end_column>\d+)\)"
    r"|"
    + POSITION.format(prefix="begin")
    + r"(?:-(?:"
    + POSITION.format(prefix="end")
    + r"|(?P<short_end_column>\d+)))?"
    r")"
    r"(?=$|[\s:])"
)

STACK_FRAME = re.compile(r"^(?P<indent>\s*)(?P<file>[^:\s][^:]*):")
