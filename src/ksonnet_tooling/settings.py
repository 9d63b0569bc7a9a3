"""Configuration for the compiler integration.

Values come from the editor's ``jsonnet`` configuration section and may be
overridden with ``KSONNET_TOOLING_*`` environment variables.
"""

import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any

from .constants import APP_MARKER, DEFAULT_ENVIRONMENT, OUTPUT_FORMATS

logger = logging.getLogger("ksonnet.tooling.settings")

ENV_PREFIX = "KSONNET_TOOLING_"

# Editor setting name -> Settings field
_CONFIG_KEYS = {
    "executablePath": "jsonnet_executable",
    "ksPath": "ks_executable",
    "extStrs": "ext_strs",
    "libPaths": "lib_paths",
    "outputFormat": "output_format",
    "environment": "environment",
    "timeout": "timeout",
}


@dataclass(frozen=True)
class Settings:
    jsonnet_executable: str = "jsonnet"
    ks_executable: str = "ks"
    ext_strs: dict[str, str] = field(default_factory=dict)
    lib_paths: list[str] = field(default_factory=list)
    output_format: str = "yaml"
    environment: str = DEFAULT_ENVIRONMENT
    marker: str = APP_MARKER
    timeout: float = 30.0

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            logger.warning(
                f"Unknown output format '{self.output_format}', using 'yaml'"
            )
            object.__setattr__(self, "output_format", "yaml")

    @classmethod
    def from_dict(cls, config: dict[str, Any] | None) -> "Settings":
        """Build settings from an editor configuration section."""
        if not config:
            return cls()

        values = {}
        for key, attribute in _CONFIG_KEYS.items():
            value = config.get(key)
            if value is None:
                continue

            values[attribute] = value

        if "ext_strs" in values:
            values["ext_strs"] = {
                str(name): str(value) for name, value in values["ext_strs"].items()
            }

        if "lib_paths" in values:
            values["lib_paths"] = [str(path) for path in values["lib_paths"]]

        if "timeout" in values:
            values["timeout"] = float(values["timeout"])

        return cls(**values)

    def with_env(self, environ: dict[str, str] | None = None) -> "Settings":
        """Apply ``KSONNET_TOOLING_*`` overrides on top of these settings."""
        if environ is None:
            environ = dict(os.environ)

        overrides: dict[str, Any] = {}

        for name in ("jsonnet_executable", "ks_executable", "output_format", "environment", "marker"):
            value = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if value:
                overrides[name] = value

        if lib_paths := environ.get(f"{ENV_PREFIX}LIB_PATHS"):
            overrides["lib_paths"] = [
                path for path in lib_paths.split(os.pathsep) if path
            ]

        if ext_strs := environ.get(f"{ENV_PREFIX}EXT_STRS"):
            try:
                overrides["ext_strs"] = {
                    str(key): str(value) for key, value in json.loads(ext_strs).items()
                }
            except (json.JSONDecodeError, AttributeError) as err:
                logger.warning(f"Ignoring invalid {ENV_PREFIX}EXT_STRS: {err}")

        if timeout := environ.get(f"{ENV_PREFIX}TIMEOUT"):
            try:
                overrides["timeout"] = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid {ENV_PREFIX}TIMEOUT: '{timeout}'")

        if not overrides:
            return self

        return replace(self, **overrides)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        return cls().with_env(environ)
