"""Compiler invocation: argument building and the subprocess adapter"""

import asyncio
import enum
import logging
import shlex
from typing import NamedTuple, Protocol, Sequence

from .settings import Settings

logger = logging.getLogger("ksonnet.tooling.commands")


class InvocationMode(enum.Enum):
    # ``ks`` inside an application root, addressing a component by name.
    APPLICATION = "application"
    # ``jsonnet`` on a single file.
    STANDALONE = "standalone"


class CompilerResult(NamedTuple):
    exit_code: int
    stdout: str
    stderr: str
    command: str = ""


class CompilerInvoker(Protocol):
    async def invoke(
        self, mode: InvocationMode, args: Sequence[str], cwd: str
    ) -> CompilerResult: ...


def standalone_args(settings: Settings, source_file: str) -> list[str]:
    args = []
    for lib_path in settings.lib_paths:
        args.extend(["-J", lib_path])

    for name, value in settings.ext_strs.items():
        args.extend(["--ext-str", f"{name}={value}"])

    args.append(source_file)
    return args


def application_args(environment: str, component: str) -> list[str]:
    return ["show", environment, "-c", component, "-o", "json"]


def executable_for(settings: Settings, mode: InvocationMode) -> str:
    if mode == InvocationMode.APPLICATION:
        return settings.ks_executable

    return settings.jsonnet_executable


class ShellInvoker:
    """Runs the compiler as a subprocess and captures its output."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings if settings else Settings()

    async def invoke(
        self, mode: InvocationMode, args: Sequence[str], cwd: str
    ) -> CompilerResult:
        argv = [executable_for(self.settings, mode), *args]
        command = shlex.join(argv)
        logger.info(f"Running '{command}' in '{cwd}'")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            logger.debug(f"Compiler executable '{argv[0]}' not found")
            return CompilerResult(
                exit_code=-1,
                stdout="",
                stderr=f"Could not find '{argv[0]}' executable.",
                command=command,
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.settings.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.debug(f"Timed out after {self.settings.timeout}s: '{command}'")
            return CompilerResult(
                exit_code=-1,
                stdout="",
                stderr=f"Timed out after {self.settings.timeout} seconds.",
                command=command,
            )

        return CompilerResult(
            exit_code=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            command=command,
        )
