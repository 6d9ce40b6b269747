"""ShellExecutor: runs build tool command lines as async subprocesses."""

from __future__ import annotations

import asyncio
import os
import shlex
import time

from imagebuild.build_tools.types import CommandResult, ExecOptions
from imagebuild.errors import ImageBuildError
from imagebuild.infrastructure.config import COMMAND_TIMEOUT
from imagebuild.infrastructure.logger import logger


class ShellExecutor:
    """Runs a command line and captures exit code, stdout and stderr.

    The command line is split with shell quoting rules but is not passed to a
    shell, so a missing binary is reported as "could not start" (None) rather
    than as a shell exit code 127. A missing working directory is a caller
    error and raises ImageBuildError instead.
    """

    def __init__(self, default_timeout: float = COMMAND_TIMEOUT) -> None:
        self._default_timeout = default_timeout

    async def run(self, command_line: str, options: ExecOptions | None = None) -> CommandResult | None:
        opts = options or ExecOptions()
        argv = shlex.split(command_line)
        if not argv:
            raise ValueError("Empty command line")
        if opts.cwd is not None and not opts.cwd.is_dir():
            raise ImageBuildError(f"Working directory {opts.cwd} does not exist or is not a folder")

        env = None
        if opts.env:
            env = {**os.environ, **opts.env}

        logger.debug("Running command", command=command_line, cwd=str(opts.cwd) if opts.cwd else None)
        start = time.monotonic()

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=opts.cwd,
                env=env,
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as err:
            logger.debug("Unable to start command", binary=argv[0], error=str(err))
            return None

        timeout = opts.timeout if opts.timeout is not None else self._default_timeout
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Command timed out, killing", command=command_line, timeout=timeout)
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            await proc.wait()
            return CommandResult(exit_code=-1, stderr=f"Command timed out after {timeout}s")

        exit_code = proc.returncode if proc.returncode is not None else -1
        logger.debug(
            "Command finished",
            binary=argv[0],
            code=exit_code,
            duration=round(time.monotonic() - start, 3),
        )
        return CommandResult(
            exit_code=exit_code,
            stdout=stdout_bytes.decode(errors="replace"),
            stderr=stderr_bytes.decode(errors="replace"),
        )
