"""Build tool domain types and collaborator protocols."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, runtime_checkable


class ToolId(str, Enum):
    """Identifiers of the supported image build tools."""

    DOCKER = "docker"
    BUILDAH = "buildah"
    PODMAN = "podman"


class Operation(str, Enum):
    BUILD = "build"
    PUSH = "push"


@dataclass(frozen=True)
class CommandResult:
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class ExecOptions:
    cwd: Path | None = None
    env: dict[str, str] | None = None
    timeout: float | None = None  # seconds


@runtime_checkable
class Executor(Protocol):
    async def run(self, command_line: str, options: ExecOptions | None = None) -> CommandResult | None:
        """Run a command line.

        Returns None when the process could not be started at all.
        """
        ...


@runtime_checkable
class BuildToolConfig(Protocol):
    def get_build_tool(self) -> str: ...
    def set_build_tool(self, tool_id: ToolId) -> None: ...


@runtime_checkable
class Notifier(Protocol):
    async def confirm(self, message: str, action_label: str) -> bool: ...
    def show_info(self, message: str) -> None: ...
    def show_error(self, message: str) -> None: ...


@runtime_checkable
class OutputChannel(Protocol):
    def info(self, message: str, scope: str | None = None) -> None: ...
    def error(self, message: str, scope: str | None = None) -> None: ...
