from __future__ import annotations

import pytest

from imagebuild.build_tools.types import CommandResult, ExecOptions, ToolId


class FakeExecutor:
    """Returns canned results keyed by the binary (first word) of the command line."""

    def __init__(self, results: dict[str, CommandResult | None | Exception] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[str, ExecOptions | None]] = []

    async def run(self, command_line: str, options: ExecOptions | None = None) -> CommandResult | None:
        self.calls.append((command_line, options))
        binary = command_line.split()[0]
        result = self.results.get(command_line, self.results.get(binary))
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def commands(self) -> list[str]:
        return [c for c, _ in self.calls]


class FakeConfig:
    def __init__(self, tool: str = "docker") -> None:
        self.tool = tool
        self.set_calls: list[ToolId] = []

    def get_build_tool(self) -> str:
        return self.tool

    def set_build_tool(self, tool_id: ToolId) -> None:
        self.set_calls.append(tool_id)
        self.tool = tool_id.value


class FakeNotifier:
    def __init__(self, answer: bool = False) -> None:
        self.answer = answer
        self.prompts: list[tuple[str, str]] = []
        self.infos: list[str] = []
        self.errors: list[str] = []

    async def confirm(self, message: str, action_label: str) -> bool:
        self.prompts.append((message, action_label))
        return self.answer

    def show_info(self, message: str) -> None:
        self.infos.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)


class FakeOutput:
    def __init__(self) -> None:
        self.infos: list[tuple[str, str | None]] = []
        self.errors: list[tuple[str, str | None]] = []

    def info(self, message: str, scope: str | None = None) -> None:
        self.infos.append((message, scope))

    def error(self, message: str, scope: str | None = None) -> None:
        self.errors.append((message, scope))


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def config() -> FakeConfig:
    return FakeConfig()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def output() -> FakeOutput:
    return FakeOutput()
