"""Tests for the image service build/push flow."""

import pytest

from imagebuild.build_tools.detector import FallbackDetector
from imagebuild.build_tools.outcome import OutcomeKind, PushErrorReason
from imagebuild.build_tools.registry import ToolRegistry
from imagebuild.build_tools.types import CommandResult
from imagebuild.errors import ImageBuildError
from imagebuild.execution.shell import ShellExecutor
from imagebuild.images.service import ImageService

GIT = CommandResult(exit_code=0, stdout="1.2\n")


@pytest.fixture
def workspace(tmp_path):
    folder = tmp_path / "myapp"
    folder.mkdir()
    return folder


def make_service(config, executor, notifier, output, detector=None, image_user=None):
    return ImageService(ToolRegistry(config), executor, notifier, output, detector=detector, image_user=image_user)


class TestBuild:
    @pytest.mark.asyncio
    async def test_build_success(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=0))
        service = make_service(config, executor, notifier, output)

        outcome = await service.build(workspace)
        assert outcome.ok
        assert "docker build -t myapp:1.2 ." in executor.commands
        assert output.infos == [("myapp:1.2 built.", "Docker")]
        assert notifier.errors == []

    @pytest.mark.asyncio
    async def test_build_runs_in_workspace(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=0))
        await make_service(config, executor, notifier, output).build(workspace)
        _, options = executor.calls[-1]
        assert options.cwd == workspace

    @pytest.mark.asyncio
    async def test_build_uses_active_tool(self, config, executor, notifier, output, workspace):
        config.tool = "buildah"
        executor.results.update(git=GIT, buildah=CommandResult(exit_code=0))
        await make_service(config, executor, notifier, output, image_user="me").build(workspace)
        assert executor.commands[-1] == "buildah bud -t me/myapp:1.2 ."

    @pytest.mark.asyncio
    async def test_build_failure_logs_stderr_separately(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=1, stderr="COPY failed: no such file"))
        outcome = await make_service(config, executor, notifier, output).build(workspace)

        assert outcome.kind is OutcomeKind.COMMAND_FAILED
        assert output.errors == [("COPY failed: no such file", "Docker")]
        assert notifier.errors == ["Image build failed. See the output log for details."]

    @pytest.mark.asyncio
    async def test_build_tool_missing(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=None)
        outcome = await make_service(config, executor, notifier, output).build(workspace)

        assert outcome.kind is OutcomeKind.TOOL_UNAVAILABLE
        assert output.errors == []
        assert notifier.errors == ["Image build failed; unable to call docker."]

    @pytest.mark.asyncio
    async def test_fallback_checked_before_first_build_only(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=0))
        detector = FallbackDetector(ToolRegistry(config), executor, notifier, output)
        service = make_service(config, executor, notifier, output, detector=detector)

        await service.build(workspace)
        await service.build(workspace)
        probes = [c for c in executor.commands if "version" in c.split()]
        assert len(probes) == 1

    @pytest.mark.asyncio
    async def test_fallback_switch_applies_to_build(self, config, executor, notifier, output, workspace):
        executor.results.update(
            git=GIT,
            docker=CommandResult(exit_code=1, stderr="daemon down"),
            buildah=CommandResult(exit_code=0),
        )
        notifier.answer = True
        detector = FallbackDetector(ToolRegistry(config), executor, notifier, output)
        outcome = await make_service(config, executor, notifier, output, detector=detector).build(workspace)

        assert outcome.ok
        assert executor.commands[-1] == "buildah bud -t myapp:1.2 ."

    @pytest.mark.asyncio
    async def test_fallback_error_does_not_fail_build(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=0))

        class BrokenDetector:
            async def detect_once(self):
                raise RuntimeError("prompt failed")

        service = make_service(config, executor, notifier, output, detector=BrokenDetector())
        outcome = await service.build(workspace)
        assert outcome.ok


class TestPush:
    @pytest.mark.asyncio
    async def test_push_success_reports_pushed(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=0))
        outcome = await make_service(config, executor, notifier, output).push(workspace)

        assert outcome.ok
        assert executor.commands[-1] == "docker push myapp:1.2"
        assert output.infos == [("myapp:1.2 pushed.", "Docker")]

    @pytest.mark.asyncio
    async def test_push_diagnosed(self, config, executor, notifier, output, workspace):
        stderr = "unauthorized: authentication required"
        executor.results.update(git=GIT, docker=CommandResult(exit_code=1, stderr=stderr))
        outcome = await make_service(config, executor, notifier, output).push(workspace)

        assert outcome.kind is OutcomeKind.PUSH_DIAGNOSED
        assert outcome.reason is PushErrorReason.AUTHENTICATION
        assert output.errors == [(stderr, "Docker")]
        assert len(notifier.errors) == 1
        assert stderr not in notifier.errors[0]

    @pytest.mark.asyncio
    async def test_push_does_not_run_fallback_check(self, config, executor, notifier, output, workspace):
        executor.results.update(git=GIT, docker=CommandResult(exit_code=0))
        detector = FallbackDetector(ToolRegistry(config), executor, notifier, output)
        await make_service(config, executor, notifier, output, detector=detector).push(workspace)
        assert not any("version" in c.split() for c in executor.commands)


class TestMissingFolder:
    @pytest.mark.asyncio
    async def test_build_in_missing_folder_is_not_reported_as_missing_tool(self, config, notifier, output, tmp_path):
        service = ImageService(ToolRegistry(config), ShellExecutor(), notifier, output, image_user=None)
        with pytest.raises(ImageBuildError):
            await service.build(tmp_path / "gone")
        assert notifier.errors == []
