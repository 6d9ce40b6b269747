"""ImageService: builds and pushes the image for a folder with the active tool."""

from __future__ import annotations

from pathlib import Path

from imagebuild.build_tools.adapters import ToolAdapter
from imagebuild.build_tools.detector import FallbackDetector
from imagebuild.build_tools.outcome import Outcome, classify
from imagebuild.build_tools.registry import ToolRegistry
from imagebuild.build_tools.types import ExecOptions, Executor, Notifier, Operation, OutputChannel
from imagebuild.images.naming import default_image_name
from imagebuild.infrastructure.config import IMAGE_USER
from imagebuild.infrastructure.logger import logger


class ImageService:
    """Runs build/push through one exec, classify, report path."""

    def __init__(
        self,
        registry: ToolRegistry,
        executor: Executor,
        notifier: Notifier,
        output: OutputChannel,
        detector: FallbackDetector | None = None,
        image_user: str | None = IMAGE_USER,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._notifier = notifier
        self._output = output
        self._detector = detector
        self._image_user = image_user

    async def build(self, cwd: Path) -> Outcome:
        if self._detector is not None:
            try:
                await self._detector.detect_once()
            except Exception:
                logger.exception("Build tool fallback check failed")
        return await self._run(Operation.BUILD, cwd)

    async def push(self, cwd: Path) -> Outcome:
        return await self._run(Operation.PUSH, cwd)

    async def _run(self, operation: Operation, cwd: Path) -> Outcome:
        tool = self._registry.resolve_active()
        image = await default_image_name(cwd, self._executor, self._image_user)

        if operation is Operation.BUILD:
            command = tool.build_command(image)
        else:
            command = tool.push_command(image)

        logger.info(f"Starting image {operation.value}", tool=tool.tool_id.value, image=image, cwd=str(cwd))
        result = await self._executor.run(command, ExecOptions(cwd=cwd))
        outcome = classify(operation, result, image=image, tool=tool)
        self._report(outcome, tool)
        return outcome

    def _report(self, outcome: Outcome, tool: ToolAdapter) -> None:
        if outcome.ok:
            self._output.info(outcome.message, scope=tool.display_name)
            return
        if outcome.stderr.strip():
            self._output.error(outcome.stderr, scope=tool.display_name)
        logger.warning(
            f"Image {outcome.operation.value} failed",
            kind=outcome.kind.value,
            reason=outcome.reason.value if outcome.reason else None,
            image=outcome.image,
        )
        self._notifier.show_error(outcome.message)
