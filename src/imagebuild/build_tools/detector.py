"""Offers an alternative build tool when the primary one is not usable."""

from __future__ import annotations

from imagebuild.build_tools.adapters import ToolAdapter
from imagebuild.build_tools.registry import ToolRegistry
from imagebuild.build_tools.types import Executor, Notifier, OutputChannel, ToolId
from imagebuild.infrastructure.config import BUILD_TOOL_SETTING_KEY
from imagebuild.infrastructure.logger import logger


class FallbackDetector:
    """Checks whether the primary build tool is broken and an alternative works.

    The switch is advisory: the configured tool only changes after the user
    accepts the prompt.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        executor: Executor,
        notifier: Notifier,
        output: OutputChannel,
    ) -> None:
        self._registry = registry
        self._executor = executor
        self._notifier = notifier
        self._output = output
        self._has_run = False

    async def detect_once(self) -> ToolId | None:
        if self._has_run:
            return None
        self._has_run = True
        return await self.detect()

    async def detect(self) -> ToolId | None:
        """Run the check. Returns the newly configured tool, or None if unchanged."""
        primary = self._registry.primary
        current = self._registry.config.get_build_tool()
        if current != primary.tool_id.value:
            return None

        if await primary.is_available(self._executor):
            return None

        alternative = await self._first_available_alternative()
        if alternative is None:
            logger.info("No alternative build tool available", primary=primary.tool_id.value)
            return None

        message = (
            f"{primary.display_name} isn't installed or it's not configured. "
            f"Do you want to use {alternative.display_name} as an image build tool?"
        )
        accepted = await self._notifier.confirm(message, f"Use {alternative.display_name}")
        if not accepted:
            logger.info("Fallback build tool declined", alternative=alternative.tool_id.value)
            return None

        self._registry.config.set_build_tool(alternative.tool_id)
        self._output.info(
            f"{alternative.display_name} has been set as a container image build tool. "
            f"It can be changed in '{BUILD_TOOL_SETTING_KEY}' setting later."
        )
        return alternative.tool_id

    async def _first_available_alternative(self) -> ToolAdapter | None:
        for adapter in self._registry.alternatives():
            if await adapter.is_available(self._executor):
                return adapter
        return None
