"""Registry of supported build tools and resolution of the configured one."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from imagebuild.build_tools.adapters import BUILDAH, DOCKER, PODMAN, ToolAdapter
from imagebuild.build_tools.types import BuildToolConfig, ToolId
from imagebuild.errors import ConfigurationError

# Order matters: the first tool is the primary one, the rest are fallbacks
# in priority order.
SUPPORTED_TOOLS: tuple[ToolAdapter, ...] = (DOCKER, BUILDAH, PODMAN)


class ToolRegistry:
    """Maps tool identifiers to adapters and resolves the configured tool."""

    def __init__(self, config: BuildToolConfig, adapters: Iterable[ToolAdapter] = SUPPORTED_TOOLS) -> None:
        self._config = config
        self._adapters: dict[ToolId, ToolAdapter] = {}
        for adapter in adapters:
            if adapter.tool_id in self._adapters:
                raise ValueError(f'Build tool "{adapter.tool_id.value}" is already registered')
            self._adapters[adapter.tool_id] = adapter
        if not self._adapters:
            raise ValueError("At least one build tool must be registered")

    @property
    def config(self) -> BuildToolConfig:
        return self._config

    @property
    def primary(self) -> ToolAdapter:
        return next(iter(self._adapters.values()))

    def alternatives(self) -> Iterator[ToolAdapter]:
        """Yield every tool except the primary one, in priority order."""
        primary = self.primary
        return (a for a in self._adapters.values() if a is not primary)

    def get_all(self) -> list[ToolAdapter]:
        return list(self._adapters.values())

    def get(self, tool_id: str) -> ToolAdapter:
        """Look up an adapter by identifier, raising ConfigurationError if unknown."""
        try:
            return self._adapters[ToolId(tool_id)]
        except (ValueError, KeyError):
            raise ConfigurationError(str(tool_id), [t.value for t in self._adapters]) from None

    def resolve_active(self) -> ToolAdapter:
        return self.get(self._config.get_build_tool())

    def build_command_for_active(self, image: str) -> str:
        return self.resolve_active().build_command(image)

    def push_command_for_active(self, image: str) -> str:
        return self.resolve_active().push_command(image)
