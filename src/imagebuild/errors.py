"""Exception hierarchy for image build tooling."""

from __future__ import annotations


class ImageBuildError(Exception):
    """Base class for errors raised by imagebuild."""


class ConfigurationError(ImageBuildError):
    """The configured build tool is not one of the registered tools."""

    def __init__(self, tool_id: str, supported: list[str]) -> None:
        super().__init__(
            f'Unknown image build tool "{tool_id}". Supported tools: {", ".join(supported)}'
        )
        self.tool_id = tool_id
        self.supported = supported


class SettingsError(ImageBuildError):
    """The settings file exists but could not be read or validated."""
