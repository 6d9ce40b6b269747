"""Persisted user settings: which build tool is configured."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ValidationError

from imagebuild.build_tools.types import ToolId
from imagebuild.errors import SettingsError
from imagebuild.infrastructure.config import DEFAULT_BUILD_TOOL, SETTINGS_PATH
from imagebuild.infrastructure.logger import logger


class BuildSettings(BaseModel):
    build_tool: str | None = None
    image_user: str | None = None


class SettingsStore:
    """JSON-file backed implementation of the build tool config collaborator.

    The stored tool id is returned as a raw string; validating it against the
    registered tools is the registry's job.
    """

    def __init__(self, path: Path | None = None, default_tool: str = DEFAULT_BUILD_TOOL) -> None:
        self._path = path or SETTINGS_PATH
        self._default_tool = default_tool

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> BuildSettings:
        if not self._path.exists():
            return BuildSettings()
        try:
            data = json.loads(self._path.read_text())
            return BuildSettings(**data)
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as err:
            raise SettingsError(f"Invalid settings file {self._path}: {err}") from err

    def get_build_tool(self) -> str:
        return self.load().build_tool or self._default_tool

    def set_build_tool(self, tool_id: ToolId) -> None:
        settings = self.load()
        settings.build_tool = ToolId(tool_id).value
        self._write(settings)
        logger.info("Build tool setting saved", tool=settings.build_tool, path=str(self._path))

    def _write(self, settings: BuildSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".settings-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as fh:
                fh.write(settings.model_dump_json(indent=2, exclude_none=True))
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
