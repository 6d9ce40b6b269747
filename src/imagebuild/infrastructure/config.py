"""Configuration constants resolved from the environment and .env."""

from __future__ import annotations

import os
from pathlib import Path


def read_env_file(keys: list[str], path: Path | None = None) -> dict[str, str]:
    """Parse a .env file and return values for requested keys.

    Does NOT load into os.environ, so build tools spawned later never see
    values that were only meant for imagebuild itself.
    """
    env_file = path or Path.cwd() / ".env"
    try:
        content = env_file.read_text()
    except OSError:
        return {}

    result: dict[str, str] = {}
    wanted = set(keys)

    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        if trimmed.startswith("export "):
            trimmed = trimmed[len("export ") :].lstrip()
        key, sep, value = trimmed.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key not in wanted:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        if value:
            result[key] = value

    return result


def _setting(name: str, default: str) -> str:
    return os.environ.get(name) or _env_config.get(name, default)


_env_config = read_env_file(
    [
        "IMAGEBUILD_TOOL",
        "IMAGEBUILD_IMAGE_USER",
        "IMAGEBUILD_SETTINGS",
        "IMAGEBUILD_COMMAND_TIMEOUT",
    ]
)

# Key users change to pick another build tool; named in user-facing messages.
BUILD_TOOL_SETTING_KEY: str = "imagebuild.buildTool"

DEFAULT_BUILD_TOOL: str = _setting("IMAGEBUILD_TOOL", "docker")
IMAGE_USER: str | None = _setting("IMAGEBUILD_IMAGE_USER", "") or None

HOME_DIR: Path = Path.home()
SETTINGS_PATH: Path = Path(
    _setting("IMAGEBUILD_SETTINGS", str(HOME_DIR / ".config" / "imagebuild" / "settings.json"))
).expanduser()

COMMAND_TIMEOUT: float = float(_setting("IMAGEBUILD_COMMAND_TIMEOUT", "600"))  # seconds
PROBE_TIMEOUT: float = 30.0
