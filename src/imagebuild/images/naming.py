"""Default image names derived from the folder name and git version."""

from __future__ import annotations

import re
from pathlib import Path

from imagebuild.build_tools.types import ExecOptions, Executor
from imagebuild.errors import ImageBuildError
from imagebuild.infrastructure.config import IMAGE_USER

_INVALID_TAG_CHARS = re.compile(r"[^a-z0-9._-]")

DEFAULT_VERSION = "latest"


def sanitise_tag(name: str) -> str:
    """Lower-case ``name`` and replace characters not allowed in image names."""
    return _INVALID_TAG_CHARS.sub("-", name.lower())


async def find_version(cwd: Path, executor: Executor) -> str:
    """Describe the checkout at ``cwd``; falls back to 'latest' outside git."""
    result = await executor.run("git describe --always --dirty", ExecOptions(cwd=cwd))
    if result is not None and result.ok and result.stdout.strip():
        return result.stdout.strip()
    return DEFAULT_VERSION


async def default_image_name(cwd: Path, executor: Executor, image_user: str | None = IMAGE_USER) -> str:
    name = sanitise_tag(cwd.resolve().name)
    if not name:
        raise ImageBuildError(f"Cannot derive an image name from {cwd}")
    version = await find_version(cwd, executor)
    image = f"{name}:{version}"
    if image_user:
        image = f"{image_user.rstrip('/')}/{image}"
    return image
