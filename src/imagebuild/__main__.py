"""Entry point: python -m imagebuild"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from imagebuild.build_tools.detector import FallbackDetector
from imagebuild.build_tools.registry import ToolRegistry
from imagebuild.errors import ImageBuildError
from imagebuild.execution.shell import ShellExecutor
from imagebuild.images.service import ImageService
from imagebuild.infrastructure.config import IMAGE_USER
from imagebuild.infrastructure.console import ConsoleNotifier
from imagebuild.infrastructure.logger import logger
from imagebuild.infrastructure.output_channel import LogOutputChannel
from imagebuild.infrastructure.settings_store import SettingsStore


class App:
    """Wires the build tool core to the console, settings file and shell."""

    def __init__(self, settings: SettingsStore | None = None) -> None:
        self.settings = settings or SettingsStore()
        self.executor = ShellExecutor()
        self.notifier = ConsoleNotifier()
        self.output = LogOutputChannel()
        self.registry = ToolRegistry(self.settings)
        self.detector = FallbackDetector(self.registry, self.executor, self.notifier, self.output)

    def image_service(self) -> ImageService:
        image_user = self.settings.load().image_user or IMAGE_USER
        return ImageService(
            self.registry,
            self.executor,
            self.notifier,
            self.output,
            detector=self.detector,
            image_user=image_user,
        )

    async def build(self, path: Path) -> int:
        _require_folder(path)
        outcome = await self.image_service().build(path)
        return 0 if outcome.ok else 1

    async def push(self, path: Path) -> int:
        _require_folder(path)
        outcome = await self.image_service().push(path)
        return 0 if outcome.ok else 1

    async def detect(self) -> int:
        switched = await self.detector.detect()
        if switched is None:
            self.notifier.show_info(f"Using {self.registry.resolve_active().display_name}.")
        return 0

    async def tools(self) -> int:
        active = self.registry.resolve_active()
        for adapter in self.registry.get_all():
            available = await adapter.is_available(self.executor)
            marker = "*" if adapter is active else " "
            status = "available" if available else "unavailable"
            print(f"{marker} {adapter.tool_id.value:<8} {adapter.display_name:<8} {status}")
        return 0

    async def use(self, tool_id: str) -> int:
        adapter = self.registry.get(tool_id)
        self.settings.set_build_tool(adapter.tool_id)
        self.notifier.show_info(f"{adapter.display_name} is now the image build tool.")
        return 0


def _require_folder(path: Path) -> None:
    if not path.is_dir():
        raise ImageBuildError(f"{path} is not a folder")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="imagebuild", description="Build and push container images")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build the image for a folder")
    build.add_argument("path", nargs="?", type=Path, default=Path.cwd())

    push = sub.add_parser("push", help="Push the image for a folder")
    push.add_argument("path", nargs="?", type=Path, default=Path.cwd())

    sub.add_parser("detect", help="Offer an alternative tool if the configured one is broken")
    sub.add_parser("tools", help="List supported build tools and their availability")

    use = sub.add_parser("use", help="Set the image build tool")
    use.add_argument("tool")
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    app = App()

    try:
        if args.command == "build":
            return await app.build(args.path)
        if args.command == "push":
            return await app.push(args.path)
        if args.command == "detect":
            return await app.detect()
        if args.command == "tools":
            return await app.tools()
        return await app.use(args.tool)
    except ImageBuildError as err:
        logger.error("Cannot run command", command=args.command, error=str(err))
        app.notifier.show_error(str(err))
        return 2


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    run()
