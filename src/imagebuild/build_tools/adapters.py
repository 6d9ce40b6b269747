"""Build tool adapters: command grammar and availability probes per tool."""

from __future__ import annotations

from dataclasses import dataclass

from imagebuild.build_tools.types import ExecOptions, Executor, ToolId
from imagebuild.infrastructure.config import PROBE_TIMEOUT
from imagebuild.infrastructure.logger import logger


@dataclass(frozen=True)
class ToolAdapter:
    """One container image build tool.

    Adapters are plain records; tool differences are data (the build verb and
    the probe arguments), not subclasses. Anything that touches a process gets
    its executor passed in.
    """

    tool_id: ToolId
    display_name: str
    binary: str
    build_verb: str = "build"
    probe_args: tuple[str, ...] = ("version",)

    def build_command(self, image: str) -> str:
        """Return the command line that builds ``image`` from the current directory."""
        return f"{self.binary} {self.build_verb} -t {image} ."

    def push_command(self, image: str) -> str:
        """Return the command line that publishes ``image`` to its registry."""
        return f"{self.binary} push {image}"

    def probe_command(self) -> str:
        return " ".join([self.binary, *self.probe_args])

    async def is_available(self, executor: Executor) -> bool:
        """Return True if the tool is installed and usable.

        Any failure to determine availability counts as unavailable.
        """
        command = self.probe_command()
        try:
            result = await executor.run(command, ExecOptions(timeout=PROBE_TIMEOUT))
        except Exception:
            logger.warning("Availability probe errored", tool=self.tool_id.value, command=command, exc_info=True)
            return False

        if result is None:
            logger.debug("Build tool not invocable", tool=self.tool_id.value, binary=self.binary)
            return False
        if not result.ok:
            logger.debug(
                "Build tool probe failed",
                tool=self.tool_id.value,
                code=result.exit_code,
                stderr=result.stderr.strip()[:200],
            )
            return False
        return True


DOCKER = ToolAdapter(
    tool_id=ToolId.DOCKER,
    display_name="Docker",
    binary="docker",
    # A bare `docker version` succeeds with a client but no daemon.
    probe_args=("version", "--format", '"{{.Server.APIVersion}}"'),
)

BUILDAH = ToolAdapter(
    tool_id=ToolId.BUILDAH,
    display_name="Buildah",
    binary="buildah",
    build_verb="bud",
)

PODMAN = ToolAdapter(
    tool_id=ToolId.PODMAN,
    display_name="Podman",
    binary="podman",
)
