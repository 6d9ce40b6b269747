"""Classification of build/push command results into user-facing outcomes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from imagebuild.build_tools.adapters import ToolAdapter
from imagebuild.build_tools.types import CommandResult, Operation


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    TOOL_UNAVAILABLE = "tool_unavailable"
    COMMAND_FAILED = "command_failed"
    PUSH_DIAGNOSED = "push_diagnosed"


class PushErrorReason(str, Enum):
    AUTHENTICATION = "authentication"
    UNKNOWN_REPOSITORY = "unknown_repository"
    NETWORK = "network"
    IMAGE_NOT_BUILT = "image_not_built"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    operation: Operation
    image: str
    message: str
    stderr: str = ""
    reason: PushErrorReason | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS


# First match wins; authentication is checked before repository errors since
# registries often answer "denied: requested access to the resource is denied"
# for repositories the user cannot see. Only registry-style "denied:" replies
# count: a local "permission denied" on the daemon socket is not a credential
# problem.
_PUSH_PATTERNS: list[tuple[PushErrorReason, re.Pattern[str], str]] = [
    (
        PushErrorReason.AUTHENTICATION,
        re.compile(
            r"unauthorized|authentication required|^\s*denied:|requested access to the resource is denied"
            r"|not logged in|no basic auth credentials|authorization failed|incorrect username or password",
            re.IGNORECASE | re.MULTILINE,
        ),
        "Image push failed: the registry refused your credentials. Log in to the registry and try again.",
    ),
    (
        PushErrorReason.UNKNOWN_REPOSITORY,
        re.compile(
            r"repository does not exist|name unknown|repository name not known|no such repository",
            re.IGNORECASE,
        ),
        "Image push failed: the repository does not exist. Check the image name and registry prefix.",
    ),
    (
        PushErrorReason.IMAGE_NOT_BUILT,
        re.compile(r"an image does not exist locally|no such image|image not known", re.IGNORECASE),
        "Image push failed: there is no local image with that tag. Build the image before pushing.",
    ),
    (
        PushErrorReason.NETWORK,
        re.compile(
            r"no such host|connection refused|i/o timeout|network is unreachable|dial tcp"
            r"|tls handshake timeout|could not resolve host|server misbehaving",
            re.IGNORECASE,
        ),
        "Image push failed: the registry could not be reached. Check your network connection.",
    ),
]

_PAST_TENSE = {Operation.BUILD: "built", Operation.PUSH: "pushed"}


def diagnose_push_error(stderr: str) -> tuple[PushErrorReason, str] | None:
    """Map push stderr to a known reason and a readable explanation."""
    for reason, pattern, text in _PUSH_PATTERNS:
        if pattern.search(stderr):
            return reason, text
    return None


def classify(
    operation: Operation,
    result: CommandResult | None,
    *,
    image: str,
    tool: ToolAdapter,
) -> Outcome:
    """Turn the result of a build or push into an Outcome.

    ``result`` is None when the tool binary could not be invoked. The message is
    always a short summary; stderr travels separately on the outcome.
    """
    verb = operation.value
    if result is None:
        return Outcome(
            kind=OutcomeKind.TOOL_UNAVAILABLE,
            operation=operation,
            image=image,
            message=f"Image {verb} failed; unable to call {tool.binary}.",
        )

    if result.ok:
        return Outcome(
            kind=OutcomeKind.SUCCESS,
            operation=operation,
            image=image,
            message=f"{image} {_PAST_TENSE[operation]}.",
        )

    if operation is Operation.PUSH:
        diagnosis = diagnose_push_error(result.stderr)
        if diagnosis:
            reason, text = diagnosis
            return Outcome(
                kind=OutcomeKind.PUSH_DIAGNOSED,
                operation=operation,
                image=image,
                message=f"{text} See the {tool.display_name} output for the push error message.",
                stderr=result.stderr,
                reason=reason,
            )

    return Outcome(
        kind=OutcomeKind.COMMAND_FAILED,
        operation=operation,
        image=image,
        message=f"Image {verb} failed. See the output log for details.",
        stderr=result.stderr,
    )
