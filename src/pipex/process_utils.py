"""Process spawning utilities.

Provides the spawn capability the executor depends on: start one stage
with its standard input and output redirected onto given descriptors,
then replace the child's image with the stage program. The default
implementation is a thin validated wrapper around subprocess.Popen.
"""

from __future__ import annotations

import errno
import os
import subprocess
from collections.abc import Iterable, Sequence
from typing import Any, Optional, Protocol

from .models import Stage

CommandArg = str | os.PathLike[str]

# Shell conventions for a program that could not be started
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126

_NOT_FOUND_ERRNOS = {errno.ENOENT, errno.ENOTDIR, errno.ENAMETOOLONG, errno.ELOOP}
_NOT_EXECUTABLE_ERRNOS = {
    errno.EACCES,
    errno.EPERM,
    errno.ENOEXEC,
    errno.EISDIR,
    errno.E2BIG,
    errno.ETXTBSY,
}


def _normalize_command(cmd: Sequence[CommandArg]) -> list[str]:
    """Validate and normalize subprocess command arguments."""
    if not cmd:
        msg = "Command must include at least one argument"
        raise ValueError(msg)

    normalized: list[str] = []
    for arg in cmd:
        if isinstance(arg, os.PathLike):
            value = os.fspath(arg)
        elif isinstance(arg, str):
            value = arg
        else:
            msg = "Command arguments must be strings or os.PathLike"
            raise TypeError(msg)

        if not value:
            msg = "Command arguments cannot be empty"
            raise ValueError(msg)

        normalized.append(value)

    return normalized


def popen_with_validation(
    cmd: Sequence[CommandArg], **kwargs: Any
) -> subprocess.Popen[Any]:
    """Run subprocess.Popen with validation to satisfy security lint checks."""
    normalized_cmd = _normalize_command(cmd)
    return subprocess.Popen(normalized_cmd, **kwargs)  # noqa: S603


class Spawner(Protocol):
    """Capability: spawn(stage, stdin, stdout) -> process handle.

    The child must have its stdin/stdout redirected onto the given
    descriptors (``None`` inherits the parent's), hold no other pipe
    descriptors, and then replace its image with ``stage.arguments``.
    Failure to replace the image raises OSError in the caller.
    """

    def spawn(
        self, stage: Stage, stdin: Optional[int], stdout: Optional[int]
    ) -> subprocess.Popen: ...


class PopenSpawner:
    """Spawn stages with subprocess.Popen (fork, dup2, close, exec)."""

    def spawn(
        self, stage: Stage, stdin: Optional[int], stdout: Optional[int]
    ) -> subprocess.Popen:
        # close_fds drops every inherited descriptor except 0, 1 and 2,
        # so no child keeps a stray copy of another stage's pipe end.
        return popen_with_validation(
            stage.arguments,
            stdin=stdin,
            stdout=stdout,
            close_fds=True,
        )


def exec_failure_status(exc: OSError) -> Optional[int]:
    """Map an image-replacement failure to a shell-style exit status.

    Returns None when the error is not an exec failure (e.g. fork hit
    EAGAIN or ENOMEM), which callers must treat as fatal.
    """
    if exc.errno in _NOT_FOUND_ERRNOS:
        return EXIT_NOT_FOUND
    if exc.errno in _NOT_EXECUTABLE_ERRNOS:
        return EXIT_NOT_EXECUTABLE
    return None


def terminate_and_reap(processes: Iterable[subprocess.Popen]) -> None:
    """Best-effort terminate children still running, then reap all of them."""
    processes = list(processes)
    for process in processes:
        if process.poll() is None:
            process.terminate()
    for process in processes:
        process.wait()
