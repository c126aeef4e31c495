from __future__ import annotations

import posixpath
from os import PathLike
from typing import NamedTuple

import anyio

from layer_packager.exceptions import ExecutionError


class ProcessResult(NamedTuple):
    returncode: int
    stdout: str
    stderr: str


async def run_process(
    *command: str,
    input: str | None = None,
    check: bool = False,
    encoding: str = "utf-8",
) -> ProcessResult:
    """Runs a process and returns its result including stdout and stderr.

    Raises `ExecutionError` when the executable cannot be launched.
    """
    try:
        result = await anyio.run_process(
            list(command),
            input=input.encode(encoding) if input else None,
            check=check,
        )
    except OSError as exc:
        raise ExecutionError(f"Failed to launch {command[0]!r}: {exc}") from exc

    return ProcessResult(
        returncode=result.returncode,
        stdout=result.stdout.decode(encoding, errors="replace"),
        stderr=result.stderr.decode(encoding, errors="replace"),
    )


def normalize_path(path: str | PathLike[str]) -> str:
    """Forward-slash, dot-free form of `path` for installer and container arguments."""
    return posixpath.normpath(str(path).replace("\\", "/"))
