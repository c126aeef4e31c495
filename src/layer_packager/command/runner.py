from __future__ import annotations

import shlex
from collections.abc import Awaitable, Callable
from enum import StrEnum

from attrs import define, field
from loguru import logger

from layer_packager.exceptions import (
    DiagnosticError,
    EnvironmentUnavailableError,
    UserAbortedError,
)
from layer_packager.utils.process import ProcessResult, run_process

from .classifier import Classification, DiagnosticKind, classify
from .gate import InteractiveGate

type Executor = Callable[..., Awaitable[ProcessResult]]


class StderrPolicy(StrEnum):
    CLASSIFY = "classify"
    """Classify stderr; ambiguous output goes to the operator."""

    STRICT = "strict"
    """Non-zero exit or any stderr that is not ignorable is fatal."""

    LOG_ONLY = "log_only"
    """Log stderr and exit status, never raise."""


@define
class CommandRunner:
    """
    Runs external commands and decides whether their diagnostics stop the run.

    Captured stderr is always logged before it is classified, so the operator
    has the full context when a confirmation prompt follows.
    """

    gate: InteractiveGate = field(factory=InteractiveGate)
    abort_on_ambiguous: bool = False
    execute: Executor = run_process

    async def run(
        self,
        command: str,
        *args: str,
        policy: StderrPolicy = StderrPolicy.CLASSIFY,
    ) -> ProcessResult:
        logger.debug("Running {}", shlex.join([command, *args]))
        result = await self.execute(command, *args)

        stderr = result.stderr.strip()
        if stderr:
            logger.info(stderr)

        if policy is StderrPolicy.LOG_ONLY:
            if result.returncode != 0:
                logger.warning("{} exited with status {}", command, result.returncode)
            return result

        if policy is StderrPolicy.STRICT and result.returncode != 0:
            logger.error("stdout: {}", result.stdout)
            raise EnvironmentUnavailableError(
                f"{shlex.join([command, *args[:1]])} failed "
                f"with exit status {result.returncode}: {stderr}"
            )

        if stderr:
            verdict = classify(stderr)
        elif result.returncode != 0:
            verdict = Classification(
                kind=DiagnosticKind.AMBIGUOUS,
                stderr=f"{command} exited with status {result.returncode}",
            )
        else:
            return result

        await self._settle(verdict, result, policy)
        return result

    async def _settle(
        self, verdict: Classification, result: ProcessResult, policy: StderrPolicy
    ) -> None:
        if verdict.kind.ignored:
            logger.debug("Ignoring stderr ({})", verdict.kind)
            return

        match verdict.kind:
            case DiagnosticKind.FATAL:
                logger.error("stdout: {}", result.stdout)
                raise DiagnosticError("Docker Error Detected")
            case DiagnosticKind.AMBIGUOUS:
                logger.error("___ERROR DETECTED, BEGIN STDOUT____\n{}", result.stdout)
                if policy is StderrPolicy.STRICT:
                    raise EnvironmentUnavailableError(verdict.stderr)
                if self.abort_on_ambiguous:
                    raise UserAbortedError(
                        "Aborting: abortOnPackagingErrors is set and errors were reported"
                    )
                await self.gate.confirm()
