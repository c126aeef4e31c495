from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from attrs import define, field
from loguru import logger

from layer_packager.utils.process import ProcessResult

type Effect = Callable[[tuple[str, ...]], None]


@define
class RecordingExecutor:
    """Stands in for `run_process`: records every command and replays canned results."""

    calls: list[tuple[str, ...]] = field(factory=list)
    _responses: list[tuple[tuple[str, ...], ProcessResult, Effect | None]] = field(
        factory=list
    )

    def on(
        self,
        *prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Effect | None = None,
    ) -> None:
        self._responses.append(
            (prefix, ProcessResult(returncode, stdout, stderr), effect)
        )

    async def __call__(self, *command: str) -> ProcessResult:
        self.calls.append(command)
        # later registrations win
        for prefix, result, effect in reversed(self._responses):
            if command[: len(prefix)] == prefix:
                if effect is not None:
                    effect(command)
                return result
        return ProcessResult(0, "", "")

    def verbs(self) -> list[str]:
        return [call[1] for call in self.calls]


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    logger.enable("layer_packager")
    handler_id = logger.add(
        lambda message: messages.append(message.record["message"]),
        format="{message}",
        level="DEBUG",
    )
    try:
        yield messages
    finally:
        logger.remove(handler_id)
        logger.disable("layer_packager")
