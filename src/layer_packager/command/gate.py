from __future__ import annotations

import os
import sys
from collections.abc import Callable
from enum import StrEnum
from typing import Final

from anyio import to_thread
from attrs import define
from loguru import logger

from layer_packager.exceptions import UserAbortedError

DEFAULT_PROMPT: Final = (
    "\n\n??? Do you wish to continue deployment with the stated errors? \n"
)
CONTINUE_MESSAGE: Final = "Continuing Deployment!"
ABORT_MESSAGE: Final = "ABORTING DEPLOYMENT"


class Decision(StrEnum):
    CONTINUE = "continue"
    ABORT = "abort"


@define
class InteractiveGate:
    """
    Blocking yes/no confirmation used when installer output cannot be classified.

    Any answer containing "y" (case-insensitive) continues; everything else,
    including end of input, aborts. A gate that is not `interactive` never
    prompts and always aborts.
    """

    interactive: bool = True
    ask: Callable[[str], str] = input

    @classmethod
    def from_environment(cls, *, interactive: bool | None = None) -> InteractiveGate:
        if interactive is None:
            interactive = sys.stdin.isatty() and not os.environ.get("CI")
        return cls(interactive=interactive)

    async def resolve(self, prompt: str = DEFAULT_PROMPT) -> Decision:
        if not self.interactive:
            logger.warning("No operator input available, treating as abort")
            return Decision.ABORT

        try:
            response = await to_thread.run_sync(self.ask, prompt)
        except EOFError:
            logger.warning("Operator input closed, treating as abort")
            return Decision.ABORT

        return Decision.CONTINUE if "y" in response.lower() else Decision.ABORT

    async def confirm(
        self,
        prompt: str = DEFAULT_PROMPT,
        continue_message: str = CONTINUE_MESSAGE,
        abort_message: str = ABORT_MESSAGE,
    ) -> Decision:
        """Ask the operator and raise `UserAbortedError` unless they continue."""
        decision = await self.resolve(prompt)
        if decision is Decision.ABORT:
            logger.error(abort_message)
            raise UserAbortedError("Aborting")

        logger.warning(continue_message)
        return decision
