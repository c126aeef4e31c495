from __future__ import annotations

import pytest

from layer_packager.command import Decision, InteractiveGate
from layer_packager.exceptions import UserAbortedError


def _answer(text):
    def ask(prompt):
        return text

    return ask


@pytest.mark.anyio
@pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES please", "  okay"])
async def test_answers_containing_y_continue(answer):
    gate = InteractiveGate(ask=_answer(answer))
    assert await gate.resolve() is Decision.CONTINUE
    assert await gate.confirm() is Decision.CONTINUE


@pytest.mark.anyio
@pytest.mark.parametrize("answer", ["n", "", "no", "NO", "abort"])
async def test_other_answers_abort(answer):
    gate = InteractiveGate(ask=_answer(answer))
    assert await gate.resolve() is Decision.ABORT
    with pytest.raises(UserAbortedError):
        await gate.confirm()


@pytest.mark.anyio
async def test_end_of_input_aborts():
    def ask(prompt):
        raise EOFError

    gate = InteractiveGate(ask=ask)
    with pytest.raises(UserAbortedError):
        await gate.confirm()


@pytest.mark.anyio
async def test_non_interactive_gate_never_prompts():
    def ask(prompt):
        raise AssertionError("must not prompt")

    gate = InteractiveGate(interactive=False, ask=ask)
    assert await gate.resolve() is Decision.ABORT


@pytest.mark.anyio
async def test_prompt_and_messages_are_forwarded(log_messages):
    prompts = []

    def ask(prompt):
        prompts.append(prompt)
        return "y"

    gate = InteractiveGate(ask=ask)
    await gate.confirm("Continue?", continue_message="onwards", abort_message="stop")

    assert prompts == ["Continue?"]
    assert "onwards" in log_messages


def test_from_environment_respects_ci(monkeypatch):
    monkeypatch.setenv("CI", "true")
    assert InteractiveGate.from_environment().interactive is False
    assert InteractiveGate.from_environment(interactive=True).interactive is True
