from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import Final

from attrs import frozen


class DiagnosticKind(StrEnum):
    FALSE_POSITIVE = "false_positive"
    WARNING = "warning"
    FATAL = "fatal"
    AMBIGUOUS = "ambiguous"

    @property
    def ignored(self) -> bool:
        return self in (DiagnosticKind.FALSE_POSITIVE, DiagnosticKind.WARNING)


@frozen
class Classification:
    """Verdict over one command's stderr, with the text that produced it."""

    kind: DiagnosticKind
    stderr: str


@frozen
class Rule:
    kind: DiagnosticKind
    matches: Callable[[str], bool]


def _is_git_clone_notice(text: str) -> bool:
    # pip reports "Running command git clone ..." on stderr for VCS requirements
    return (
        "ERROR:" not in text
        and len(text.split("\n")) < 2
        and "git clone" in text.lower()
    )


def _is_warning(text: str) -> bool:
    lowered = text.lower()
    return "warning" in lowered and "error" not in lowered


def _is_engine_error(text: str) -> bool:
    return "docker" in text.lower()


RULES: Final[tuple[Rule, ...]] = (
    Rule(DiagnosticKind.FALSE_POSITIVE, _is_git_clone_notice),
    Rule(DiagnosticKind.WARNING, _is_warning),
    Rule(DiagnosticKind.FATAL, _is_engine_error),
)


def classify(stderr: str) -> Classification:
    """Classify captured stderr. The first matching rule wins; no match is ambiguous."""
    text = stderr.strip()
    for rule in RULES:
        if rule.matches(text):
            return Classification(kind=rule.kind, stderr=text)
    return Classification(kind=DiagnosticKind.AMBIGUOUS, stderr=text)
