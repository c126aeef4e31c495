from __future__ import annotations

from .classifier import Classification, DiagnosticKind, classify
from .gate import Decision, InteractiveGate
from .runner import CommandRunner, Executor, StderrPolicy

__all__ = [
    "Classification",
    "CommandRunner",
    "Decision",
    "DiagnosticKind",
    "Executor",
    "InteractiveGate",
    "StderrPolicy",
    "classify",
]
