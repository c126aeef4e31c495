from __future__ import annotations

from .manager import BuildEnvironmentManager, ContainerExec
from .utils import BindMount, get_backend

__all__ = [
    "BindMount",
    "BuildEnvironmentManager",
    "ContainerExec",
    "get_backend",
]
