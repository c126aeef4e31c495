from __future__ import annotations

from .cleanup import Cleanup
from .containerfile import render_containerfile
from .installer import DependencyInstaller
from .model import BuildTarget
from .pipeline import LayerBuildPipeline

__all__ = [
    "BuildTarget",
    "Cleanup",
    "DependencyInstaller",
    "LayerBuildPipeline",
    "render_containerfile",
]
