from __future__ import annotations

from loguru import logger

from .build import BuildTarget
from .config import PluginConfig
from .plugin import DependencyLayerPackager
from .service import ServiceDefinition, load_service

logger.disable("layer_packager")

__all__ = [
    "BuildTarget",
    "DependencyLayerPackager",
    "PluginConfig",
    "ServiceDefinition",
    "load_service",
]
