from __future__ import annotations

import sys

from loguru import logger

from layer_packager.config import FULL_PLUGIN_NAME


def setup_logging(level: str = "INFO") -> None:
    """
    Configures loguru for the layer_packager library.

    Enables "layer_packager" logs with a format that prefixes every line with
    the plugin name and the bound `target` (the layer being packaged, `-`
    outside of a target build).
    """
    logger.remove()
    logger.configure(extra={"target": "-"})

    fmt = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        f"[{FULL_PLUGIN_NAME}] "
        "<cyan>{extra[target]}</cyan> - "
        "<level>{message}</level>"
    )

    logger.add(sys.stderr, format=fmt, level=level)
    logger.enable("layer_packager")
