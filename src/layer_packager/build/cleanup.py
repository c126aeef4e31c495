from __future__ import annotations

import shutil
from pathlib import Path

from anyio import to_thread
from attrs import define
from loguru import logger

from layer_packager.config import PluginConfig
from layer_packager.container import BuildEnvironmentManager
from layer_packager.exceptions import ExecutionError


@define
class Cleanup:
    """Removes the build tree and stops the build container. Never raises."""

    config: PluginConfig
    environment: BuildEnvironmentManager | None = None

    async def clean(self) -> bool:
        if not self.config.cleanup:
            logger.info(
                'Cleanup is set to "false". Build directory and Docker container '
                "(if used) will be retained"
            )
            return False

        logger.info("Cleaning build directory...")
        try:
            await to_thread.run_sync(shutil.rmtree, Path(self.config.build_dir))
        except FileNotFoundError:
            logger.debug("{} is already gone", self.config.build_dir)
        except OSError as exc:
            logger.error("Failed to remove {}: {}", self.config.build_dir, exc)

        if self.environment is not None:
            logger.info("Removing Docker container...")
            try:
                await self.environment.stop_container(self.config.container_name)
            except ExecutionError as exc:
                logger.error("Failed to stop {}: {}", self.config.container_name, exc)

        return True
