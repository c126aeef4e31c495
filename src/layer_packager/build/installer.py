from __future__ import annotations

from pathlib import Path

from attrs import define
from loguru import logger

from layer_packager.command import CommandRunner
from layer_packager.container import ContainerExec
from layer_packager.utils.process import ProcessResult, normalize_path


@define
class DependencyInstaller:
    """
    Installs one requirements manifest into a layer build directory.

    With `container` set the installer runs through `exec` in the build
    container and both paths are rewritten to their in-container form;
    otherwise it runs on the host.
    """

    runner: CommandRunner
    installer: str = "pip"
    container: ContainerExec | None = None

    def command(self, build_dir: Path, manifest: Path) -> list[str]:
        if self.container is None:
            target, requirements = normalize_path(build_dir), normalize_path(manifest)
            return [self.installer, "install", "--upgrade", "-t", target, "-r", requirements]

        return self.container.command(
            self.installer,
            "install",
            "--upgrade",
            "-t",
            self.container.path(build_dir),
            "-r",
            self.container.path(manifest),
        )

    async def install(self, build_dir: Path, manifest: Path) -> ProcessResult | None:
        if not manifest.exists():
            return None
        if manifest.stat().st_size == 0:
            logger.warning("WARNING: requirements file at {} is empty. Skipping.", manifest)
            return None

        logger.info("Installing {} into {}", manifest, build_dir)
        return await self.runner.run(*self.command(build_dir, manifest))
