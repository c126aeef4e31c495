from __future__ import annotations

import shutil
import zipfile
from collections.abc import Iterable, Sequence
from functools import partial
from pathlib import Path

from anyio import to_thread
from attrs import define
from loguru import logger

from layer_packager.config import PluginConfig

from .installer import DependencyInstaller
from .model import BuildTarget


def copy_include(item: Path, build_path: Path) -> bool:
    """Copy `item` into `build_path`. Directory contents are merged in.

    Returns False when `item` does not exist.
    """
    if item.is_dir():
        shutil.copytree(item, build_path, dirs_exist_ok=True)
    elif item.exists():
        shutil.copy2(item, build_path / item.name)
    else:
        return False
    return True


def prepare_build_dir(build_path: Path, includes: Iterable[str]) -> None:
    build_path.mkdir(parents=True, exist_ok=True)
    for include in includes:
        if copy_include(Path(include), build_path):
            logger.debug("Copied {} into {}", include, build_path)


def compress_directory(source: Path, artifact: Path) -> Path:
    """Deflate every file under `source` into `artifact`, replacing any previous archive."""
    artifact.unlink(missing_ok=True)
    with zipfile.ZipFile(artifact, "w", zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(source.rglob("*")):
            archive.write(path, path.relative_to(source).as_posix())
    return artifact


@define
class LayerBuildPipeline:
    config: PluginConfig
    installer: DependencyInstaller

    def build_path(self, target: BuildTarget) -> Path:
        return Path(self.config.build_dir) / target.name

    def manifests(self, target: BuildTarget) -> list[Path]:
        own = self.build_path(target) / self.config.requirements_file
        return [own, *(Path(p) for p in self.config.global_requirements)]

    async def build(self, target: BuildTarget) -> Path:
        """Copy includes, install manifests and zip one layer. Returns the artifact path."""
        log = logger.bind(target=target.name)
        log.info("Packaging {}...", target.name)

        build_path = self.build_path(target)
        includes = [*target.includes, *self.config.global_includes]
        await to_thread.run_sync(partial(prepare_build_dir, build_path, includes))

        for manifest in self.manifests(target):
            if manifest.exists():
                await self.installer.install(build_path, manifest)

        artifact = build_path.with_name(f"{build_path.name}.zip")
        await to_thread.run_sync(compress_directory, build_path, artifact)
        log.info("Packaged {}", artifact)
        return artifact

    async def build_all(self, targets: Sequence[BuildTarget]) -> list[Path]:
        # targets share one build container, so they are built one at a time
        return [await self.build(target) for target in targets]
