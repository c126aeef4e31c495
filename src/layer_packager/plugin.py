from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Final

from attrs import define, field
from loguru import logger

from layer_packager.build import BuildTarget, Cleanup, DependencyInstaller, LayerBuildPipeline
from layer_packager.command import CommandRunner, Executor, InteractiveGate
from layer_packager.config import PluginConfig
from layer_packager.container import BuildEnvironmentManager, get_backend
from layer_packager.service import ServiceDefinition
from layer_packager.utils.process import run_process

BEFORE_PACKAGE_HOOK: Final = "before:package:createDeploymentArtifacts"
AFTER_DEPLOY_HOOK: Final = "after:deploy:deploy"

type Hook = Callable[[], Awaitable[object]]


@define
class DependencyLayerPackager:
    """
    Packages every layer of a service into a zip artifact.

    The host calls `hooks[BEFORE_PACKAGE_HOOK]` to build and
    `hooks[AFTER_DEPLOY_HOOK]` to clean up afterwards. Relative paths in the
    configuration resolve against the process working directory, which is also
    the tree mounted into the build container.
    """

    service: ServiceDefinition
    gate: InteractiveGate = field(factory=InteractiveGate.from_environment)
    execute: Executor = run_process

    config: PluginConfig = field(init=False)
    runner: CommandRunner = field(init=False)
    environment: BuildEnvironmentManager | None = field(init=False, default=None)
    pipeline: LayerBuildPipeline = field(init=False)
    cleanup: Cleanup = field(init=False)

    def __attrs_post_init__(self) -> None:
        self.config = self.service.plugin_config()
        self.runner = CommandRunner(
            gate=self.gate,
            abort_on_ambiguous=self.config.abort_on_packaging_errors,
            execute=self.execute,
        )

        container = None
        if self.config.use_docker:
            self.environment = BuildEnvironmentManager(
                runner=self.runner,
                backend=get_backend(self.config.container_engine),
            )
            container = self.environment.exec_target(self.config.container_name)

        installer = DependencyInstaller(
            runner=self.runner, installer=self.config.installer, container=container
        )
        self.pipeline = LayerBuildPipeline(config=self.config, installer=installer)
        self.cleanup = Cleanup(config=self.config, environment=self.environment)

    @property
    def hooks(self) -> dict[str, Hook]:
        return {
            BEFORE_PACKAGE_HOOK: self.package,
            AFTER_DEPLOY_HOOK: self.clean,
        }

    def targets(self) -> list[BuildTarget]:
        return self.service.build_targets()

    async def package(self) -> list[Path]:
        for function, artifact in self.service.assign_artifacts(
            self.config.build_dir
        ).items():
            logger.debug("Artifact for {}: {}", function, artifact)

        Path(self.config.build_dir).mkdir(parents=True, exist_ok=True)

        if self.environment is not None:
            await self.environment.setup(self.config)

        return await self.pipeline.build_all(self.targets())

    async def clean(self) -> bool:
        return await self.cleanup.clean()
