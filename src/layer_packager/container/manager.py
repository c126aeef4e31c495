from __future__ import annotations

from pathlib import Path
from typing import Final

from attrs import define, field, frozen
from loguru import logger

from layer_packager.command import CommandRunner, StderrPolicy
from layer_packager.config import SERVICE_MOUNT_PATH, PluginConfig

from .utils import (
    BindMount,
    build_exec_command,
    build_images_command,
    build_ps_command,
    build_run_command,
    qualify_image,
    to_container_path,
)

VERSION_FORMAT: Final = (
    "Server Version {{.Server.Version}} & Client Version {{.Client.Version}}"
)
SSH_MOUNT_TARGET: Final = "/root/.ssh"


@frozen
class ContainerExec:
    """Routes commands into a running build container through `exec`."""

    backend: str
    container: str
    workdir: Path
    mount_target: str = SERVICE_MOUNT_PATH

    def command(self, *cmd: str) -> list[str]:
        return build_exec_command(
            self.backend, self.container, *cmd, workdir=self.mount_target
        )

    def path(self, host_path: str | Path) -> str:
        return to_container_path(
            host_path, workdir=self.workdir, mount_target=self.mount_target
        )


@define
class BuildEnvironmentManager:
    """
    Keeps a named, long-lived build container ready for `exec` calls.

    Nothing is cached between calls: engine, image and container state are
    queried live every time because they can change out of band.
    """

    runner: CommandRunner
    backend: str
    workdir: Path = field(factory=Path.cwd)
    home: Path = field(factory=Path.home)

    async def ensure_engine_reachable(self) -> str:
        result = await self.runner.run(
            self.backend, "version", "-f", VERSION_FORMAT, policy=StderrPolicy.STRICT
        )
        version = result.stdout.strip()
        logger.info("Using {} {}", self.backend, version)
        return version

    async def ensure_image_present(self, image: str) -> bool:
        """Pull `image` unless it is installed locally. Returns True if it was pulled."""
        result = await self.runner.run(
            *build_images_command(self.backend, image), policy=StderrPolicy.STRICT
        )
        if qualify_image(image) in result.stdout.split():
            return False

        logger.info(
            "Docker Image {} is not already installed on your system. Downloading. "
            "This might take a while. Subsequent deploys will be faster...",
            image,
        )
        await self.runner.run(self.backend, "pull", image, policy=StderrPolicy.STRICT)
        return True

    async def container_exists(self, name: str) -> bool:
        result = await self.runner.run(*build_ps_command(self.backend, name))
        return name in result.stdout.split()

    async def ensure_container(
        self,
        name: str,
        image: str,
        *,
        env: tuple[str, ...] = (),
        mount_ssh: bool = False,
    ) -> None:
        """Start a fresh container called `name`, replacing any existing one."""
        if await self.container_exists(name):
            logger.info("Container already exists. Killing it and reusing.")
            await self.runner.run(self.backend, "rm", "-f", name)

        mounts = [BindMount.from_path(self.workdir, target=SERVICE_MOUNT_PATH)]
        if mount_ssh:
            mounts.append(BindMount.from_path(self.home / ".ssh", target=SSH_MOUNT_TARGET))

        cmd = build_run_command(
            self.backend,
            image,
            name=name,
            mounts=mounts,
            command=["bash"],
            env=env,
            workdir=SERVICE_MOUNT_PATH,
            detach=True,
            tty=True,
        )
        await self.runner.run(*cmd)
        logger.info("Container created")

    async def setup(self, config: PluginConfig) -> None:
        logger.info("Packaging using Docker container...")
        await self.ensure_engine_reachable()
        await self.ensure_image_present(config.docker_image)
        logger.info('Creating Docker container "{}"...', config.container_name)
        await self.ensure_container(
            config.container_name,
            config.docker_image,
            env=config.docker_envs,
            mount_ssh=config.mount_ssh,
        )
        logger.info("Docker setup completed")

    async def stop_container(self, name: str) -> None:
        await self.runner.run(
            self.backend, "stop", name, "-t", "0", policy=StderrPolicy.LOG_ONLY
        )

    def exec_target(self, name: str) -> ContainerExec:
        return ContainerExec(backend=self.backend, container=name, workdir=self.workdir)
