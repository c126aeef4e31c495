from __future__ import annotations

import pytest

from layer_packager.build import Cleanup
from layer_packager.command import CommandRunner
from layer_packager.config import PluginConfig
from layer_packager.container import BuildEnvironmentManager
from layer_packager.exceptions import ExecutionError


def _config(build_dir, **options):
    return PluginConfig.resolve(
        {"buildDir": str(build_dir), "containerName": "depLayerPkg", **options},
        runtime="python3.9",
    )


@pytest.fixture
def build_dir(tmp_path):
    path = tmp_path / "build"
    (path / "api").mkdir(parents=True)
    (path / "api.zip").write_bytes(b"PK")
    return path


@pytest.mark.anyio
async def test_disabled_cleanup_retains_everything(executor, build_dir, log_messages):
    environment = BuildEnvironmentManager(runner=CommandRunner(execute=executor), backend="docker")
    cleanup = Cleanup(config=_config(build_dir, cleanup=False), environment=environment)

    assert await cleanup.clean() is False
    assert build_dir.exists()
    assert executor.calls == []
    assert any("will be retained" in m for m in log_messages)


@pytest.mark.anyio
async def test_cleanup_removes_tree_and_stops_container(executor, build_dir):
    environment = BuildEnvironmentManager(runner=CommandRunner(execute=executor), backend="docker")
    cleanup = Cleanup(config=_config(build_dir, cleanup=True), environment=environment)

    assert await cleanup.clean() is True
    assert not build_dir.exists()
    assert executor.calls == [("docker", "stop", "depLayerPkg", "-t", "0")]


@pytest.mark.anyio
async def test_cleanup_failures_are_only_logged(build_dir, log_messages, monkeypatch):
    def denied(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("layer_packager.build.cleanup.shutil.rmtree", denied)

    async def unavailable(*command):
        raise ExecutionError("docker not found")

    environment = BuildEnvironmentManager(runner=CommandRunner(execute=unavailable), backend="docker")
    cleanup = Cleanup(
        config=_config(build_dir, cleanup=True), environment=environment
    )

    assert await cleanup.clean() is True
    assert any("Failed to remove" in m for m in log_messages)
    assert any("Failed to stop" in m for m in log_messages)


@pytest.mark.anyio
async def test_cleanup_without_container(build_dir):
    cleanup = Cleanup(config=_config(build_dir, cleanup=True, useDocker=False))
    assert await cleanup.clean() is True
    assert not build_dir.exists()


@pytest.mark.anyio
async def test_missing_build_dir_counts_as_cleaned(executor, tmp_path, log_messages):
    environment = BuildEnvironmentManager(runner=CommandRunner(execute=executor), backend="docker")
    cleanup = Cleanup(
        config=_config(tmp_path / "never-created", cleanup=True), environment=environment
    )

    assert await cleanup.clean() is True
    assert not any("Failed to remove" in m for m in log_messages)
    assert executor.calls == [("docker", "stop", "depLayerPkg", "-t", "0")]
