from __future__ import annotations

from pathlib import Path

import pytest

from layer_packager.container.utils import (
    BindMount,
    build_exec_command,
    build_run_command,
    get_backend,
    qualify_image,
    to_container_path,
)
from layer_packager.exceptions import ConfigError, ExecutionError


def test_bind_mount_formatting():
    assert str(BindMount(source="/src", target="/var/task")) == (
        "type=bind,source=/src,target=/var/task"
    )


def test_run_command_layout():
    cmd = build_run_command(
        "docker",
        "lambci/lambda:build-python3.8",
        name="dependency_layer_packager",
        mounts=[BindMount(source="/work", target="/var/task")],
        command=["bash"],
        env=["PIP_INDEX_URL=https://pypi.internal/simple"],
        detach=True,
        tty=True,
    )
    assert cmd == [
        "docker",
        "run",
        "--rm",
        "-d",
        "-t",
        "--mount",
        "type=bind,source=/work,target=/var/task",
        "-e",
        "PIP_INDEX_URL=https://pypi.internal/simple",
        "--name",
        "dependency_layer_packager",
        "lambci/lambda:build-python3.8",
        "bash",
    ]


def test_exec_command_layout():
    assert build_exec_command("podman", "c1", "pip", "--version", workdir="/var/task") == [
        "podman",
        "exec",
        "--workdir",
        "/var/task",
        "c1",
        "pip",
        "--version",
    ]


def test_get_backend_prefers_configured_engine():
    assert get_backend("nerdctl") == "nerdctl"


def test_get_backend_without_any_engine(monkeypatch):
    monkeypatch.setattr("layer_packager.container.utils.shutil.which", lambda name: None)
    with pytest.raises(ExecutionError):
        get_backend()


@pytest.mark.parametrize(
    ("image", "expected"),
    [
        ("lambci/lambda:build-python3.8", "lambci/lambda:build-python3.8"),
        ("python", "python:latest"),
        ("localhost:5000/layers", "localhost:5000/layers:latest"),
        ("repo@sha256:abc", "repo@sha256:abc"),
    ],
)
def test_qualify_image(image, expected):
    assert qualify_image(image) == expected


def test_relative_paths_map_under_the_mount(tmp_path):
    assert (
        to_container_path("./build/api/requirements.txt", workdir=tmp_path, mount_target="/var/task")
        == "/var/task/build/api/requirements.txt"
    )
    assert (
        to_container_path("build\\api", workdir=tmp_path, mount_target="/var/task")
        == "/var/task/build/api"
    )


def test_absolute_paths_inside_the_working_tree(tmp_path):
    path = tmp_path / "functions" / "requirements.txt"
    assert (
        to_container_path(path, workdir=tmp_path, mount_target="/var/task")
        == "/var/task/functions/requirements.txt"
    )


def test_absolute_paths_outside_the_working_tree(tmp_path):
    with pytest.raises(ConfigError):
        to_container_path(Path("/elsewhere/requirements.txt"), workdir=tmp_path, mount_target="/var/task")


@pytest.mark.parametrize(
    "path", ["../shared/requirements.txt", "build/../../shared/requirements.txt"]
)
def test_relative_paths_leaving_the_working_tree(tmp_path, path):
    workdir = tmp_path / "service"
    workdir.mkdir()
    with pytest.raises(ConfigError, match="outside the working tree"):
        to_container_path(path, workdir=workdir, mount_target="/var/task")


def test_relative_paths_that_stay_inside_after_normalizing(tmp_path):
    assert (
        to_container_path("build/../functions/requirements.txt", workdir=tmp_path, mount_target="/var/task")
        == "/var/task/functions/requirements.txt"
    )
