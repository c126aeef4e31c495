from __future__ import annotations

import posixpath
import shutil
from collections.abc import Sequence
from pathlib import Path

from attrs import define

from layer_packager.exceptions import ConfigError, ExecutionError
from layer_packager.utils.process import normalize_path


@define
class BindMount:
    source: str
    target: str

    def __str__(self) -> str:
        return f"type=bind,source={self.source},target={self.target}"

    @classmethod
    def from_path(cls, path: Path, *, target: str) -> BindMount:
        return cls(source=str(path.resolve()), target=target)


def get_backend(preferred: str | None = None) -> str:
    """Return the configured container CLI, or detect a docker-compatible one."""
    if preferred:
        return preferred
    for backend in ("docker", "podman", "nerdctl"):
        if shutil.which(backend):
            return backend
    raise ExecutionError("No docker-compatible backend found (docker, podman, nerdctl)")


def build_run_command(
    backend: str,
    image: str,
    *,
    name: str | None = None,
    mounts: Sequence[BindMount] | None = None,
    command: Sequence[str] | None = None,
    env: Sequence[str] | None = None,
    workdir: str | None = None,
    detach: bool = False,
    tty: bool = False,
    rm: bool = True,
) -> list[str]:
    cmd = [backend, "run"]
    if rm:
        cmd.append("--rm")
    if detach:
        cmd.append("-d")
    else:
        cmd.append("-i")
    if tty:
        cmd.append("-t")
    if workdir:
        cmd.extend(["--workdir", workdir])

    if mounts:
        for m in mounts:
            cmd.extend(["--mount", str(m)])

    if env:
        for assignment in env:
            cmd.extend(["-e", assignment])

    if name:
        cmd.extend(["--name", name])

    cmd.append(image)
    if command:
        cmd.extend(command)

    return cmd


def build_exec_command(
    backend: str,
    container: str,
    *command: str,
    workdir: str | None = None,
) -> list[str]:
    cmd = [backend, "exec"]
    if workdir:
        cmd.extend(["--workdir", workdir])
    cmd.append(container)
    cmd.extend(command)
    return cmd


def build_ps_command(backend: str, name: str) -> list[str]:
    # docker treats the name filter as a regex, anchor it for an exact match
    return [backend, "ps", "-a", "--filter", f"name=^{name}$", "--format", "{{.Names}}"]


def build_images_command(backend: str, image: str) -> list[str]:
    return [
        backend,
        "images",
        "--format",
        "{{.Repository}}:{{.Tag}}",
        "--filter",
        f"reference={image}",
    ]


def qualify_image(image: str) -> str:
    """Add the implicit `latest` tag so the reference matches `images` output."""
    if "@" in image or ":" in image.rsplit("/", 1)[-1]:
        return image
    return f"{image}:latest"


def to_container_path(path: str | Path, *, workdir: Path, mount_target: str) -> str:
    """Map a host path under the mounted working tree to its in-container path."""
    host = Path(normalize_path(path))
    if not host.is_absolute():
        host = workdir / host
    try:
        relative = host.resolve().relative_to(workdir.resolve())
    except ValueError as exc:
        raise ConfigError(
            f"{path} is outside the working tree mounted at {mount_target}"
        ) from exc
    return posixpath.normpath(posixpath.join(mount_target, relative.as_posix()))
