from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from layer_packager.exceptions import ConfigError

FULL_PLUGIN_NAME: Final = "dependency_layer_packager"
CONFIG_KEY: Final = "dependencyLayer"
SERVICE_MOUNT_PATH: Final = "/var/task"
DEFAULT_IMAGE_PREFIX: Final = "lambci/lambda:build-"


class PluginConfig(BaseModel):
    """
    Resolved `custom.dependencyLayer` options.

    Keys are read in camelCase as they appear in the service file; attributes
    use snake_case. Instances are frozen and shared by every component.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    build_dir: str
    docker_image: str
    requirements_file: str = "requirements.txt"
    global_requirements: tuple[str, ...] = ("./functions/requirements.txt",)
    global_includes: tuple[str, ...] = ("./common_files",)
    container_name: str = FULL_PLUGIN_NAME
    cleanup: bool = False
    docker_envs: tuple[str, ...] = ()
    mount_ssh: bool = Field(default=False, alias="mountSSH")

    use_docker: bool = True
    """Run installs through `exec` into the build container instead of on the host."""

    abort_on_packaging_errors: bool = False
    """Abort on ambiguous installer output instead of asking the operator."""

    container_engine: str | None = None
    """Container CLI to call. Detected from PATH when unset."""

    installer: str = "pip"

    @field_validator("build_dir")
    @classmethod
    def _require_build_dir(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("buildDir must not be empty")
        return value

    @field_validator("docker_envs")
    @classmethod
    def _require_assignments(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for assignment in value:
            key, sep, _ = assignment.partition("=")
            if not sep or not key:
                raise ValueError(f"dockerEnvs entry must be KEY=VALUE, got {assignment!r}")
        return value

    @classmethod
    def resolve(
        cls, options: Mapping[str, Any] | None, *, runtime: str | None = None
    ) -> PluginConfig:
        """Apply defaults to the raw options mapping and validate it.

        Unset and null options fall back to their defaults. `dockerImage`
        defaults to the build image for the provider `runtime`.
        """
        raw = {k: v for k, v in (options or {}).items() if v is not None}

        if not str(raw.get("buildDir") or "").strip():
            raise ConfigError("No buildDir configuration specified")

        if not raw.get("dockerImage"):
            if not runtime:
                raise ConfigError(
                    "No dockerImage configured and no provider runtime to derive it from"
                )
            raw["dockerImage"] = f"{DEFAULT_IMAGE_PREFIX}{runtime}"

        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid {CONFIG_KEY} configuration: {exc}") from exc
