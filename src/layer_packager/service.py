from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from layer_packager.build import BuildTarget
from layer_packager.config import CONFIG_KEY, PluginConfig
from layer_packager.exceptions import ConfigError


class _ServiceModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


class PackageSettings(_ServiceModel):
    include: tuple[str, ...] = ()
    artifact: str | None = None


class LayerDefinition(_ServiceModel):
    name: str | None = None
    path: str | None = None
    includes: tuple[str, ...] | None = None
    package: PackageSettings = Field(default_factory=PackageSettings)
    compatible_runtimes: tuple[str, ...] = ()
    compatible_architectures: tuple[str, ...] = ()


class FunctionDefinition(_ServiceModel):
    name: str | None = None
    package: PackageSettings = Field(default_factory=PackageSettings)


class ProviderSettings(_ServiceModel):
    runtime: str | None = None


class ServiceDefinition(_ServiceModel):
    """The slice of a `serverless.yml` service the packager reads."""

    service: str | None = None
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    custom: dict[str, Any] = Field(default_factory=dict)
    layers: dict[str, LayerDefinition] = Field(default_factory=dict)
    functions: dict[str, FunctionDefinition] = Field(default_factory=dict)

    def plugin_config(self) -> PluginConfig:
        options = self.custom.get(CONFIG_KEY)
        if options is not None and not isinstance(options, Mapping):
            raise ConfigError(f"custom.{CONFIG_KEY} must be a mapping")
        return PluginConfig.resolve(options, runtime=self.provider.runtime)

    def build_targets(self) -> list[BuildTarget]:
        """Layers as build targets, in declaration order."""
        return [
            BuildTarget(
                name=layer.name or key,
                includes=(
                    layer.includes
                    if layer.includes is not None
                    else layer.package.include
                ),
                path=layer.path,
                artifact=layer.package.artifact,
                compatible_runtimes=layer.compatible_runtimes,
                compatible_architectures=layer.compatible_architectures,
            )
            for key, layer in self.layers.items()
        ]

    def assign_artifacts(self, build_dir: str) -> dict[str, str]:
        """Point every function without an explicit artifact at `<build_dir>/<name>.zip`."""
        assigned: dict[str, str] = {}
        for key, function in self.functions.items():
            if function.package.artifact is None:
                function.package.artifact = f"{build_dir}/{function.name or key}.zip"
            assigned[key] = function.package.artifact
        return assigned


def load_service(path: Path) -> ServiceDefinition:
    """Load a service definition from YAML. Framework variables are left unresolved."""
    try:
        with path.open(encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Service file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Service file must contain a YAML mapping: {path}")

    try:
        return ServiceDefinition.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid service definition in {path}: {exc}") from exc
