from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Final

from jinja2 import Environment, PackageLoader

from layer_packager.exceptions import ConfigError
from layer_packager.utils.process import normalize_path

LAMBDA_BASE_IMAGE: Final = "public.ecr.aws/lambda/python"
CONTAINERFILE_TEMPLATE: Final = "Containerfile.layer.j2"
_RUNTIME_PATTERN: Final = re.compile(r"^python(?P<version>\d+\.\d+)$")

env: Final = Environment(
    loader=PackageLoader("layer_packager.build", "templates"),
    autoescape=False,
    keep_trailing_newline=True,
)
_containerfile_template: Final = env.get_template(CONTAINERFILE_TEMPLATE)


def base_image_for(runtime: str) -> str:
    """Map a runtime identifier such as `python3.12` to the Lambda base image."""
    match = _RUNTIME_PATTERN.match(runtime)
    if match is None:
        raise ConfigError(f"Unsupported runtime {runtime!r}, expected e.g. python3.12")
    return f"{LAMBDA_BASE_IMAGE}:{match['version']}"


def render_containerfile(
    requirements_file: str = "requirements.txt",
    *,
    runtime: str = "python3.12",
    base_image: str | None = None,
    artifact: str = "layer.zip",
) -> str:
    """
    Render a two-stage Containerfile that builds a layer archive without the plugin.

    The build stage installs the manifest into `python/` and zips it; the
    export stage holds only the archive, so `docker build --output` writes it
    straight to the host.
    """
    requirements = normalize_path(requirements_file)
    return _containerfile_template.render(
        base_image=base_image or base_image_for(runtime),
        workdir="layer",
        requirements_file=requirements,
        requirements_name=PurePosixPath(requirements).name,
        artifact=artifact,
    )
