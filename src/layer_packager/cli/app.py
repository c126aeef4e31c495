from __future__ import annotations

from pathlib import Path
from typing import Final

from cyclopts import App

from layer_packager.build import render_containerfile
from layer_packager.command import InteractiveGate
from layer_packager.config import FULL_PLUGIN_NAME
from layer_packager.exceptions import PackagerError
from layer_packager.logging import setup_logging
from layer_packager.plugin import (
    AFTER_DEPLOY_HOOK,
    BEFORE_PACKAGE_HOOK,
    DependencyLayerPackager,
)
from layer_packager.service import load_service

DEFAULT_SERVICE_FILE: Final = Path("serverless.yml")

app = App(
    name="layer-packager",
    help="Build dependency layer artifacts inside a reusable build container.",
)


def _packager(config: Path, *, interactive: bool | None = None) -> DependencyLayerPackager:
    service = load_service(config)
    gate = InteractiveGate.from_environment(interactive=interactive)
    return DependencyLayerPackager(service=service, gate=gate)


@app.command
async def package(
    *,
    config: Path = DEFAULT_SERVICE_FILE,
    non_interactive: bool = False,
    log_level: str = "INFO",
) -> None:
    """Install dependencies for every layer and compress each into a zip artifact.

    Parameters
    ----------
    config
        Service definition to read layers and `custom.dependencyLayer` from.
    non_interactive
        Never prompt; ambiguous installer errors abort the run.
    log_level
        Minimum log level.
    """
    setup_logging(log_level)
    try:
        packager = _packager(config, interactive=False if non_interactive else None)
        await packager.hooks[BEFORE_PACKAGE_HOOK]()
    except PackagerError as exc:
        raise SystemExit(f"[{FULL_PLUGIN_NAME}] {exc}") from exc


@app.command
async def clean(*, config: Path = DEFAULT_SERVICE_FILE, log_level: str = "INFO") -> None:
    """Remove the build directory and stop the build container when cleanup is enabled."""
    setup_logging(log_level)
    try:
        packager = _packager(config, interactive=False)
        await packager.hooks[AFTER_DEPLOY_HOOK]()
    except PackagerError as exc:
        raise SystemExit(f"[{FULL_PLUGIN_NAME}] {exc}") from exc


@app.command
def containerfile(
    *,
    requirements: str = "requirements.txt",
    runtime: str = "python3.12",
    base_image: str | None = None,
    output: Path | None = None,
) -> None:
    """Print (or write to OUTPUT) a Containerfile that builds a layer archive standalone."""
    try:
        content = render_containerfile(
            requirements, runtime=runtime, base_image=base_image
        )
    except PackagerError as exc:
        raise SystemExit(f"[{FULL_PLUGIN_NAME}] {exc}") from exc

    if output is None:
        print(content, end="")
    else:
        output.write_text(content, encoding="utf-8")
