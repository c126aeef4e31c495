from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BuildTarget(BaseModel):
    """One layer to package. Runtime and architecture lists are passed through untouched."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    name: str
    includes: tuple[str, ...] = ()
    path: str | None = None
    artifact: str | None = None
    compatible_runtimes: tuple[str, ...] = ()
    compatible_architectures: tuple[str, ...] = ()
