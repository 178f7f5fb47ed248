"""
Loader set model — how each artifact kind is required.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ArtifactKind(StrEnum):
    """The three artifact kinds a component may carry."""

    SCRIPT = "script"
    TEMPLATE = "template"
    STYLE = "style"

    @classmethod
    def parse(cls, value: str) -> ArtifactKind:
        """Accept both kind names and the legacy ``js``/``html``/``css`` keys."""
        key = _ALIASES.get(value, value)
        return cls(key)


_ALIASES = {"js": "script", "html": "template", "css": "style"}


class LoaderRef(BaseModel):
    """A loader request string plus the options it was built from.

    ``request`` may carry inline ``?{json}`` queries and ``!``-chained
    loaders.  An empty request means "require the file as-is".
    """

    model_config = ConfigDict(frozen=True)

    request: str = ""
    options: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.request


class LoaderSet(BaseModel):
    """Resolved loaders for one component request."""

    model_config = ConfigDict(frozen=True)

    script: LoaderRef
    template: LoaderRef
    style: LoaderRef

    def get(self, kind: ArtifactKind | str) -> LoaderRef:
        """Look up the loader for an artifact kind."""
        if not isinstance(kind, ArtifactKind):
            kind = ArtifactKind.parse(kind)
        return getattr(self, kind.value)

    def to_dict(self) -> dict:
        return {kind.value: self.get(kind).model_dump() for kind in ArtifactKind}
