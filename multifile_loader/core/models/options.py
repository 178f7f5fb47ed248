"""
Loader options model — the host configuration surface.

Options arrive with the bundler's camelCase keys (``hashKey``,
``extractCSS``, ...) from YAML or the host, and are exposed with
snake_case attribute names in Python.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from multifile_loader.core.models.loader_set import ArtifactKind


class LoaderOptions(BaseModel):
    """Options recognized by the engine.  Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    hash_key: str = Field(default="", alias="hashKey")
    css_source_map: bool | None = Field(default=None, alias="cssSourceMap")
    transform_to_require: dict[str, Any] | None = Field(default=None, alias="transformToRequire")
    preserve_whitespace: bool | None = Field(default=None, alias="preserveWhitespace")
    compiler_modules: Any = Field(default=None, alias="compilerModules")
    extract_css: Any = Field(default=False, alias="extractCSS")
    loaders: dict[str, str] = Field(default_factory=dict)
    inject: bool = False
    es_module: bool = Field(default=False, alias="esModule")
    buble: dict[str, Any] | None = None
    postcss: Any = None

    @field_validator("loaders", mode="before")
    @classmethod
    def _normalize_loader_kinds(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        normalized: dict[str, Any] = {}
        for key, loader in value.items():
            try:
                kind = ArtifactKind.parse(str(key))
            except ValueError as e:
                raise ValueError(f"unknown loader kind: {key!r}") from e
            normalized[kind.value] = "" if loader is None else loader
        return normalized

    @field_validator("extract_css")
    @classmethod
    def _check_extractor(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return bool(value)
        if callable(getattr(value, "extract", None)):
            return value
        raise ValueError("extractCSS must be a boolean or an object with an extract() method")

    @property
    def forwarded_compiler_modules(self) -> str | None:
        """``compilerModules`` is only forwarded when it is a path string."""
        return self.compiler_modules if isinstance(self.compiler_modules, str) else None

    def override_for(self, kind: ArtifactKind) -> str | None:
        """Host override for a kind, or None when the default applies."""
        return self.loaders.get(kind.value)

    def cache_key(self) -> str:
        """Stable key for per-build memoization of derived options."""
        dumped = self.model_dump(by_alias=True, exclude={"extract_css"})
        extractor = self.extract_css
        if not isinstance(extractor, bool):
            extractor = f"{type(extractor).__name__}@{id(extractor):x}"
        return repr(sorted(dumped.items())) + repr(extractor)
