"""
Transform use case — load options, resolve loaders, assemble a module.

Ties together the options file, the build context and the engine, and
turns failures into result objects the CLI can print.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from multifile_loader.core.config.loader import ConfigError, find_config_file, load_options
from multifile_loader.core.context import BuildContext
from multifile_loader.core.models.component import BuildMode, ComponentRequest
from multifile_loader.core.models.loader_set import LoaderSet
from multifile_loader.core.models.options import LoaderOptions
from multifile_loader.core.models.template import GeneratedModule
from multifile_loader.core.services.assembler import assemble
from multifile_loader.core.services.diagnostics import Diagnostics
from multifile_loader.core.services.loaders import LoaderError, resolve_loaders

logger = logging.getLogger(__name__)


@dataclass
class TransformResult:
    """Result of transforming one component."""

    module: GeneratedModule | None = None
    request: ComponentRequest | None = None
    diagnostics: list[dict] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {"diagnostics": self.diagnostics}
        if self.error:
            result["error"] = self.error
            return result
        if self.request:
            result["component"] = self.request.name
            result["mode"] = self.request.mode.model_dump()
        if self.module:
            result["module"] = self.module.model_dump()
        return result


@dataclass
class LoadersResult:
    """Result of resolving loaders for one component."""

    loaders: LoaderSet | None = None
    module_id: str = ""
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "module_id": self.module_id,
            "loaders": self.loaders.to_dict() if self.loaders else {},
        }


@dataclass
class OptionsCheckResult:
    """Result of validating the options file."""

    valid: bool = False
    options: LoaderOptions | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "options": self.options.model_dump(by_alias=True, exclude={"extract_css"}) if self.options else None,
        }


def _build_context(build: BuildContext | None, root: Path) -> BuildContext:
    return build if build is not None else BuildContext(root)


def transform_component(
    script_path: Path,
    *,
    mode: BuildMode | None = None,
    context: Path | None = None,
    request: str | None = None,
    config_path: Path | None = None,
    options: LoaderOptions | None = None,
    build: BuildContext | None = None,
) -> TransformResult:
    """Generate the runtime module for one component script.

    Args:
        script_path: The component's script file.
        mode: Build mode (development client build if None).
        context: Build context root (default: cwd).
        request: Originating request string (default: the script path).
        config_path: Explicit options file (searched upward if None).
        options: Already-loaded options; skips the options file.
        build: Build context shared across components of one run.

    Returns:
        TransformResult with the module or an error.
    """
    result = TransformResult()

    if not script_path.is_file():
        result.error = f"Component script not found: {script_path}"
        return result

    try:
        if options is None:
            options = load_options(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    component = ComponentRequest.from_script(script_path, context=context, mode=mode, request=request)
    result.request = component

    diagnostics = Diagnostics()
    try:
        result.module = assemble(
            component,
            options,
            build=_build_context(build, Path(component.context)),
            diagnostics=diagnostics,
        )
    except LoaderError as e:
        logger.error("Cannot transform %s: %s", component.name, e)
        result.error = str(e)
    result.diagnostics = diagnostics.to_list()
    return result


def resolve_component_loaders(
    script_path: Path,
    *,
    mode: BuildMode | None = None,
    context: Path | None = None,
    config_path: Path | None = None,
    build: BuildContext | None = None,
) -> LoadersResult:
    """Resolve (but do not use) the loaders of one component."""
    result = LoadersResult()
    if not script_path.is_file():
        result.error = f"Component script not found: {script_path}"
        return result

    try:
        options = load_options(config_path)
    except ConfigError as e:
        result.error = str(e)
        return result

    component = ComponentRequest.from_script(script_path, context=context, mode=mode)
    build = _build_context(build, Path(component.context))
    result.module_id = build.module_id(component.component_dir, component.context, options.hash_key)
    try:
        result.loaders = resolve_loaders(
            options, component.mode, name=component.name, module_id=result.module_id, peers=build.peers,
        )
    except LoaderError as e:
        result.error = str(e)
    return result


def check_options(config_path: Path | None = None) -> OptionsCheckResult:
    """Validate the options file and report questionable settings."""
    result = OptionsCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.errors.append("No multifile.yml found.")
        return result
    result.config_path = config_path

    try:
        options = load_options(config_path)
    except ConfigError as e:
        result.errors.append(str(e))
        return result
    result.options = options

    if options.compiler_modules is not None and options.forwarded_compiler_modules is None:
        result.warnings.append("compilerModules is ignored unless it is a path string.")
    for kind, loader in options.loaders.items():
        if not loader:
            result.warnings.append(f"Empty {kind} loader: files are required without a loader.")
    if options.inject:
        result.warnings.append("inject is enabled: modules export a factory and skip hot reload.")

    result.valid = not result.errors
    return result
