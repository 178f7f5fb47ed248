"""
Component models — what the engine is asked to transform.

A component is a directory: one script file plus optional template and
style files that sit next to it.  The request is built once per
transformation and never mutated afterwards.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class BuildMode(BaseModel):
    """Build-mode flags for one transformation.

    Hot reload wiring is only emitted for development builds that target
    the browser.
    """

    model_config = ConfigDict(frozen=True)

    is_server: bool = False      # target is the server (SSR) process
    is_production: bool = False
    source_map: bool = False     # host asked for source maps

    @property
    def needs_hot_reload(self) -> bool:
        """Whether the generated module should carry HMR wiring."""
        return not self.is_server and not self.is_production

    @classmethod
    def for_target(
        cls,
        target: str = "web",
        *,
        minimize: bool = False,
        source_map: bool = False,
        node_env: str | None = None,
    ) -> BuildMode:
        """Derive the mode the way the bundler reports it.

        Args:
            target: Bundler target (``"node"`` means a server build).
            minimize: Bundler minimize flag.
            source_map: Whether the bundler emits source maps.
            node_env: Value of ``NODE_ENV`` (defaults to the environment).
        """
        if node_env is None:
            node_env = os.environ.get("NODE_ENV", "")
        return cls(
            is_server=target == "node",
            is_production=bool(minimize) or node_env == "production",
            source_map=source_map,
        )


class StyleSource(BaseModel):
    """A candidate style file of a component.

    Attributes:
        path:        Absolute path to the style file.
        module_name: CSS-Module binding name (``"$style"``) or None for
                     a plain, side-effect-only style.
        exists:      Whether the file was found on disk.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    module_name: str | None = None
    exists: bool = False


class ComponentRequest(BaseModel):
    """One component to transform."""

    model_config = ConfigDict(frozen=True)

    script_path: str
    component_dir: str
    name: str
    context: str
    mode: BuildMode = BuildMode()
    request: str = ""            # originating loader request (SSR identity)

    @classmethod
    def from_script(
        cls,
        script_path: str | Path,
        *,
        context: str | Path | None = None,
        mode: BuildMode | None = None,
        request: str | None = None,
    ) -> ComponentRequest:
        """Build a request from the component's script file.

        The component directory is the script's parent; its name is the
        directory name with a trailing ``.vue`` removed
        (``Button.vue/index.js`` → ``Button``).
        """
        script = Path(script_path).resolve()
        component_dir = script.parent
        name = component_dir.name
        if name.endswith(".vue"):
            name = name[: -len(".vue")]
        return cls(
            script_path=str(script),
            component_dir=str(component_dir),
            name=name,
            context=str(Path(context).resolve() if context else Path.cwd()),
            mode=mode or BuildMode(),
            request=request if request is not None else str(script),
        )

    def artifact(self, filename: str) -> Path:
        """Path of a sibling artifact inside the component directory."""
        return Path(self.component_dir) / filename
