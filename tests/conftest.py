"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from multifile_loader.core.context import BuildContext
from multifile_loader.core.models.component import BuildMode, ComponentRequest
from multifile_loader.core.services.diagnostics import Diagnostics

DEV = BuildMode()
PROD = BuildMode(is_production=True)
SERVER = BuildMode(is_server=True)
SERVER_PROD = BuildMode(is_server=True, is_production=True)


@pytest.fixture
def make_component(tmp_path: Path) -> Callable[..., Path]:
    """Create a component directory and return its script path.

    Usage: ``make_component("Button", template=True, module_css=True)``
    """

    def _make(
        name: str = "Button",
        *,
        template: bool = False,
        module_css: bool = False,
        index_css: bool = False,
    ) -> Path:
        component_dir = tmp_path / "src" / "components" / f"{name}.vue"
        component_dir.mkdir(parents=True, exist_ok=True)
        script = component_dir / "index.js"
        script.write_text("export default { name: %r }\n" % name)
        if template:
            (component_dir / "index.html").write_text("<button><slot /></button>\n")
        if module_css:
            (component_dir / "module.css").write_text(".root { color: red; }\n")
        if index_css:
            (component_dir / "index.css").write_text("button { margin: 0; }\n")
        return script

    return _make


@pytest.fixture
def build(tmp_path: Path) -> BuildContext:
    """Build context whose host has babel-loader and nothing else."""
    return BuildContext(tmp_path, installed=["babel-loader"])


@pytest.fixture
def diagnostics() -> Diagnostics:
    return Diagnostics()


@pytest.fixture
def request_for(tmp_path: Path) -> Callable[..., ComponentRequest]:
    """Build a ComponentRequest for a script, with the tmp dir as context."""

    def _request(script: Path, mode: BuildMode = DEV, request: str | None = None) -> ComponentRequest:
        return ComponentRequest.from_script(script, context=tmp_path, mode=mode, request=request)

    return _request
