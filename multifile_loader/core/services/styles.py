"""
Style injection — the ``injectStyle`` function of a generated module.

A component has at most two style files, handled in a fixed order:

    module.css   bound as a CSS Module under ``$style``
    index.css    injected for its side effects only

The injector runs once per component instance.  CSS-Module locals are
kept in a module-scoped ``cssModules`` object so hot updates can swap
them without re-creating instances.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from multifile_loader.core.models.component import BuildMode, StyleSource
from multifile_loader.core.services.diagnostics import Diagnostics
from multifile_loader.core.services.loaders import HOT_API_MODULE, STYLE_INJECTION_LOADER
from multifile_loader.core.services.requests import RequireBuilder, js_string

logger = logging.getLogger(__name__)

MODULE_STYLE_FILE = "module.css"
INDEX_STYLE_FILE = "index.css"
CSS_MODULE_NAME = "$style"

REGISTRY_VAR = "cssModules"
INJECTOR_NAME = "injectStyle"

_INDENT = "    "


class CssModuleRegistry:
    """CSS-Module names bound by one component, in binding order."""

    def __init__(self) -> None:
        self._names: dict[str, bool] = {}

    def claim(self, name: str) -> bool:
        """Bind a name.  Returns False when it was already bound."""
        if name in self._names:
            return False
        self._names[name] = True
        return True

    @property
    def names(self) -> list[str]:
        return list(self._names)

    def declaration(self) -> str:
        """Module-scope declaration of the shared locals registry."""
        return f"var {REGISTRY_VAR} = {{}};" if self._names else ""

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)


@dataclass
class StyleInjection:
    """Everything the style stage contributes to the module.

    Attributes:
        declarations:  Module-scope statements (the locals registry).
        hot_fragments: Module-scope ``module.hot.accept`` handlers.
        injector:      Lines of the ``injectStyle`` function.
    """

    declarations: list[str] = field(default_factory=list)
    hot_fragments: list[str] = field(default_factory=list)
    injector: list[str] = field(default_factory=list)

    @property
    def reference(self) -> str:
        return INJECTOR_NAME


def style_sources(component_dir: str) -> list[StyleSource]:
    """The two candidate style files of a component, module style first."""
    base = Path(component_dir)
    candidates = ((MODULE_STYLE_FILE, CSS_MODULE_NAME), (INDEX_STYLE_FILE, None))
    return [
        StyleSource(path=str(base / filename), module_name=name, exists=(base / filename).is_file())
        for filename, name in candidates
    ]


def _accessor(name: str) -> str:
    return f"{REGISTRY_VAR}[{js_string(name)}]"


class _StyleEmitter:
    def __init__(
        self,
        *,
        module_id: str,
        mode: BuildMode,
        loader: str,
        requires: RequireBuilder,
        guard: str,
    ):
        self.module_id = module_id
        self.mode = mode
        self.loader = loader
        self.requires = requires
        self.guard = guard
        # css-loader alone exposes the class map as `.locals`
        self.has_style_loader = "style-loader" in loader
        # vue-style-loader exposes an explicit SSR injection hook
        self.has_ssr_hook = STYLE_INJECTION_LOADER in loader

    def invoke(self, code: str) -> str:
        if self.mode.is_server and self.has_ssr_hook:
            return f"{_INDENT};(i={code},i.__inject__&&i.__inject__(ssrContext),i)"
        return f"{_INDENT}{code};"

    def locals_require(self, path: str) -> str:
        code = self.requires.require(self.loader, path)
        return code if self.has_style_loader else code + ".locals"

    def bind(self, name: str, path: str) -> list[str]:
        slot = _accessor(name)
        prop = js_string(name)
        lines = [
            f"{_INDENT}{slot} = {self.locals_require(path)};",
            f"{_INDENT}var superModules = this[{prop}];",
            f"{_INDENT}if (superModules && this.$options.name === superModules.root) {{",
            f"{_INDENT}{_INDENT}{slot} = Object.assign({{}}, superModules, {slot});",
            f"{_INDENT}}}",
        ]
        if not self.mode.needs_hot_reload:
            lines.append(self.invoke(f"this[{prop}] = {slot}"))
        else:
            # instances read the locals through a getter so hot swaps show up
            lines.extend([
                f"{_INDENT}Object.defineProperty(this, {prop}, {{",
                f"{_INDENT}{_INDENT}get: function () {{ return {slot}; }},",
                f"{_INDENT}{_INDENT}configurable: true",
                f"{_INDENT}}});",
            ])
        return lines

    def accept(self, name: str, path: str) -> str:
        slot = _accessor(name)
        body = [
            f"module.hot && module.hot.accept([{self.requires.path(self.loader, path)}], function () {{",
            f"{_INDENT}{self.guard}" if self.guard else "",
            f"{_INDENT}var oldLocals = {slot};",
            f"{_INDENT}if (!oldLocals) return;",
            f"{_INDENT}var newLocals = {self.locals_require(path)};",
            f"{_INDENT}if (JSON.stringify(newLocals) === JSON.stringify(oldLocals)) return;",
            f"{_INDENT}{slot} = newLocals;",
            f"{_INDENT}require({js_string(HOT_API_MODULE)}).rerender({js_string(self.module_id)});",
            "});",
        ]
        return "\n".join(line for line in body if line)


def synthesize_styles(
    sources: Iterable[StyleSource],
    *,
    module_id: str,
    mode: BuildMode,
    loader: str,
    registry: CssModuleRegistry,
    diagnostics: Diagnostics,
    requires: RequireBuilder,
    guard: str = "",
    component: str = "",
) -> StyleInjection | None:
    """Emit the style injector for the existing style sources.

    Args:
        sources: Candidate styles, in processing order.
        module_id: Component identifier (hot re-render key).
        mode: Build mode of the request.
        loader: Resolved style loader chain.
        registry: CSS-Module names already bound for this request.
        diagnostics: Channel for duplicate-name reports.
        requires: ``require()`` builder for the component directory.
        guard: Statement that aborts injection into a disposed module.
        component: Component name, for diagnostics.

    Returns:
        The StyleInjection, or None when no style file exists.
    """
    existing = [s for s in sources if s.exists]
    if not existing:
        return None

    emitter = _StyleEmitter(module_id=module_id, mode=mode, loader=loader, requires=requires, guard=guard)
    result = StyleInjection()

    body: list[str] = []
    if mode.needs_hot_reload and guard:
        body.append(_INDENT + guard)
    if mode.is_server:
        body.append(f"{_INDENT}var i;")

    for source in existing:
        name = source.module_name
        if not name:
            body.append(emitter.invoke(requires.require(loader, source.path)))
            continue

        if not registry.claim(name):
            diagnostics.error(f'CSS module name "{name}" is not unique!', component=component)
            body.append(emitter.invoke(requires.require(loader, source.path)))
            continue

        logger.debug("Binding %s as CSS module %s", source.path, name)
        body.extend(emitter.bind(name, source.path))
        if mode.needs_hot_reload:
            result.hot_fragments.append(emitter.accept(name, source.path))

    if len(registry):
        result.declarations.append(registry.declaration())

    result.injector = [f"function {INJECTOR_NAME} (ssrContext) {{", *body, "}"]
    return result
