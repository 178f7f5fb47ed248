"""
Component assembly — the generated module for one component directory.

The module calls the component normalizer with a fixed positional
contract:

    normalizeComponent(
        scriptExports,
        compiledTemplate,        (null without index.html)
        injectStyles,            (null without styles)
        scopeId,                 (always null)
        moduleIdentifier         (server builds only)
    )

then adds development checks, hot-reload wiring and the export.
"""

from __future__ import annotations

import logging

from multifile_loader.core.context import BuildContext
from multifile_loader.core.models.component import ComponentRequest
from multifile_loader.core.models.options import LoaderOptions
from multifile_loader.core.models.template import GeneratedModule
from multifile_loader.core.services.diagnostics import Diagnostics
from multifile_loader.core.services.hashing import hash_sum
from multifile_loader.core.services.hot_reload import HotReloadCoordinator
from multifile_loader.core.services.loaders import COMPONENT_NORMALIZER, resolve_loaders
from multifile_loader.core.services.program import OutputProgram
from multifile_loader.core.services.requests import RequireBuilder, js_string
from multifile_loader.core.services.styles import CssModuleRegistry, style_sources, synthesize_styles

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "index.html"
LOG_PREFIX = "[multifile-loader]"


def _normalizer_call(normalizer: str, arguments: list[tuple[str, str]]) -> str:
    lines = [f"var Component = {normalizer}("]
    for i, (label, value) in enumerate(arguments):
        lines.append(f"/* {label} */")
        lines.append(value + ("," if i < len(arguments) - 1 else ""))
    lines.append(")")
    return "\n".join(lines)


def _development_checks(request: ComponentRequest, has_template: bool) -> list[str]:
    checks = [
        f"Component.options.__file = {js_string(request.script_path)};",
        "\n".join([
            "if (Component.esModule && Object.keys(Component.esModule).some(function (key) {",
            '    return key !== "default" && key !== "__esModule";',
            "})) {",
            '    console.error("named exports are not supported in component scripts.");',
            "}",
        ]),
    ]
    if has_template:
        message = (
            f"{LOG_PREFIX} {request.name}: functional components are not supported "
            "with templates, they should use render functions."
        )
        checks.append("\n".join([
            "if (Component.options.functional) {",
            f"    console.error({js_string(message)});",
            "}",
        ]))
    return checks


def _export(es_module: bool) -> str:
    if es_module:
        return 'exports.__esModule = true;\nexports["default"] = Component.exports;'
    return "module.exports = Component.exports;"


def _injection_factory(body: str) -> str:
    indented = "\n".join(("    " + line) if line else line for line in body.split("\n"))
    return "\n".join([
        "/* dependency injection */",
        "module.exports = function (injections) {",
        indented,
        "    return Component.exports;",
        "};",
    ])


def assemble(
    request: ComponentRequest,
    options: LoaderOptions,
    *,
    build: BuildContext,
    diagnostics: Diagnostics | None = None,
) -> GeneratedModule:
    """Generate the runtime module for one component.

    Args:
        request: The component to transform.
        options: Host options.
        build: Caches of the current build run.
        diagnostics: Channel for non-fatal reports (a fresh one if None).

    Returns:
        GeneratedModule with the complete module source.

    Raises:
        MissingPeerCapability: A required peer is missing; nothing is emitted.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    mode = request.mode

    module_id = build.module_id(request.component_dir, request.context, options.hash_key)
    loaders = build.loader_set(
        (options.cache_key(), mode, request.name, module_id),
        lambda: resolve_loaders(
            options, mode, name=request.name, module_id=module_id, peers=build.peers,
        ),
    )

    requires = RequireBuilder(request.component_dir)
    hot = HotReloadCoordinator(module_id, mode)
    registry = CssModuleRegistry()
    program = OutputProgram()

    program.extend(hot.prelude())

    # ── Styles ──────────────────────────────────────────────────
    sources = style_sources(request.component_dir)
    styles = synthesize_styles(
        sources,
        module_id=module_id,
        mode=mode,
        loader=loaders.style.request,
        registry=registry,
        diagnostics=diagnostics,
        requires=requires,
        guard=hot.guard(),
        component=request.name,
    )
    if styles is not None:
        program.extend(styles.declarations)
        program.extend(styles.hot_fragments)
        program.extend(styles.injector)

    # ── Normalizer call ─────────────────────────────────────────
    script = requires.require(loaders.script.request, request.script_path)
    if options.inject:
        script += "(injections)"

    template_path = request.artifact(TEMPLATE_FILE)
    has_template = template_path.is_file()
    template = requires.require(loaders.template.request, str(template_path)) if has_template else "null"

    arguments = [
        ("script", script),
        ("template", template),
        ("styles", styles.reference if styles is not None else "null"),
        ("scopeId", "null"),
    ]
    if mode.is_server:
        arguments.append(("moduleIdentifier (server only)", js_string(hash_sum(request.request))))

    normalizer = requires.module("!" + build.peers.resolve(COMPONENT_NORMALIZER))
    program.emit(_normalizer_call(normalizer, arguments))

    if not mode.is_production:
        program.extend(_development_checks(request, has_template))

    if options.inject:
        content = _injection_factory(program.render())
    else:
        program.extend(hot.wiring(registry.names))
        program.emit(_export(options.es_module))
        content = program.render()

    logger.debug(
        "Assembled %s (id=%s, styles=%d, template=%s, hot=%s)",
        request.name, module_id, sum(s.exists for s in sources), has_template, hot.enabled,
    )
    return GeneratedModule(
        path=request.script_path,
        content=content,
        module_id=module_id,
        factory=options.inject,
        reason=f"Assembled component {request.name}",
    )
