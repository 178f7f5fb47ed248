"""
Loader resolution — which loader chain requires each artifact.

Defaults:
    template  internal template compiler
    style     vue-style-loader ! css-loader ! style compiler ! import-global-loader
    script    buble-loader or babel-loader, whichever the host has installed

Host overrides replace a kind wholesale; they are never merged with
the default chain.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from multifile_loader.core.models.component import BuildMode
from multifile_loader.core.models.loader_set import ArtifactKind, LoaderRef, LoaderSet
from multifile_loader.core.models.options import LoaderOptions
from multifile_loader.core.services.peers import PeerResolver
from multifile_loader.core.services.requests import loader_query

logger = logging.getLogger(__name__)

# ── Loader names ────────────────────────────────────────────────

STYLE_INJECTION_LOADER = "vue-style-loader"
CSS_TRANSFORM_LOADER = "css-loader"
GLOBAL_IMPORT_LOADER = "import-global-loader"
SCRIPT_TRANSPILERS = ("buble-loader", "babel-loader")
EXTRACT_PLUGIN = "extract-text-webpack-plugin"

# Runtime helpers shipped by the component runtime's own loader package
STYLE_COMPILER = "vue-loader/lib/style-compiler"
TEMPLATE_COMPILER = "vue-loader/lib/template-compiler"
COMPONENT_NORMALIZER = "vue-loader/lib/component-normalizer"

# Component runtime and its hot-reload API, required by generated code
RUNTIME_MODULE = "vue"
HOT_API_MODULE = "vue-hot-reload-api"


class LoaderError(Exception):
    """Raised when loaders cannot be resolved for a component."""


class MissingPeerCapability(LoaderError):
    """A configured feature needs a peer package the host does not have."""

    def __init__(self, capability: str, message: str | None = None):
        self.capability = capability
        super().__init__(
            message or f"requires {capability} as a peer dependency, but it is not installed."
        )


class CssExtractor(Protocol):
    """Anything that can turn a style chain into an extracting chain."""

    def extract(self, *, use: str, fallback: str) -> str: ...


class TextExtractor:
    """Extraction through the ``extract-text-webpack-plugin`` loader."""

    def __init__(self, peers: PeerResolver):
        self._loader = peers.resolve(f"{EXTRACT_PLUGIN}/dist/loader.js")

    def extract(self, *, use: str, fallback: str) -> str:
        fallback_count = len(fallback.split("!"))
        query = loader_query({"omit": fallback_count, "remove": True})
        return f"{self._loader}{query}!{fallback}!{use}"


# ── Per-kind options ────────────────────────────────────────────


def css_loader_options(name: str, mode: BuildMode, options: LoaderOptions) -> dict[str, Any]:
    """css-loader options: CSS Modules always on, legible class names."""
    return {
        "sourceMap": not mode.is_production and mode.source_map and options.css_source_map is not False,
        "minimize": mode.is_production,
        "modules": True,
        "importLoaders": 1,
        "localIdentName": f"{name}_[local]",
    }


def style_compiler_options(module_id: str, options: LoaderOptions) -> dict[str, Any]:
    return {
        # marks the request as coming from a component for vue-style-loader
        "vue": True,
        "id": module_id,
        "scoped": False,
        "hasInlineConfig": bool(options.postcss),
    }


def template_compiler_options(module_id: str, options: LoaderOptions) -> dict[str, Any]:
    return {
        "id": module_id,
        "transformToRequire": options.transform_to_require,
        "preserveWhitespace": options.preserve_whitespace,
        "buble": options.buble,
        "compilerModules": options.forwarded_compiler_modules,
    }


# ── Resolution ──────────────────────────────────────────────────


def _extractor(options: LoaderOptions, peers: PeerResolver) -> CssExtractor:
    if not isinstance(options.extract_css, bool):
        return options.extract_css
    if not peers.has(EXTRACT_PLUGIN):
        raise MissingPeerCapability(
            EXTRACT_PLUGIN,
            f"extractCSS: true requires {EXTRACT_PLUGIN} as a peer dependency.",
        )
    return TextExtractor(peers)


def _default_style(css_query: str, compiler_query: str, options: LoaderOptions, peers: PeerResolver) -> str:
    if options.extract_css:
        return _extractor(options, peers).extract(
            use=f"{CSS_TRANSFORM_LOADER}{css_query}!{GLOBAL_IMPORT_LOADER}",
            fallback=STYLE_INJECTION_LOADER,
        )
    return "!".join([
        STYLE_INJECTION_LOADER,
        CSS_TRANSFORM_LOADER + css_query,
        peers.resolve(STYLE_COMPILER) + compiler_query,
        GLOBAL_IMPORT_LOADER,
    ])


def _default_script(options: LoaderOptions, peers: PeerResolver) -> LoaderRef:
    transpiler = peers.first_available(SCRIPT_TRANSPILERS)
    if transpiler is None:
        logger.debug("No script transpiler installed; scripts are required as-is")
        return LoaderRef()
    if transpiler == "buble-loader" and options.buble:
        return LoaderRef(request=transpiler + loader_query(options.buble), options=dict(options.buble))
    return LoaderRef(request=transpiler)


def resolve_loaders(
    options: LoaderOptions,
    mode: BuildMode,
    *,
    name: str,
    module_id: str,
    peers: PeerResolver,
) -> LoaderSet:
    """Resolve the loader for every artifact kind.

    Args:
        options: Host options (overrides, extraction, compiler flags).
        mode: Build mode of the request.
        name: Component name (seeds the local class-name pattern).
        module_id: Component identifier (style scope / template id).
        peers: Installed-package probes for the build.

    Returns:
        The resolved LoaderSet.

    Raises:
        MissingPeerCapability: CSS extraction requested without an extractor.
    """
    css_options = css_loader_options(name, mode, options)
    compiler_options = style_compiler_options(module_id, options)
    template_options = template_compiler_options(module_id, options)

    refs: dict[ArtifactKind, LoaderRef] = {}
    for kind in ArtifactKind:
        override = options.override_for(kind)
        if override is not None:
            logger.debug("Using host %s loader: %r", kind.value, override)
            refs[kind] = LoaderRef(request=override)
            continue

        if kind is ArtifactKind.STYLE:
            request = _default_style(loader_query(css_options), loader_query(compiler_options), options, peers)
            refs[kind] = LoaderRef(request=request, options=css_options)
        elif kind is ArtifactKind.TEMPLATE:
            request = peers.resolve(TEMPLATE_COMPILER) + loader_query(template_options)
            refs[kind] = LoaderRef(request=request, options=template_options)
        else:
            refs[kind] = _default_script(options, peers)

    # extraction must be checked even when the host overrides the style chain
    if options.extract_css and options.override_for(ArtifactKind.STYLE) is not None:
        _extractor(options, peers)

    return LoaderSet(
        script=refs[ArtifactKind.SCRIPT],
        template=refs[ArtifactKind.TEMPLATE],
        style=refs[ArtifactKind.STYLE],
    )
