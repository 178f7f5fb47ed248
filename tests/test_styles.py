"""
Tests for style injection — CSS-Module binding, plain injection, SSR hooks.
"""

from pathlib import Path

import pytest

from multifile_loader.core.models.component import BuildMode, StyleSource
from multifile_loader.core.services.diagnostics import Diagnostics
from multifile_loader.core.services.requests import RequireBuilder
from multifile_loader.core.services.styles import (
    CSS_MODULE_NAME,
    CssModuleRegistry,
    style_sources,
    synthesize_styles,
)

DEV = BuildMode()
PROD = BuildMode(is_production=True)
SERVER = BuildMode(is_server=True)
SERVER_PROD = BuildMode(is_server=True, is_production=True)

MODULE_ID = "data-v-1234abcd"
GUARD = "if (disposed) return;"
VUE_STYLE = "vue-style-loader!css-loader"


@pytest.fixture
def component_dir(tmp_path: Path) -> Path:
    path = tmp_path / "Button.vue"
    path.mkdir()
    return path


def _sources(component_dir: Path, *, module_css: bool = True, index_css: bool = False) -> list[StyleSource]:
    return [
        StyleSource(path=str(component_dir / "module.css"), module_name=CSS_MODULE_NAME, exists=module_css),
        StyleSource(path=str(component_dir / "index.css"), module_name=None, exists=index_css),
    ]


def _synthesize(component_dir: Path, mode: BuildMode, *, loader: str = VUE_STYLE, registry=None,
                diagnostics=None, **flags):
    return synthesize_styles(
        _sources(component_dir, **flags),
        module_id=MODULE_ID,
        mode=mode,
        loader=loader,
        registry=registry if registry is not None else CssModuleRegistry(),
        diagnostics=diagnostics if diagnostics is not None else Diagnostics(),
        requires=RequireBuilder(str(component_dir)),
        guard=GUARD if mode.needs_hot_reload else "",
        component="Button",
    )


# ═══════════════════════════════════════════════════════════════════
#  Sources
# ═══════════════════════════════════════════════════════════════════


class TestStyleSources:
    def test_order_and_existence(self, component_dir: Path):
        (component_dir / "index.css").write_text("a {}\n")
        sources = style_sources(str(component_dir))
        assert [Path(s.path).name for s in sources] == ["module.css", "index.css"]
        assert [s.module_name for s in sources] == [CSS_MODULE_NAME, None]
        assert [s.exists for s in sources] == [False, True]

    def test_none_when_nothing_exists(self, component_dir: Path):
        assert _synthesize(component_dir, DEV, module_css=False) is None


# ═══════════════════════════════════════════════════════════════════
#  Build modes
# ═══════════════════════════════════════════════════════════════════


class TestDevelopment:
    def test_injector_shape(self, component_dir: Path):
        styles = _synthesize(component_dir, DEV)
        assert styles.reference == "injectStyle"
        assert styles.injector[0] == "function injectStyle (ssrContext) {"
        assert styles.injector[1] == "    " + GUARD
        assert styles.injector[-1] == "}"
        assert styles.declarations == ["var cssModules = {};"]

    def test_binds_through_getter(self, component_dir: Path):
        body = "\n".join(_synthesize(component_dir, DEV).injector)
        assert 'cssModules["$style"] = require("!!vue-style-loader!css-loader!./module.css");' in body
        assert 'Object.defineProperty(this, "$style", {' in body
        assert 'get: function () { return cssModules["$style"]; },' in body
        assert 'this["$style"] = cssModules["$style"]' not in body

    def test_inherited_modules_merge(self, component_dir: Path):
        body = "\n".join(_synthesize(component_dir, DEV).injector)
        assert 'var superModules = this["$style"];' in body
        assert "this.$options.name === superModules.root" in body
        assert 'Object.assign({}, superModules, cssModules["$style"])' in body

    def test_accept_handler(self, component_dir: Path):
        styles = _synthesize(component_dir, DEV)
        assert len(styles.hot_fragments) == 1
        handler = styles.hot_fragments[0]
        assert handler.startswith('module.hot && module.hot.accept(["!!vue-style-loader!css-loader!./module.css"]')
        assert GUARD in handler
        assert "if (JSON.stringify(newLocals) === JSON.stringify(oldLocals)) return;" in handler
        assert f'require("vue-hot-reload-api").rerender("{MODULE_ID}");' in handler

    def test_plain_style_has_no_handler(self, component_dir: Path):
        styles = _synthesize(component_dir, DEV, module_css=False, index_css=True)
        assert styles.hot_fragments == []
        assert styles.declarations == []
        assert '    require("!!vue-style-loader!css-loader!./index.css");' in styles.injector


class TestProduction:
    def test_direct_assignment(self, component_dir: Path):
        styles = _synthesize(component_dir, PROD)
        assert '    this["$style"] = cssModules["$style"];' in styles.injector
        assert styles.hot_fragments == []
        assert "    " + GUARD not in styles.injector

    def test_module_before_index(self, component_dir: Path):
        body = "\n".join(_synthesize(component_dir, PROD, index_css=True).injector)
        assert body.index("./module.css") < body.index("./index.css")


class TestServer:
    @pytest.mark.parametrize("mode", [SERVER, SERVER_PROD])
    def test_ssr_hook(self, component_dir: Path, mode: BuildMode):
        styles = _synthesize(component_dir, mode, index_css=True)
        assert "    var i;" in styles.injector
        assert (
            '    ;(i=require("!!vue-style-loader!css-loader!./index.css"),'
            "i.__inject__&&i.__inject__(ssrContext),i)"
        ) in styles.injector
        assert (
            '    ;(i=this["$style"] = cssModules["$style"],i.__inject__&&i.__inject__(ssrContext),i)'
        ) in styles.injector
        assert styles.hot_fragments == []

    def test_no_hook_without_vue_style_loader(self, component_dir: Path):
        styles = _synthesize(component_dir, SERVER, loader="css-loader", module_css=False, index_css=True)
        assert '    require("!!css-loader!./index.css");' in styles.injector


class TestLocals:
    def test_locals_without_style_loader(self, component_dir: Path):
        body = "\n".join(_synthesize(component_dir, PROD, loader="css-loader").injector)
        assert 'cssModules["$style"] = require("!!css-loader!./module.css").locals;' in body

    def test_no_locals_with_style_loader(self, component_dir: Path):
        body = "\n".join(_synthesize(component_dir, PROD).injector)
        assert ".locals" not in body


# ═══════════════════════════════════════════════════════════════════
#  Name uniqueness
# ═══════════════════════════════════════════════════════════════════


class TestDuplicateNames:
    def test_duplicate_degrades_to_plain_injection(self, component_dir: Path):
        registry = CssModuleRegistry()
        registry.claim(CSS_MODULE_NAME)
        diagnostics = Diagnostics()

        styles = _synthesize(component_dir, DEV, registry=registry, diagnostics=diagnostics)

        assert [d.message for d in diagnostics.errors] == ['CSS module name "$style" is not unique!']
        assert diagnostics.errors[0].component == "Button"
        assert '    require("!!vue-style-loader!css-loader!./module.css");' in styles.injector
        assert styles.hot_fragments == []

    def test_same_name_twice_in_one_component(self, component_dir: Path):
        sources = [
            StyleSource(path=str(component_dir / "module.css"), module_name=CSS_MODULE_NAME, exists=True),
            StyleSource(path=str(component_dir / "index.css"), module_name=CSS_MODULE_NAME, exists=True),
        ]
        registry = CssModuleRegistry()
        diagnostics = Diagnostics()
        styles = synthesize_styles(
            sources,
            module_id=MODULE_ID,
            mode=PROD,
            loader=VUE_STYLE,
            registry=registry,
            diagnostics=diagnostics,
            requires=RequireBuilder(str(component_dir)),
        )
        assert registry.names == [CSS_MODULE_NAME]
        assert len(diagnostics.errors) == 1
        body = "\n".join(styles.injector)
        assert 'cssModules["$style"] = require("!!vue-style-loader!css-loader!./module.css");' in body
        assert '    require("!!vue-style-loader!css-loader!./index.css");' in styles.injector

    def test_registry(self):
        registry = CssModuleRegistry()
        assert registry.declaration() == ""
        assert registry.claim("$style")
        assert not registry.claim("$style")
        assert "$style" in registry
        assert registry.names == ["$style"]
        assert len(registry) == 1


# ═══════════════════════════════════════════════════════════════════
#  Inherited locals
# ═══════════════════════════════════════════════════════════════════


class TestInheritedMerge:
    """The emitted merge: inherited locals A, current locals B, B wins."""

    def test_guarded_merge_lines(self, component_dir: Path):
        injector = _synthesize(component_dir, PROD).injector
        start = injector.index('    var superModules = this["$style"];')
        assert injector[start - 1].startswith('    cssModules["$style"] = require(')
        assert injector[start + 1:start + 4] == [
            "    if (superModules && this.$options.name === superModules.root) {",
            '        cssModules["$style"] = Object.assign({}, superModules, cssModules["$style"]);',
            "    }",
        ]

    @pytest.mark.parametrize(
        "mode, binding",
        [
            (DEV, 'Object.defineProperty(this, "$style"'),
            (PROD, '    this["$style"] = '),
            (SERVER, ';(i=this["$style"] = '),
        ],
    )
    def test_merge_precedes_binding(self, component_dir: Path, mode: BuildMode, binding: str):
        body = "\n".join(_synthesize(component_dir, mode).injector)
        assert body.index("Object.assign(") < body.index(binding)
