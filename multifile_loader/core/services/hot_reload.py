"""
Hot-reload wiring — how a generated module talks to the HMR runtime.

Each evaluation of the generated module starts ACTIVE (``disposed`` is
false).  The host's dispose hook moves it to DISPOSED for good; the next
accepted version is a fresh evaluation with its own flag.  Data that must
survive the swap (the CSS-Module locals) travels through ``data``.

Only development builds for the browser get any of this.
"""

from __future__ import annotations

from collections.abc import Collection

from multifile_loader.core.models.component import BuildMode
from multifile_loader.core.services.loaders import HOT_API_MODULE, RUNTIME_MODULE
from multifile_loader.core.services.requests import js_string
from multifile_loader.core.services.styles import REGISTRY_VAR

DISPOSED_FLAG = "disposed"


class HotReloadCoordinator:
    """Emit the HMR fragments of one generated module."""

    def __init__(self, module_id: str, mode: BuildMode):
        self.module_id = module_id
        self.mode = mode

    @property
    def enabled(self) -> bool:
        return self.mode.needs_hot_reload

    def prelude(self) -> list[str]:
        """Module-scope disposal flag, false at load."""
        if not self.enabled:
            return []
        return [f"var {DISPOSED_FLAG} = false;"]

    def guard(self) -> str:
        """Statement that turns a callback into a no-op once disposed."""
        if not self.enabled:
            return ""
        return f"if ({DISPOSED_FLAG}) return;"

    def wiring(self, css_modules: Collection[str] = ()) -> list[str]:
        """The accept / dispose block.

        Args:
            css_modules: CSS-Module names bound by this version of the
                module.  A previous version that carried a different
                set forces the cached constructor to be dropped.
        """
        if not self.enabled:
            return []

        module_id = js_string(self.module_id)
        lines = [
            "/* hot reload */",
            "if (module.hot) {(function () {",
            f"    var hotAPI = require({js_string(HOT_API_MODULE)});",
            f"    hotAPI.install(require({js_string(RUNTIME_MODULE)}), false);",
            "    if (!hotAPI.compatible) return;",
            "    module.hot.accept();",
            "    if (!module.hot.data) {",
            f"        hotAPI.createRecord({module_id}, Component.options);",
            "    } else {",
        ]
        if css_modules:
            names = js_string(",".join(sorted(css_modules)))
            lines.extend([
                "        if (module.hot.data.cssModules &&",
                f"            Object.keys(module.hot.data.cssModules).sort().join(\",\") !== {names}) {{",
                "            delete Component.options._Ctor;",
                "        }",
            ])
        lines.extend([
            f"        hotAPI.reload({module_id}, Component.options);",
            "    }",
            "    module.hot.dispose(function (data) {",
        ])
        if css_modules:
            lines.append(f"        data.cssModules = {REGISTRY_VAR};")
        lines.extend([
            f"        {DISPOSED_FLAG} = true;",
            "    });",
            "})()}",
        ])
        return ["\n".join(lines)]
