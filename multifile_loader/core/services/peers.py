"""
Peer package probes — what the host's node_modules tree provides.

The engine never executes JavaScript; it only needs to know whether a
peer loader (``babel-loader``, ``extract-text-webpack-plugin``, ...) is
installed and, for its own runtime helpers, where they live.  Probes
walk up from the build root the same way Node's resolver does and are
memoized for the lifetime of one resolver (one build run).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

NODE_MODULES = "node_modules"

# Candidate file suffixes when resolving "pkg/lib/thing" to a file
_RESOLVE_SUFFIXES = ("", ".js", "/index.js")


def _package_name(request: str) -> str:
    """``@scope/pkg/lib/x`` → ``@scope/pkg``; ``pkg/lib/x`` → ``pkg``."""
    parts = request.split("/")
    if request.startswith("@") and len(parts) > 1:
        return "/".join(parts[:2])
    return parts[0]


class PeerResolver:
    """Answer "is package X installed?" for one build root.

    Args:
        root: Directory to start the ``node_modules`` lookup from.
        installed: Optional explicit package list.  When given, the
            filesystem is never consulted for availability (hosts that
            already know their environment, and tests).
    """

    def __init__(self, root: Path | str, installed: Iterable[str] | None = None):
        self._root = Path(root)
        self._installed = frozenset(installed) if installed is not None else None
        self._available: dict[str, bool] = {}
        self._resolved: dict[str, str] = {}

    @property
    def root(self) -> Path:
        return self._root

    def _module_dirs(self) -> list[Path]:
        current = self._root.resolve()
        dirs = []
        for _ in range(64):  # safety limit
            candidate = current / NODE_MODULES
            if candidate.is_dir():
                dirs.append(candidate)
            if current.parent == current:
                break
            current = current.parent
        return dirs

    def has(self, package: str) -> bool:
        """Whether a package is installed for this build."""
        if package in self._available:
            return self._available[package]

        if self._installed is not None:
            found = package in self._installed
        else:
            found = any((d / package / "package.json").is_file() for d in self._module_dirs())

        self._available[package] = found
        logger.debug("Peer %s: %s", package, "available" if found else "missing")
        return found

    def resolve(self, request: str) -> str:
        """Absolute path for a module request, or the request itself.

        Falling back to the bare request leaves resolution to the
        bundler, which knows its own ``resolve.modules`` settings.
        """
        if request in self._resolved:
            return self._resolved[request]

        resolved = request
        if self._installed is None or _package_name(request) in self._installed:
            for module_dir in self._module_dirs():
                match = self._find_file(module_dir / request)
                if match is not None:
                    resolved = str(match)
                    break

        self._resolved[request] = resolved
        return resolved

    @staticmethod
    def _find_file(base: Path) -> Path | None:
        for suffix in _RESOLVE_SUFFIXES:
            candidate = Path(str(base) + suffix)
            if candidate.is_file():
                return candidate
        return None

    def first_available(self, packages: Iterable[str]) -> str | None:
        """The first installed package of several interchangeable ones."""
        for package in packages:
            if self.has(package):
                return package
        return None
