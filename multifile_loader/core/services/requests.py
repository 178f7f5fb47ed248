"""
Request strings — the bundler's ``loader!loader?query!file`` syntax.

Generated code must not embed absolute paths of the build machine, so
every request is rewritten relative to the component directory before
it is quoted into a ``require()`` call.
"""

from __future__ import annotations

import json
import os
import re
from typing import Any

_QUERY_RE = re.compile(r"^(.*?)(\?.*)", re.DOTALL)
_RELATIVE_RE = re.compile(r"^\.\.?[/\\]")


def js_string(value: str) -> str:
    """Quote a value as a JavaScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def loader_query(options: dict[str, Any]) -> str:
    """Encode loader options as an inline ``?{json}`` query.

    Keys whose value is None are dropped, matching how the bundler
    serializes ``undefined`` option values.
    """
    present = {k: v for k, v in options.items() if v is not None}
    return "?" + json.dumps(present, ensure_ascii=False, separators=(",", ":"))


def _is_absolute(path: str) -> bool:
    return os.path.isabs(path) or bool(re.match(r"^[A-Za-z]:[/\\]", path))


def _relativize(part: str, context: str) -> str:
    match = _QUERY_RE.match(part)
    query = match.group(2) if match else ""
    single = match.group(1) if match else part

    if context and _is_absolute(single):
        single = os.path.relpath(single, context)
        if _is_absolute(single):
            return single + query
        if not _RELATIVE_RE.match(single):
            single = "./" + single

    return single.replace("\\", "/") + query


def stringify_request(context: str, request: str) -> str:
    """Relativize every path of a loader request and quote it.

    Args:
        context: Directory the generated module lives in.
        request: ``!``-separated request (loaders and the resource).

    Returns:
        A JavaScript string literal safe to embed in ``require()``.
    """
    return js_string("!".join(_relativize(part, context) for part in request.split("!")))


def loader_request(loader: str, file_path: str) -> str:
    """Request that runs *only* the given loader chain on a file."""
    if not loader:
        return "!!" + file_path
    return "!!" + loader + "!" + file_path


class RequireBuilder:
    """Build ``require()`` expressions relative to one component directory."""

    def __init__(self, context: str):
        self.context = context

    def path(self, loader: str, file_path: str) -> str:
        """Quoted request for ``file_path`` through ``loader``."""
        return stringify_request(self.context, loader_request(loader, file_path))

    def require(self, loader: str, file_path: str) -> str:
        return f"require({self.path(loader, file_path)})"

    def module(self, request: str) -> str:
        """``require()`` of a plain module request (pre-loaders kept)."""
        return f"require({stringify_request(self.context, request)})"
