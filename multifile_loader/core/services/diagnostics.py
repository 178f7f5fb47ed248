"""
Diagnostics channel — non-fatal reports surfaced to the host build.

Content problems (a CSS-Module name bound twice) never abort a
transformation.  They are collected here so the host can print them
with its own build errors, and mirrored to the log.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class Diagnostic(BaseModel):
    """One report on the diagnostics channel."""

    level: str = "error"
    message: str
    component: str = ""

    def __str__(self) -> str:
        prefix = f"{self.component}: " if self.component else ""
        return f"[{self.level}] {prefix}{self.message}"


class Diagnostics:
    """Collector for the diagnostics of one build run."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def error(self, message: str, *, component: str = "") -> Diagnostic:
        """Report a build error (shown as an error, build continues)."""
        item = Diagnostic(message=message, component=component)
        self._items.append(item)
        logger.error("%s", item)
        return item

    @property
    def errors(self) -> list[Diagnostic]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> list[dict]:
        return [d.model_dump() for d in self._items]
