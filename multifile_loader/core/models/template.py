"""
Generated module model — the engine's output.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedModule(BaseModel):
    """A module produced by the assembly phase.

    Attributes:
        path:      Script path the module was generated for.
        content:   Full module source.
        module_id: Stable component identifier (HMR record key, scope id).
        factory:   True when the module exports an injection factory.
        reason:    Why / how this module was generated.
    """

    path: str
    content: str
    module_id: str
    factory: bool = False
    reason: str = ""
