"""
Domain models — Pydantic types for the loader engine.

All models are re-exported here for convenient access:

    from multifile_loader.core.models import ComponentRequest, BuildMode, LoaderSet
"""

from multifile_loader.core.models.component import BuildMode, ComponentRequest, StyleSource
from multifile_loader.core.models.loader_set import ArtifactKind, LoaderRef, LoaderSet
from multifile_loader.core.models.options import LoaderOptions
from multifile_loader.core.models.template import GeneratedModule

__all__ = [
    # component.py
    "BuildMode",
    "ComponentRequest",
    "StyleSource",
    # loader_set.py
    "ArtifactKind",
    "LoaderRef",
    "LoaderSet",
    # options.py
    "LoaderOptions",
    # template.py
    "GeneratedModule",
]
