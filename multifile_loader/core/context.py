"""
Build context — the state shared by every component of one build run.

The bundler keeps a few memoized values alive for the whole compilation
(peer availability, resolved loader options, component ids).  Here they
live on an explicit object that the entry point creates once and passes
to every transformation:

    - CLI:    use_cases.transform → BuildContext(root)
    - Hosts:  one BuildContext per compilation
    - Tests:  BuildContext(tmp_path, installed=[...])

Everything cached here is a pure function of its key, so populating a
cache twice yields the same value.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

from multifile_loader.core.models.loader_set import LoaderSet
from multifile_loader.core.services.hashing import gen_id
from multifile_loader.core.services.peers import PeerResolver


MODULE_ID_PREFIX = "data-v-"


class BuildContext:
    """Explicitly scoped caches for one build run."""

    def __init__(
        self,
        root: Path | str,
        *,
        installed: Iterable[str] | None = None,
        peers: PeerResolver | None = None,
    ):
        self.root = Path(root)
        self.peers = peers or PeerResolver(self.root, installed=installed)
        self._module_ids: dict[tuple[str, str, str], str] = {}
        self._loader_sets: dict[tuple, LoaderSet] = {}

    def module_id(self, component_dir: str, context: str, hash_key: str = "") -> str:
        """Stable identifier of a component (HMR key and scope-id seed)."""
        key = (component_dir, context, hash_key or "")
        if key not in self._module_ids:
            self._module_ids[key] = MODULE_ID_PREFIX + gen_id(component_dir, context, hash_key)
        return self._module_ids[key]

    def loader_set(self, key: tuple, factory: Callable[[], LoaderSet]) -> LoaderSet:
        """Memoized loader set, keyed by build configuration."""
        cached = self._loader_sets.get(key)
        if cached is None:
            cached = factory()
            self._loader_sets[key] = cached
        return cached
