"""
Tests for peer probes — node_modules lookups and memoization.
"""

from pathlib import Path

from multifile_loader.core.services.peers import PeerResolver


def _install(root: Path, package: str, files: tuple[str, ...] = ()) -> Path:
    pkg = root / "node_modules" / package
    pkg.mkdir(parents=True)
    (pkg / "package.json").write_text('{"name": "%s"}' % package)
    for rel in files:
        target = pkg / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("module.exports = {}\n")
    return pkg


class TestHas:
    def test_found_in_ancestor(self, tmp_path: Path):
        _install(tmp_path, "babel-loader")
        nested = tmp_path / "app" / "src"
        nested.mkdir(parents=True)
        assert PeerResolver(nested).has("babel-loader")

    def test_missing(self, tmp_path: Path):
        assert not PeerResolver(tmp_path).has("buble-loader-that-does-not-exist")

    def test_scoped_package(self, tmp_path: Path):
        _install(tmp_path, "@scope/loader")
        assert PeerResolver(tmp_path).has("@scope/loader")

    def test_explicit_list_skips_filesystem(self, tmp_path: Path):
        _install(tmp_path, "babel-loader")
        peers = PeerResolver(tmp_path, installed=["buble-loader"])
        assert peers.has("buble-loader")
        assert not peers.has("babel-loader")

    def test_memoized(self, tmp_path: Path):
        peers = PeerResolver(tmp_path)
        assert not peers.has("babel-loader")
        _install(tmp_path, "babel-loader")
        # probes are cached for the lifetime of the resolver (one build)
        assert not peers.has("babel-loader")
        assert PeerResolver(tmp_path).has("babel-loader")


class TestFirstAvailable:
    def test_order_wins(self):
        peers = PeerResolver(".", installed=["babel-loader", "buble-loader"])
        assert peers.first_available(["buble-loader", "babel-loader"]) == "buble-loader"

    def test_none(self):
        assert PeerResolver(".", installed=[]).first_available(["a", "b"]) is None


class TestResolve:
    def test_resolves_js_file(self, tmp_path: Path):
        pkg = _install(tmp_path.resolve(), "vue-loader", ("lib/template-compiler/index.js", "lib/component-normalizer.js"))
        peers = PeerResolver(tmp_path)
        assert peers.resolve("vue-loader/lib/component-normalizer") == str(pkg / "lib" / "component-normalizer.js")
        assert peers.resolve("vue-loader/lib/template-compiler") == str(
            pkg / "lib" / "template-compiler" / "index.js"
        )

    def test_falls_back_to_bare_request(self, tmp_path: Path):
        assert PeerResolver(tmp_path).resolve("vue-loader/lib/style-compiler") == "vue-loader/lib/style-compiler"

    def test_explicit_list_without_package(self, tmp_path: Path):
        _install(tmp_path, "vue-loader", ("lib/style-compiler/index.js",))
        peers = PeerResolver(tmp_path, installed=["babel-loader"])
        assert peers.resolve("vue-loader/lib/style-compiler") == "vue-loader/lib/style-compiler"
