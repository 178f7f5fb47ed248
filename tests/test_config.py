"""
Tests for configuration loading — multifile.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from multifile_loader.core.config.loader import (
    ConfigError,
    find_config_file,
    load_options,
    parse_options,
)


@pytest.fixture
def flat_options_yml(tmp_path: Path) -> Path:
    """Options at the top level of the file."""
    content = textwrap.dedent("""\
        hashKey: salt
        cssSourceMap: false
        esModule: true
        preserveWhitespace: false
        compilerModules: ./compiler-modules.js
        loaders:
          js: buble-loader
    """)
    path = tmp_path / "multifile.yml"
    path.write_text(content)
    return path


@pytest.fixture
def nested_options_yml(tmp_path: Path) -> Path:
    """Options nested under a ``vue:`` key."""
    content = textwrap.dedent("""\
        vue:
          inject: true
          extractCSS: false
    """)
    path = tmp_path / "multifile.yml"
    path.write_text(content)
    return path


class TestLoadOptions:
    def test_flat(self, flat_options_yml: Path):
        opts = load_options(flat_options_yml)
        assert opts.hash_key == "salt"
        assert opts.css_source_map is False
        assert opts.es_module is True
        assert opts.preserve_whitespace is False
        assert opts.forwarded_compiler_modules == "./compiler-modules.js"
        assert opts.loaders == {"script": "buble-loader"}

    def test_nested(self, nested_options_yml: Path):
        opts = load_options(nested_options_yml)
        assert opts.inject is True
        assert opts.extract_css is False

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "multifile.yml"
        path.write_text("")
        opts = load_options(path)
        assert opts.hash_key == ""
        assert opts.loaders == {}

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_options(tmp_path / "nope.yml")

    def test_no_file_found_uses_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        opts = load_options()
        assert opts.inject is False

    def test_no_file_found_required(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(ConfigError, match="No multifile.yml"):
            load_options(required=True)

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "multifile.yml"
        path.write_text("loaders: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_options(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "multifile.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_options(path)

    def test_invalid_option_value(self, tmp_path: Path):
        path = tmp_path / "multifile.yml"
        path.write_text("extractCSS: sometimes\n")
        with pytest.raises(ConfigError, match="Invalid loader options"):
            load_options(path)


class TestParseOptions:
    def test_none_is_defaults(self):
        assert parse_options(None).es_module is False

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError, match="must be a mapping"):
            parse_options({"vue": ["x"]})


class TestFindConfigFile:
    def test_walks_up(self, flat_options_yml: Path):
        nested = flat_options_yml.parent / "src" / "components"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == flat_options_yml.resolve()

    def test_not_found(self, tmp_path: Path):
        found = find_config_file(tmp_path)
        assert found is None or found.parent != tmp_path.resolve()
