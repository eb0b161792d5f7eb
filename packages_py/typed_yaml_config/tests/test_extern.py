"""
Tests for extern reference resolution.
"""
from pathlib import Path

import pytest

from typed_yaml_config import (
    MISSING,
    ExternResolver,
    FileSystemLocator,
    InMemoryLocator,
    LoaderOptions,
)

CFG = Path("/cfg")


def resolver_for(files):
    return ExternResolver(InMemoryLocator(files))


class TestSentinel:
    def test_string_sentinel(self):
        resolver = resolver_for({})
        assert resolver.is_sentinel("extern", "display") is True
        assert resolver.is_sentinel("Extern", "display") is False
        assert resolver.is_sentinel("display", "display") is False

    def test_mapping_sentinel_keyed_by_field(self):
        resolver = resolver_for({})
        assert resolver.is_sentinel({"display": "extern"}, "display") is True
        assert resolver.is_sentinel({"other": "extern"}, "display") is False
        assert resolver.is_sentinel({"display": "extern", "x": 1}, "display") is False

    def test_non_sentinel_passes_through(self):
        resolver = resolver_for({"/cfg/display.yml": "title: x\n"})
        node = {"title": "inline"}
        result = resolver.maybe_dereference(node, "display", CFG)
        assert result.node is node
        assert result.found is False
        assert result.is_extern is False

    def test_missing_node_passes_through(self):
        result = resolver_for({}).maybe_dereference(MISSING, "display", CFG)
        assert result.node is MISSING
        assert result.is_extern is False

    def test_custom_sentinel(self):
        locator = InMemoryLocator({"/cfg/display.yml": "title: x\n"}, LoaderOptions(sentinel="@file"))
        resolver = ExternResolver(locator)
        assert resolver.maybe_dereference("@file", "display", CFG).node == {"title": "x"}
        assert resolver.maybe_dereference("extern", "display", CFG).node == "extern"


class TestSearchOrder:
    def test_candidate_order(self):
        locator = InMemoryLocator({})
        assert locator.candidate_paths("display", CFG) == [
            Path("/cfg/display/config.yml"),
            Path("/cfg/display/config.yaml"),
            Path("/cfg/display.yml"),
            Path("/cfg/display.yaml"),
        ]

    def test_directory_config_wins(self):
        resolver = resolver_for({
            "/cfg/display/config.yml": "title: nested\n",
            "/cfg/display.yml": "title: sibling\n",
        })
        result = resolver.maybe_dereference("extern", "display", CFG)
        assert result.node == {"title": "nested"}
        assert result.path == Path("/cfg/display/config.yml")
        assert result.current_dir == Path("/cfg/display")

    def test_yaml_extension_variant(self):
        resolver = resolver_for({"/cfg/display.yaml": "title: long\n"})
        result = resolver.maybe_dereference("extern", "display", CFG)
        assert result.node == {"title": "long"}
        assert result.current_dir == CFG

    def test_unparsable_candidate_is_skipped(self):
        resolver = resolver_for({
            "/cfg/display/config.yml": "title: [unclosed\n",
            "/cfg/display.yml": "title: sibling\n",
        })
        result = resolver.maybe_dereference("extern", "display", CFG)
        assert result.path == Path("/cfg/display.yml")

    def test_not_found_is_treated_as_absent(self, caplog):
        result = resolver_for({}).maybe_dereference("extern", "display", CFG)
        assert result.node is MISSING
        assert result.found is False
        assert result.is_extern is True
        assert "display" in caplog.text

    def test_idempotent(self):
        resolver = resolver_for({"/cfg/display.yml": "title: x\nsize: [1, 2]\n"})
        first = resolver.maybe_dereference("extern", "display", CFG)
        second = resolver.maybe_dereference("extern", "display", CFG)
        assert first.node == second.node
        assert first.path == second.path


class TestFileSystemLocator:
    def test_reads_from_disk(self, tmp_path):
        (tmp_path / "display").mkdir()
        (tmp_path / "display" / "config.yml").write_text("title: disk\n", encoding="utf-8")
        (tmp_path / "display.yml").write_text("title: sibling\n", encoding="utf-8")

        resolver = ExternResolver(FileSystemLocator())
        result = resolver.maybe_dereference("extern", "display", tmp_path)
        assert result.node == {"title": "disk"}
        assert result.path == tmp_path / "display" / "config.yml"

    def test_directory_named_like_candidate_is_ignored(self, tmp_path):
        (tmp_path / "display.yml").mkdir()
        locator = FileSystemLocator()
        assert locator.locate("display", tmp_path) == []

    def test_read_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            FileSystemLocator().read_text(tmp_path / "nope.yml")
