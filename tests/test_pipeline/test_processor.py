"""Tests for CSSProcessor and the derived stylesheet files."""

from __future__ import annotations

import pytest

from classmanager.config import ClassManagerConfig
from classmanager.events import EventBus, StylesheetSaved, StylesheetSaveFailed
from classmanager.pipeline import atomic
from classmanager.pipeline.processor import (
    DEFAULT_CSS,
    CSSProcessor,
    FileInfo,
    build_artifacts,
    format_file_size,
)

SAMPLE = ":root { --brand: #ff0000; }\n\n.a { color: var(--brand); }\n\n@media (max-width: 600px) {\n    .b { margin: 0px; }\n}\n"


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def processor(tmp_path, bus):
    return CSSProcessor(ClassManagerConfig(output_dir=str(tmp_path / "lza-css")), event_bus=bus)


# ---------------------------------------------------------------------------
# Derived artifacts
# ---------------------------------------------------------------------------


class TestBuildArtifacts:
    def test_minified_excludes_root(self):
        artifacts = build_artifacts(":root { --x: 1px; }\n.a { color: var(--x); }")
        assert artifacts.minified == ".a{color:var(--x)}"
        assert artifacts.root_vars == ":root {\n --x: 1px; }\n\n"

    def test_raw_kept(self):
        assert build_artifacts(SAMPLE).raw == SAMPLE

    def test_editor_safe(self):
        artifacts = build_artifacts(SAMPLE)
        assert artifacts.editor_safe.startswith(":root {")
        assert ".block-editor-block-list__block.b" in artifacts.editor_safe


# ---------------------------------------------------------------------------
# process_css
# ---------------------------------------------------------------------------


class TestProcessCss:
    def test_writes_all_files(self, processor):
        assert processor.process_css(SAMPLE) is True
        paths = processor.paths
        assert paths.custom_css.read_text(encoding="utf-8") == SAMPLE
        assert "\n" not in paths.custom_css_min.read_text(encoding="utf-8")
        assert ":root" not in paths.custom_css_min.read_text(encoding="utf-8")
        assert paths.root_vars.read_text(encoding="utf-8").startswith(":root {")
        assert ".editor-styles-wrapper .a" in paths.editor_css.read_text(encoding="utf-8")

    def test_root_vars_written_empty_without_root(self, processor):
        assert processor.process_css(".a { x: y; }")
        assert processor.paths.root_vars.read_text(encoding="utf-8") == ""

    @pytest.mark.parametrize("css", ["", "   \n\t"])
    def test_empty_input_rejected(self, processor, css):
        assert processor.process_css(css) is False
        assert not processor.paths.output_dir.exists()

    def test_saved_event(self, processor, bus):
        events = []
        bus.subscribe(StylesheetSaved, events.append)
        processor.process_css(SAMPLE)
        assert len(events) == 1
        assert events[0].class_count == 2
        assert events[0].size == len(SAMPLE)

    def test_failed_write_keeps_previous_files(self, processor, bus, monkeypatch):
        processor.process_css(".old { x: y; }")
        failures = []
        bus.subscribe(StylesheetSaveFailed, failures.append)

        def boom(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(atomic.os, "replace", boom)
        assert processor.process_css(".new { x: y; }") is False
        monkeypatch.undo()

        paths = processor.paths
        assert paths.custom_css.read_text(encoding="utf-8") == ".old { x: y; }"
        assert ".old" in paths.custom_css_min.read_text(encoding="utf-8")
        assert ".old" in paths.editor_css.read_text(encoding="utf-8")
        assert list(paths.output_dir.glob(".*.tmp")) == []
        assert len(failures) == 1
        assert "Failed to replace" in failures[0].error

    @pytest.mark.parametrize("failing_call", range(1, 9))
    def test_rename_failure_midway_restores_every_file(
        self, processor, monkeypatch, failing_call
    ):
        processor.process_css(":root{--x:1px}\n.old{color:red}")
        paths = processor.paths
        files = (paths.custom_css, paths.custom_css_min, paths.root_vars, paths.editor_css)
        before = {path: path.read_text(encoding="utf-8") for path in files}

        real_replace = atomic.os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append((src, dst))
            if len(calls) == failing_call:
                raise OSError("rename failed")
            real_replace(src, dst)

        monkeypatch.setattr(atomic.os, "replace", flaky_replace)
        assert processor.process_css(".new{color:blue}") is False
        monkeypatch.undo()

        assert {path: path.read_text(encoding="utf-8") for path in files} == before
        assert sorted(p.name for p in paths.output_dir.iterdir()) == sorted(p.name for p in files)

    def test_unencodable_css_returns_false(self, processor, bus):
        failures = []
        bus.subscribe(StylesheetSaveFailed, failures.append)
        assert processor.process_css(".a { content: '\ud800'; }") is False
        assert len(failures) == 1
        assert list(processor.paths.output_dir.iterdir()) == []

    def test_overwrites_previous_save(self, processor):
        processor.process_css(".old { x: y; }")
        processor.process_css(".new { x: y; }")
        assert processor.available_classes() == ["new"]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoadCss:
    def test_default_when_missing(self, processor):
        assert processor.load_css() == DEFAULT_CSS

    def test_default_classes(self, processor):
        assert processor.available_classes() == ["bg-red", "p-l", "p-xl", "text-white"]

    def test_returns_saved_css(self, processor):
        processor.process_css(SAMPLE)
        assert processor.load_css() == SAMPLE

    def test_prepends_root_vars(self, processor):
        paths = processor.paths
        paths.output_dir.mkdir(parents=True)
        paths.custom_css.write_text(".a { }", encoding="utf-8")
        paths.root_vars.write_text(":root {\n --x: 1px; }\n\n", encoding="utf-8")
        assert processor.load_css() == ":root {\n --x: 1px; }\n\n\n\n.a { }"


# ---------------------------------------------------------------------------
# File info
# ---------------------------------------------------------------------------


class TestFileInfo:
    def test_none_before_save(self, processor):
        assert processor.file_info() is None

    def test_sizes_after_save(self, processor):
        processor.process_css(SAMPLE)
        info = processor.file_info()
        paths = processor.paths
        assert info.original_size == paths.custom_css.stat().st_size
        assert info.minified_size == paths.custom_css_min.stat().st_size
        assert info.root_vars_size == paths.root_vars.stat().st_size
        assert info.is_smaller

    def test_derived_values(self):
        info = FileInfo(original_size=1000, minified_size=400, root_vars_size=0)
        assert info.savings == 600
        assert info.percent_reduction == 60.0
        assert info.is_smaller
        data = info.to_dict()
        assert data["minified"] == "400.00 B"
        assert data["savings"] == 600

    def test_zero_original(self):
        assert FileInfo(0, 0, 0).percent_reduction == 0.0


class TestFormatFileSize:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0.00 B"),
            (512, "512.00 B"),
            (1536, "1.50 KB"),
            (3 * 1024 * 1024, "3.00 MB"),
            (5 * 1024 ** 4, "5,242,880.00 MB"),
        ],
    )
    def test_format(self, size, expected):
        assert format_file_size(size) == expected
