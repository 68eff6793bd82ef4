"""Tests for write_atomically."""

import pytest

from classmanager.errors import StylesheetWriteError
from classmanager.pipeline import atomic
from classmanager.pipeline.atomic import write_atomically


class TestWriteAtomically:
    def test_writes_files_and_creates_dirs(self, tmp_path):
        a = tmp_path / "a.css"
        b = tmp_path / "sub" / "b.css"
        write_atomically({a: ".a{}", b: ".b{}"})
        assert a.read_text(encoding="utf-8") == ".a{}"
        assert b.read_text(encoding="utf-8") == ".b{}"

    def test_newlines_kept_verbatim(self, tmp_path):
        target = tmp_path / "x.css"
        write_atomically({target: ".a {\r\n}\n"})
        assert target.read_bytes() == b".a {\r\n}\n"

    def test_failure_writes_nothing(self, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("not a directory", encoding="utf-8")
        good = tmp_path / "good.css"
        bad = blocker / "bad.css"

        with pytest.raises(StylesheetWriteError) as exc_info:
            write_atomically({good: ".a{}", bad: ".b{}"})

        assert exc_info.value.path == str(bad)
        assert isinstance(exc_info.value.cause, OSError)
        assert not good.exists()
        assert list(tmp_path.glob(".*.tmp")) == []

    def test_unencodable_content(self, tmp_path):
        good = tmp_path / "good.css"
        bad = tmp_path / "bad.css"

        with pytest.raises(StylesheetWriteError) as exc_info:
            write_atomically({good: ".a{}", bad: "\ud800"})

        assert isinstance(exc_info.value.cause, UnicodeError)
        assert list(tmp_path.iterdir()) == []

    def test_rename_failure_removes_new_files(self, tmp_path, monkeypatch):
        first = tmp_path / "first.css"
        second = tmp_path / "second.css"
        old = tmp_path / "old.css"
        old.write_text("old", encoding="utf-8")

        real_replace = atomic.os.replace
        calls = []

        def flaky_replace(src, dst):
            calls.append(dst)
            if len(calls) == 4:
                raise OSError("rename failed")
            real_replace(src, dst)

        monkeypatch.setattr(atomic.os, "replace", flaky_replace)
        with pytest.raises(StylesheetWriteError):
            write_atomically({first: "1", old: "new", second: "2"})
        monkeypatch.undo()

        assert sorted(p.name for p in tmp_path.iterdir()) == ["old.css"]
        assert old.read_text(encoding="utf-8") == "old"

    def test_success_leaves_no_backups(self, tmp_path):
        target = tmp_path / "x.css"
        target.write_text("old", encoding="utf-8")
        write_atomically({target: "new"})
        assert target.read_text(encoding="utf-8") == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["x.css"]
