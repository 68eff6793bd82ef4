"""Tests for PreviewSynchronizer."""

from __future__ import annotations

import threading

from classmanager.editor import PreviewStatus, PreviewSynchronizer, reorder_classes
from classmanager.events import (
    ClassCommitted,
    ClassesReordered,
    ClassRemoved,
    PreviewApplied,
    PreviewRemoved,
)


def class_name(store, client_id="b1"):
    return store.get_block(client_id).class_name


# ---------------------------------------------------------------------------
# Preview and commit
# ---------------------------------------------------------------------------


class TestPreviewLifecycle:
    def test_apply_then_remove_restores(self, store, sync):
        assert sync.apply_preview("b1", "bar") is True
        assert class_name(store) == "foo bar"
        assert sync.status("b1") == PreviewStatus.PREVIEWING
        assert sync.remove_preview("b1") is True
        assert class_name(store) == "foo"
        assert sync.status("b1") == PreviewStatus.IDLE

    def test_commit_survives_removal(self, store, sync, scheduler):
        sync.apply_preview("b1", "bar")
        sync.remove_preview("b1")
        assert sync.select("b1", "bar") is True
        assert class_name(store) == "foo bar"
        sync.remove_preview("b1", "bar")
        assert class_name(store) == "foo bar"
        scheduler.advance(1.0)
        sync.remove_preview("b1", "bar")
        sync.remove_preview("b1")
        assert class_name(store) == "foo bar"

    def test_select_promotes_preview_in_place(self, store, sync):
        sync.apply_preview("b1", "bar")
        sync.select("b1", "bar")
        sync.remove_preview("b1")
        assert class_name(store) == "foo bar"
        assert sync.committed_classes("b1") == ["foo", "bar"]

    def test_select_drops_other_preview(self, store, sync):
        sync.apply_preview("b1", "bar")
        sync.select("b1", "baz")
        assert class_name(store) == "foo baz"

    def test_new_preview_replaces_old(self, store, sync):
        sync.apply_preview("b1", "a")
        sync.apply_preview("b1", "b")
        assert class_name(store) == "foo b"

    def test_preview_of_existing_class_not_tracked(self, store, sync):
        assert sync.apply_preview("b1", "foo") is True
        assert class_name(store) == "foo"
        assert sync.status("b1") == PreviewStatus.IDLE
        sync.remove_preview("b1")
        assert class_name(store) == "foo"

    def test_committed_classes_hide_preview(self, store, sync):
        sync.apply_preview("b1", "bar")
        assert sync.committed_classes("b1") == ["foo"]
        assert sync.committed_class_name("b1") == "foo"

    def test_empty_arguments(self, sync):
        assert sync.apply_preview("", "x") is False
        assert sync.apply_preview("b1", "") is False
        assert sync.select("b1", "") is False


class TestCommitRace:
    def test_status_during_grace_window(self, sync, scheduler, config):
        sync.select("b1", "bar")
        assert sync.status("b1") == PreviewStatus.COMMITTING
        scheduler.advance(config.commit_grace)
        assert sync.status("b1") == PreviewStatus.IDLE

    def test_pending_preview_cancelled_by_commit(self, store, sync, scheduler):
        sync.schedule_preview("b1", "bar")
        sync.select("b1", "bar")
        scheduler.advance(1.0)
        assert class_name(store) == "foo bar"
        assert sync.committed_classes("b1") == ["foo", "bar"]

    def test_removal_during_commit_loses(self, store, sync):
        sync.apply_preview("b1", "bar")
        sync.select("b1", "bar")
        sync.remove_preview("b1", "bar")
        assert class_name(store) == "foo bar"

    def test_second_commit_restarts_grace(self, sync, scheduler):
        sync.select("b1", "a")
        scheduler.advance(0.4)
        sync.select("b1", "b")
        scheduler.advance(0.4)
        assert sync.state_for("b1").committing == "b"
        scheduler.advance(0.2)
        assert sync.state_for("b1").committing is None

    def test_concurrent_previews_and_commit(self, store, sync, scheduler):
        def preview_many():
            for i in range(50):
                sync.apply_preview("b1", f"p{i}")
                sync.remove_preview("b1")

        thread = threading.Thread(target=preview_many)
        thread.start()
        sync.select("b1", "bar")
        thread.join()
        sync.remove_preview("b1")
        assert "bar" in class_name(store).split()
        assert not any(c.startswith("p") for c in class_name(store).split())


# ---------------------------------------------------------------------------
# Debounced previews
# ---------------------------------------------------------------------------


class TestDebouncedPreview:
    def test_only_last_preview_applied(self, store, sync, scheduler):
        sync.schedule_preview("b1", "a")
        sync.schedule_preview("b1", "b")
        assert class_name(store) == "foo"
        scheduler.advance(0.1)
        assert class_name(store) == "foo b"

    def test_remove_cancels_pending(self, store, sync, scheduler):
        sync.schedule_preview("b1", "a")
        sync.remove_preview("b1")
        scheduler.advance(0.1)
        assert class_name(store) == "foo"

    def test_cancel_pending(self, store, sync, scheduler):
        sync.schedule_preview("b1", "a")
        sync.cancel_pending("b1")
        scheduler.advance(0.1)
        assert class_name(store) == "foo"

    def test_forget(self, store, sync, scheduler):
        sync.schedule_preview("b1", "a")
        sync.forget("b1")
        scheduler.advance(0.1)
        assert class_name(store) == "foo"
        assert sync.status("b1") == PreviewStatus.IDLE


# ---------------------------------------------------------------------------
# Isolation and missing blocks
# ---------------------------------------------------------------------------


class TestIsolation:
    def test_blocks_do_not_share_previews(self, store, sync):
        store.insert_block("b2", attributes={"className": "other"})
        sync.apply_preview("b1", "x")
        sync.remove_preview("b2")
        assert class_name(store, "b1") == "foo x"
        sync.apply_preview("b2", "y")
        assert sync.committed_classes("b1") == ["foo"]
        assert sync.committed_classes("b2") == ["other"]

    def test_missing_block_is_noop(self, store, sync):
        assert sync.apply_preview("nope", "x") is False
        assert sync.select("nope", "x") is False
        assert sync.remove_class("nope", "x") is False
        assert sync.reorder("nope", 0, 1) is False
        assert sync.committed_classes("nope") == []
        sync.remove_preview("nope")
        assert class_name(store) == "foo"

    def test_block_removed_while_previewing(self, store, sync):
        sync.apply_preview("b1", "x")
        store.remove_block("b1")
        assert sync.remove_preview("b1") is False
        assert sync.status("b1") == PreviewStatus.IDLE


# ---------------------------------------------------------------------------
# Class list edits
# ---------------------------------------------------------------------------


class TestClassListEdits:
    def test_remove_class(self, store, sync):
        sync.select("b1", "bar")
        assert sync.remove_class("b1", "bar") is True
        assert class_name(store) == "foo"
        assert sync.state_for("b1").permanent == []

    def test_remove_absent_class(self, store, sync):
        assert sync.remove_class("b1", "zzz") is True
        assert class_name(store) == "foo"

    def test_reorder(self, store, sync):
        store.update_block_attributes("b1", {"className": "a b c"})
        assert sync.reorder("b1", 2, 0) is True
        assert class_name(store) == "c a b"

    def test_reorder_keeps_preview_last(self, store, sync):
        store.update_block_attributes("b1", {"className": "a b c"})
        sync.apply_preview("b1", "p")
        sync.reorder("b1", 2, 0)
        assert class_name(store) == "c a b p"
        assert sync.committed_classes("b1") == ["c", "a", "b"]

    def test_reorder_classes(self):
        assert reorder_classes(["a", "b", "c"], 2, 0) == ["c", "a", "b"]
        assert reorder_classes(["a", "b", "c"], 0, 10) == ["b", "c", "a"]
        assert reorder_classes(["a", "b", "c"], 5, 0) == ["a", "b", "c"]
        assert reorder_classes([], 0, 0) == []


class TestProtectBlock:
    def test_readds_dropped_commits(self, store, sync):
        sync.select("b1", "bar")
        unsubscribe = sync.protect_block("b1")
        store.update_block_attributes("b1", {"className": "foo"})
        assert class_name(store) == "foo bar"

        unsubscribe()
        store.update_block_attributes("b1", {"className": "foo"})
        assert class_name(store) == "foo"

    def test_ignores_other_blocks(self, store, sync):
        store.insert_block("b2", attributes={"className": ""})
        sync.select("b1", "bar")
        sync.protect_block("b1")
        store.update_block_attributes("b2", {"className": "x"})
        assert class_name(store, "b2") == "x"


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:
    def test_event_sequence(self, sync, bus):
        events = []
        bus.on_all(events.append)
        sync.apply_preview("b1", "bar")
        sync.remove_preview("b1")
        sync.select("b1", "bar")
        sync.reorder("b1", 1, 0)
        sync.remove_class("b1", "bar")
        assert [type(e) for e in events] == [
            PreviewApplied,
            PreviewRemoved,
            ClassCommitted,
            ClassesReordered,
            ClassRemoved,
        ]
        assert events[3].classes == ("bar", "foo")

    def test_no_event_for_missing_block(self, store, scheduler, bus):
        events = []
        bus.on_all(events.append)
        sync = PreviewSynchronizer(store, scheduler=scheduler, event_bus=bus)
        sync.select("nope", "x")
        assert events == []
