"""Preview synchronizer: revertible class previews on top of a block's class list.

A preview class is written to the block's ``className`` attribute so the
editor renders it, while the synchronizer remembers which token is
preview-only so it can be stripped again without touching committed classes.

Per block the synchronizer moves between three states::

    IDLE --apply_preview(c)--> PREVIEWING(c) --remove_preview--> IDLE
    PREVIEWING(c) --select(c)--> COMMITTING(c) --grace window--> IDLE

While a class is COMMITTING, any removal of that same class is ignored, so
a removal racing a commit always loses.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Sequence

from classmanager.config import ClassManagerConfig
from classmanager.editor.scheduler import Debouncer, Scheduler, ThreadingScheduler, TimerHandle
from classmanager.editor.store import BlockStore, join_classes, split_classes
from classmanager.events import (
    ClassCommitted,
    ClassesReordered,
    ClassRemoved,
    EventBus,
    PreviewApplied,
    PreviewRemoved,
)

logger = logging.getLogger(__name__)


def reorder_classes(classes: Sequence[str], source: int, destination: int) -> list[str]:
    """Move the class at *source* to *destination* and return the new list.

    An out-of-range *source* leaves the list unchanged; *destination* is
    clamped to the list bounds.
    """
    result = list(classes)
    if not 0 <= source < len(result):
        return result
    item = result.pop(source)
    destination = max(0, min(destination, len(result)))
    result.insert(destination, item)
    return result


def _without_last(classes: list[str], class_name: str) -> list[str]:
    """Return *classes* minus the last occurrence of *class_name*."""
    for index in range(len(classes) - 1, -1, -1):
        if classes[index] == class_name:
            return classes[:index] + classes[index + 1:]
    return list(classes)


class PreviewStatus(str, Enum):
    IDLE = "idle"
    PREVIEWING = "previewing"
    COMMITTING = "committing"


@dataclass
class BlockPreviewState:
    """Preview and commit bookkeeping for one block instance."""

    client_id: str
    debouncer: Debouncer
    preview_class: str | None = None
    committing: str | None = None
    permanent: list[str] = field(default_factory=list)
    grace_handle: TimerHandle | None = None

    @property
    def status(self) -> PreviewStatus:
        if self.preview_class is not None:
            return PreviewStatus.PREVIEWING
        if self.committing is not None:
            return PreviewStatus.COMMITTING
        return PreviewStatus.IDLE

    def is_protected(self, class_name: str) -> bool:
        """True if *class_name* is being committed or was committed."""
        return class_name == self.committing or class_name in self.permanent


class PreviewSynchronizer:
    """Applies, removes and commits preview classes on blocks in a BlockStore.

    State is kept per client id, so blocks never see each other's previews.
    Operations on a block that no longer exists return False and change
    nothing.
    """

    def __init__(
        self,
        store: BlockStore,
        *,
        scheduler: Scheduler | None = None,
        config: ClassManagerConfig | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.store = store
        self.config = config or ClassManagerConfig()
        self._scheduler = scheduler or ThreadingScheduler()
        self._event_bus = event_bus or EventBus()
        self._lock = threading.RLock()
        self._states: dict[str, BlockPreviewState] = {}

    # --- state ------------------------------------------------------------------

    def state_for(self, client_id: str) -> BlockPreviewState:
        with self._lock:
            state = self._states.get(client_id)
            if state is None:
                state = BlockPreviewState(
                    client_id=client_id,
                    debouncer=Debouncer(self._scheduler, self.config.preview_debounce),
                )
                self._states[client_id] = state
            return state

    def status(self, client_id: str) -> PreviewStatus:
        with self._lock:
            state = self._states.get(client_id)
            return state.status if state is not None else PreviewStatus.IDLE

    def forget(self, client_id: str) -> None:
        """Drop all bookkeeping for a block, cancelling its timers."""
        with self._lock:
            state = self._states.pop(client_id, None)
            if state is None:
                return
            state.debouncer.cancel()
            if state.grace_handle is not None:
                state.grace_handle.cancel()

    def _read(self, client_id: str) -> list[str] | None:
        block = self.store.get_block(client_id)
        if block is None:
            logger.debug("Block %s not found in store", client_id)
            return None
        return split_classes(block.class_name)

    def _write(self, client_id: str, classes: list[str]) -> bool:
        return self.store.update_block_attributes(client_id, {"className": join_classes(classes)})

    def _emit(self, event: Any) -> None:
        if event is not None:
            self._event_bus.emit(event)

    # --- ground truth -------------------------------------------------------------

    def committed_classes(self, client_id: str) -> list[str]:
        """The block's classes without the preview-only token."""
        with self._lock:
            classes = self._read(client_id)
            if classes is None:
                return []
            state = self._states.get(client_id)
            if state is not None and state.preview_class is not None:
                classes = _without_last(classes, state.preview_class)
            return classes

    def committed_class_name(self, client_id: str) -> str:
        return join_classes(self.committed_classes(client_id))

    # --- previews -----------------------------------------------------------------

    def apply_preview(self, client_id: str, class_name: str) -> bool:
        """Show *class_name* on the block without committing it.

        Any earlier preview on the block is removed first. A class the block
        already has is left alone and not tracked as a preview.
        """
        if not client_id or not class_name:
            return False
        event = None
        with self._lock:
            state = self.state_for(client_id)
            classes = self._read(client_id)
            if classes is None:
                state.preview_class = None
                return False

            previous = state.preview_class
            if previous == class_name and class_name in classes:
                return True

            changed = False
            if previous is not None and previous in classes and not state.is_protected(previous):
                classes = _without_last(classes, previous)
                changed = True
            state.preview_class = None

            if class_name not in classes:
                classes.append(class_name)
                changed = True
                event = PreviewApplied(client_id=client_id, class_name=class_name)

            if changed and not self._write(client_id, classes):
                return False
            if event is not None:
                state.preview_class = class_name
                logger.debug("Previewing %r on block %s", class_name, client_id)
            else:
                logger.debug("Block %s already has %r; not previewing", client_id, class_name)
        self._emit(event)
        return True

    def schedule_preview(self, client_id: str, class_name: str) -> None:
        """Apply a preview after the debounce delay; later calls replace earlier ones."""
        if not client_id or not class_name:
            return
        self.state_for(client_id).debouncer.call(
            lambda: self.apply_preview(client_id, class_name)
        )

    def cancel_pending(self, client_id: str) -> None:
        """Cancel a debounced preview that has not fired yet."""
        with self._lock:
            state = self._states.get(client_id)
            if state is not None:
                state.debouncer.cancel()

    def remove_preview(self, client_id: str, class_name: str | None = None) -> bool:
        """Strip the block's preview class.

        With *class_name*, only that preview is removed, and nothing happens
        if it is being committed or has been committed.
        """
        if not client_id:
            return False
        event = None
        with self._lock:
            state = self._states.get(client_id)
            if state is None:
                return True
            state.debouncer.cancel()
            if class_name is not None and state.is_protected(class_name):
                logger.debug(
                    "Not removing %r from block %s: it is being committed", class_name, client_id
                )
                return True

            target = state.preview_class
            if target is None or (class_name is not None and class_name != target):
                return True

            state.preview_class = None
            classes = self._read(client_id)
            if classes is None:
                return False
            if target in classes:
                if not self._write(client_id, _without_last(classes, target)):
                    return False
                event = PreviewRemoved(client_id=client_id, class_name=target)
                logger.debug("Removed preview %r from block %s", target, client_id)
        self._emit(event)
        return True

    # --- authoritative edits --------------------------------------------------------

    def select(self, client_id: str, class_name: str) -> bool:
        """Commit *class_name* to the block's class list.

        A preview of the same class is promoted in place; a preview of a
        different class is dropped. The class is protected from removal for
        ``config.commit_grace`` seconds and is then remembered as permanent.
        """
        if not client_id or not class_name:
            return False
        with self._lock:
            state = self.state_for(client_id)
            state.debouncer.cancel()
            self._begin_commit(state, class_name)

            classes = self._read(client_id)
            if classes is None:
                return False

            original = list(classes)
            previous = state.preview_class
            if previous is not None and previous != class_name and previous in classes:
                classes = _without_last(classes, previous)
            state.preview_class = None
            if class_name not in classes:
                classes.append(class_name)

            if classes != original and not self._write(client_id, classes):
                return False
            if class_name not in state.permanent:
                state.permanent.append(class_name)
            logger.debug("Committed %r to block %s", class_name, client_id)
        self._emit(ClassCommitted(client_id=client_id, class_name=class_name))
        return True

    def _begin_commit(self, state: BlockPreviewState, class_name: str) -> None:
        if state.grace_handle is not None:
            state.grace_handle.cancel()
        state.committing = class_name
        client_id = state.client_id
        state.grace_handle = self._scheduler.call_later(
            self.config.commit_grace, lambda: self._end_commit(client_id, class_name)
        )

    def _end_commit(self, client_id: str, class_name: str) -> None:
        with self._lock:
            state = self._states.get(client_id)
            if state is not None and state.committing == class_name:
                state.committing = None
                state.grace_handle = None

    def remove_class(self, client_id: str, class_name: str) -> bool:
        """Remove *class_name* from the block, committed or not."""
        if not client_id or not class_name:
            return False
        with self._lock:
            state = self.state_for(client_id)
            classes = self._read(client_id)
            if classes is None:
                return False
            if class_name in state.permanent:
                state.permanent.remove(class_name)
            if state.committing == class_name:
                if state.grace_handle is not None:
                    state.grace_handle.cancel()
                state.committing = None
                state.grace_handle = None
            if state.preview_class == class_name:
                state.preview_class = None
            if class_name not in classes:
                return True
            if not self._write(client_id, [c for c in classes if c != class_name]):
                return False
        self._emit(ClassRemoved(client_id=client_id, class_name=class_name))
        return True

    def reorder(self, client_id: str, source: int, destination: int) -> bool:
        """Move a committed class from *source* to *destination*.

        Indexes refer to :meth:`committed_classes`; a live preview stays last.
        """
        with self._lock:
            state = self.state_for(client_id)
            classes = self._read(client_id)
            if classes is None:
                return False
            preview = state.preview_class if state.preview_class in classes else None
            committed = _without_last(classes, preview) if preview else classes
            reordered = reorder_classes(committed, source, destination)
            if reordered == committed:
                return True
            if not self._write(client_id, reordered + ([preview] if preview else [])):
                return False
        self._emit(ClassesReordered(client_id=client_id, classes=tuple(reordered)))
        return True

    def protect_block(self, client_id: str) -> Callable[[], None]:
        """Re-add committed classes whenever another writer drops them.

        Returns a function that stops the protection.
        """

        def on_change(changed_id: str) -> None:
            if changed_id != client_id:
                return
            with self._lock:
                state = self._states.get(client_id)
                if state is None or not state.permanent:
                    return
                classes = self._read(client_id)
                if classes is None:
                    return
                missing = [c for c in state.permanent if c not in classes]
                if missing:
                    logger.debug("Re-adding %s to block %s", ", ".join(missing), client_id)
                    self._write(client_id, classes + missing)

        return self.store.subscribe(on_change)
