"""Block editor side: attribute store, timers, preview synchronizer and panel."""

from classmanager.editor.panel import ClassManagerPanel
from classmanager.editor.preview import (
    BlockPreviewState,
    PreviewStatus,
    PreviewSynchronizer,
    reorder_classes,
)
from classmanager.editor.scheduler import (
    Debouncer,
    ManualScheduler,
    Scheduler,
    ThreadingScheduler,
)
from classmanager.editor.store import Block, BlockStore, join_classes, split_classes

__all__ = [
    "Block",
    "BlockPreviewState",
    "BlockStore",
    "ClassManagerPanel",
    "Debouncer",
    "ManualScheduler",
    "PreviewStatus",
    "PreviewSynchronizer",
    "Scheduler",
    "ThreadingScheduler",
    "join_classes",
    "reorder_classes",
    "split_classes",
]
