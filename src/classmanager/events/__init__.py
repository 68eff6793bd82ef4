"""Event system: bus and event types for stylesheet saves and block previews."""

from classmanager.events.bus import EventBus
from classmanager.events.types import (
    ClassCommitted,
    ClassesReordered,
    ClassRemoved,
    PreviewApplied,
    PreviewRemoved,
    StylesheetSaved,
    StylesheetSaveFailed,
)

__all__ = [
    "EventBus",
    "ClassCommitted",
    "ClassesReordered",
    "ClassRemoved",
    "PreviewApplied",
    "PreviewRemoved",
    "StylesheetSaved",
    "StylesheetSaveFailed",
]
