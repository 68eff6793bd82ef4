"""Event types emitted by the stylesheet pipeline and the preview synchronizer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StylesheetSaved:
    output_dir: str
    size: int
    class_count: int


@dataclass(frozen=True)
class StylesheetSaveFailed:
    output_dir: str
    error: str


@dataclass(frozen=True)
class PreviewApplied:
    client_id: str
    class_name: str


@dataclass(frozen=True)
class PreviewRemoved:
    client_id: str
    class_name: str


@dataclass(frozen=True)
class ClassCommitted:
    client_id: str
    class_name: str


@dataclass(frozen=True)
class ClassRemoved:
    client_id: str
    class_name: str


@dataclass(frozen=True)
class ClassesReordered:
    client_id: str
    classes: tuple[str, ...]
