"""CSSProcessor: turns saved author CSS into the derived stylesheet files."""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from pathlib import Path

from classmanager.config import ClassManagerConfig
from classmanager.css import (
    class_name_feed,
    extract_root_variables,
    generate_editor_safe_css,
    minify_css,
    parse_stylesheet,
    remove_root_variables,
)
from classmanager.errors import StylesheetWriteError
from classmanager.events import EventBus, StylesheetSaved, StylesheetSaveFailed
from classmanager.pipeline.atomic import write_atomically

logger = logging.getLogger(__name__)

CUSTOM_CSS = "custom-classes.css"
CUSTOM_CSS_MIN = "custom-classes.min.css"
ROOT_VARS_CSS = "root-vars.css"
EDITOR_SAFE_CSS = "editor-safe-classes.css"

DEFAULT_CSS = (
    "/* Add your custom classes here */\n\n"
    ".p-l {\n    padding: 1rem;\n}\n\n"
    ".p-xl {\n    padding: 3rem;\n}\n\n"
    ".bg-red {\n    background-color: red;\n}\n\n"
    ".text-white {\n    color: white;\n}\n"
)

# One lock per output directory; saves to the same files never interleave.
_DIR_LOCKS: dict[str, threading.Lock] = {}
_DIR_LOCKS_GUARD = threading.Lock()


def _lock_for(directory: Path) -> threading.Lock:
    key = str(directory.resolve())
    with _DIR_LOCKS_GUARD:
        return _DIR_LOCKS.setdefault(key, threading.Lock())


def format_file_size(size: int) -> str:
    """Format a byte count as ``B``, ``KB`` or ``MB`` with two decimals."""
    units = ("B", "KB", "MB")
    power = min(int(math.floor(math.log(size, 1024))), len(units) - 1) if size > 0 else 0
    return f"{size / 1024 ** power:,.2f} {units[power]}"


@dataclass(frozen=True)
class CSSPaths:
    """Locations of the stylesheet files inside the output directory."""

    output_dir: Path

    @property
    def custom_css(self) -> Path:
        return self.output_dir / CUSTOM_CSS

    @property
    def custom_css_min(self) -> Path:
        return self.output_dir / CUSTOM_CSS_MIN

    @property
    def root_vars(self) -> Path:
        return self.output_dir / ROOT_VARS_CSS

    @property
    def editor_css(self) -> Path:
        return self.output_dir / EDITOR_SAFE_CSS


@dataclass(frozen=True)
class CSSArtifacts:
    """The raw stylesheet and the three stylesheets derived from it."""

    raw: str
    minified: str
    root_vars: str
    editor_safe: str


@dataclass(frozen=True)
class FileInfo:
    """Sizes of the stored stylesheet files."""

    original_size: int
    minified_size: int
    root_vars_size: int

    @property
    def savings(self) -> int:
        return self.original_size - self.minified_size

    @property
    def percent_reduction(self) -> float:
        if self.original_size <= 0:
            return 0.0
        return round(self.savings / self.original_size * 100, 1)

    @property
    def is_smaller(self) -> bool:
        return self.minified_size < self.original_size

    def to_dict(self) -> dict:
        return {
            "original_size": self.original_size,
            "minified_size": self.minified_size,
            "root_vars_size": self.root_vars_size,
            "savings": self.savings,
            "percent_reduction": self.percent_reduction,
            "original": format_file_size(self.original_size),
            "minified": format_file_size(self.minified_size),
            "root_vars": format_file_size(self.root_vars_size),
        }


def build_artifacts(css: str) -> CSSArtifacts:
    """Derive every stylesheet from *css* without touching the filesystem.

    The minified stylesheet excludes the ``:root`` block, which is served
    separately as the root-variables stylesheet.
    """
    return CSSArtifacts(
        raw=css,
        minified=minify_css(remove_root_variables(css)),
        root_vars=extract_root_variables(css),
        editor_safe=generate_editor_safe_css(css),
    )


class CSSProcessor:
    """Persists author CSS and its derived stylesheets to ``config.output_dir``."""

    def __init__(
        self,
        config: ClassManagerConfig | None = None,
        *,
        event_bus: EventBus | None = None,
    ) -> None:
        self.config = config or ClassManagerConfig()
        self._event_bus = event_bus or EventBus()

    @property
    def paths(self) -> CSSPaths:
        return CSSPaths(Path(self.config.output_dir))

    def process_css(self, css: str) -> bool:
        """Save *css* and regenerate the derived files.

        Returns False for empty input or when any file cannot be written; in
        that case the files from the previous save are left as they were.
        """
        if not css or not css.strip():
            logger.warning("Refusing to save an empty stylesheet")
            return False

        artifacts = build_artifacts(css)
        paths = self.paths
        files = {
            paths.custom_css: artifacts.raw,
            paths.custom_css_min: artifacts.minified,
            paths.root_vars: artifacts.root_vars,
            paths.editor_css: artifacts.editor_safe,
        }

        with _lock_for(paths.output_dir):
            try:
                write_atomically(files)
            except StylesheetWriteError as exc:
                logger.exception("Failed to save stylesheets to %s", paths.output_dir)
                self._event_bus.emit(
                    StylesheetSaveFailed(output_dir=str(paths.output_dir), error=str(exc))
                )
                return False

        class_count = len(class_name_feed(css))
        logger.info(
            "Saved stylesheets to %s (%d bytes, %d classes)",
            paths.output_dir,
            len(css),
            class_count,
        )
        logger.debug("Root variables: %.200s", artifacts.root_vars)
        logger.debug("Editor CSS: %.500s", artifacts.editor_safe)
        self._event_bus.emit(
            StylesheetSaved(output_dir=str(paths.output_dir), size=len(css), class_count=class_count)
        )
        return True

    def load_css(self) -> str:
        """Return the stored author CSS, or the starter stylesheet.

        When the stored CSS has no ``:root`` block but a root-variables file
        exists, the variables are put back on top for editing.
        """
        paths = self.paths
        if not paths.custom_css.exists():
            return DEFAULT_CSS

        css = paths.custom_css.read_text(encoding="utf-8")
        if parse_stylesheet(css).first_root() is None and paths.root_vars.exists():
            root_vars = paths.root_vars.read_text(encoding="utf-8")
            if root_vars.strip():
                css = root_vars + "\n\n" + css
        return css

    def available_classes(self) -> list[str]:
        """Return the sorted class names of the stored (or starter) CSS."""
        return class_name_feed(self.load_css())

    def file_info(self) -> FileInfo | None:
        """Return file sizes, or None until both raw and minified files exist."""
        paths = self.paths
        if not (paths.custom_css.exists() and paths.custom_css_min.exists()):
            return None
        root_vars_size = paths.root_vars.stat().st_size if paths.root_vars.exists() else 0
        return FileInfo(
            original_size=paths.custom_css.stat().st_size,
            minified_size=paths.custom_css_min.stat().st_size,
            root_vars_size=root_vars_size,
        )
