"""Per-user code editor theme preference."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from classmanager.errors import UnknownThemeError
from classmanager.pipeline.atomic import write_atomically

logger = logging.getLogger(__name__)

THEMES = {
    "default": "Light",
    "dracula": "Dark",
}
DEFAULT_THEME = "default"


class ThemePreferences:
    """Theme choices keyed by user id, stored in a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable theme preferences in %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, user_id: str | int) -> str:
        """Return the user's theme, or the default theme."""
        with self._lock:
            theme = self._load().get(str(user_id))
        return theme if theme in THEMES else DEFAULT_THEME

    def set(self, user_id: str | int, theme: str) -> str:
        """Store *theme* for the user and return it.

        Raises:
            UnknownThemeError: if *theme* is not one of ``THEMES``.
        """
        theme = (theme or "").strip()
        if theme not in THEMES:
            raise UnknownThemeError(theme)
        with self._lock:
            data = self._load()
            data[str(user_id)] = theme
            write_atomically({self.path: json.dumps(data, indent=2, sort_keys=True)})
        logger.info("Saved editor theme %r for user %s", theme, user_id)
        return theme
