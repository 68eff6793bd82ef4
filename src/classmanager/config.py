from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClassManagerConfig:
    output_dir: str = "lza-css"
    preferences_path: str = "classmanager-preferences.json"
    preview_debounce: float = 0.05  # seconds between keystroke and preview
    commit_grace: float = 0.5  # seconds a committed class is protected
    host: str = "127.0.0.1"
    port: int = 5000
