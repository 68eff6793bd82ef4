"""classmanager: custom CSS classes for the block editor."""
from __future__ import annotations

__version__ = "1.0.0"

from classmanager.config import ClassManagerConfig
from classmanager.pipeline import CSSProcessor

__all__ = [
    "__version__",
    "ClassManagerConfig",
    "CSSProcessor",
]
