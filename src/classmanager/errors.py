"""Error hierarchy for classmanager."""
from __future__ import annotations


class ClassManagerError(Exception):
    """Base error for all classmanager errors."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StylesheetWriteError(ClassManagerError):
    """A derived stylesheet could not be persisted."""

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.path = path


class UnknownThemeError(ClassManagerError):
    """The requested editor theme is not one of the available themes."""

    def __init__(self, theme: str) -> None:
        super().__init__(f"Unknown editor theme: {theme!r}")
        self.theme = theme
