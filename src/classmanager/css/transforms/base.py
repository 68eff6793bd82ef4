"""Base protocol for stylesheet transforms."""

from __future__ import annotations

from typing import Protocol

from classmanager.css.model import Stylesheet


class Transform(Protocol):
    """A stylesheet-to-stylesheet transformation step."""

    def apply(self, stylesheet: Stylesheet) -> Stylesheet: ...
