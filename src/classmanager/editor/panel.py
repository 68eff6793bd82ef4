"""ClassManagerPanel: suggestion input and class list for the selected block."""

from __future__ import annotations

from typing import Iterable

from classmanager.editor.preview import PreviewSynchronizer


class ClassManagerPanel:
    """Keyboard and mouse handling of the class panel for one block.

    Moving through suggestions with the arrow keys or the mouse previews the
    highlighted class (debounced); Enter, Tab or a click commits it; Escape,
    leaving the list or blurring the input discards the preview.
    """

    def __init__(
        self,
        client_id: str,
        synchronizer: PreviewSynchronizer,
        available_classes: Iterable[str] = (),
    ) -> None:
        self.client_id = client_id
        self._sync = synchronizer
        self.available_classes = sorted(set(available_classes))
        self.input_value = ""
        self.show_suggestions = False
        self.active_index = 0

    # --- derived state -------------------------------------------------------------

    @property
    def classes(self) -> list[str]:
        return self._sync.committed_classes(self.client_id)

    def _matching(self) -> list[str]:
        needle = self.input_value.lower()
        return [c for c in self.available_classes if needle in c.lower()]

    @property
    def suggestions(self) -> list[str]:
        """Suggestions currently on screen."""
        return self._matching() if self.show_suggestions else []

    @property
    def active_suggestion(self) -> str | None:
        suggestions = self.suggestions
        if 0 <= self.active_index < len(suggestions):
            return suggestions[self.active_index]
        return None

    # --- input ----------------------------------------------------------------------

    def change_input(self, value: str) -> None:
        self.input_value = value
        self.show_suggestions = bool(value)
        self.active_index = 0
        self._sync.remove_preview(self.client_id)

    def key_down(self, key: str) -> bool:
        """Handle a key press in the input; returns True if it was consumed."""
        matching = self._matching()

        if key in ("ArrowDown", "ArrowUp"):
            if not matching:
                return False
            if not self.show_suggestions:
                self.show_suggestions = True
            elif key == "ArrowDown":
                self.active_index = (self.active_index + 1) % len(matching)
            else:
                self.active_index = (self.active_index - 1) % len(matching)
            self._sync.schedule_preview(self.client_id, matching[self.active_index])
            return True

        if key == "Enter":
            active = self.active_suggestion
            if active is not None:
                return self._commit(active)
            typed = self.input_value.split()
            if not typed:
                return False
            for class_name in typed:
                self._sync.select(self.client_id, class_name)
            self._reset()
            return True

        if key == "Tab":
            active = self.active_suggestion
            return self._commit(active) if active is not None else False

        if key == "Escape":
            self.show_suggestions = False
            self._sync.remove_preview(self.client_id)
            return True

        return False

    def blur(self) -> None:
        self.show_suggestions = False
        self._sync.remove_preview(self.client_id)

    # --- mouse ------------------------------------------------------------------------

    def hover(self, suggestion: str) -> None:
        self._sync.schedule_preview(self.client_id, suggestion)

    def leave(self) -> None:
        self._sync.remove_preview(self.client_id)

    def click(self, suggestion: str) -> bool:
        return self._commit(suggestion)

    # --- class list ---------------------------------------------------------------------

    def remove(self, class_name: str) -> bool:
        return self._sync.remove_class(self.client_id, class_name)

    def move(self, source: int, destination: int) -> bool:
        return self._sync.reorder(self.client_id, source, destination)

    def _commit(self, class_name: str) -> bool:
        committed = self._sync.select(self.client_id, class_name)
        self._reset()
        return committed

    def _reset(self) -> None:
        self.input_value = ""
        self.show_suggestions = False
        self.active_index = 0
