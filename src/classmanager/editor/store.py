"""In-memory block attribute store shared by everything editing a block."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable


def split_classes(class_name: str | None) -> list[str]:
    """Split a space-delimited ``className`` value into tokens."""
    return class_name.split() if class_name else []


def join_classes(classes: Iterable[str]) -> str:
    return " ".join(classes)


@dataclass
class Block:
    """One block instance: its client id, block type and attributes."""

    client_id: str
    name: str = "core/paragraph"
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def class_name(self) -> str:
        return self.attributes.get("className") or ""


class BlockStore:
    """Thread-safe store of block attributes.

    Reads return copies, so callers always read-before-write instead of
    mutating shared state. Subscribers are called with the client id after
    every successful update, outside the store lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._blocks: dict[str, Block] = {}
        self._subscribers: list[Callable[[str], None]] = []

    # --- blocks -----------------------------------------------------------------

    def insert_block(
        self,
        client_id: str,
        name: str = "core/paragraph",
        attributes: dict[str, Any] | None = None,
    ) -> Block:
        block = Block(client_id=client_id, name=name, attributes=dict(attributes or {}))
        with self._lock:
            self._blocks[client_id] = block
        return copy.deepcopy(block)

    def get_block(self, client_id: str) -> Block | None:
        """Return a copy of the block, or None if it does not exist."""
        with self._lock:
            block = self._blocks.get(client_id)
            return copy.deepcopy(block) if block is not None else None

    def remove_block(self, client_id: str) -> bool:
        with self._lock:
            return self._blocks.pop(client_id, None) is not None

    def update_block_attributes(self, client_id: str, attributes: dict[str, Any]) -> bool:
        """Merge *attributes* into the block; False if the block is gone."""
        with self._lock:
            block = self._blocks.get(client_id)
            if block is None:
                return False
            block.attributes.update(attributes)
            subscribers = list(self._subscribers)
        for callback in subscribers:
            callback(client_id)
        return True

    # --- subscriptions ------------------------------------------------------------

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def __contains__(self, client_id: str) -> bool:
        with self._lock:
            return client_id in self._blocks

    def __repr__(self) -> str:
        with self._lock:
            return f"BlockStore(blocks={list(self._blocks.keys())})"
