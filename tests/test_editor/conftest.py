from __future__ import annotations

import pytest

from classmanager.config import ClassManagerConfig
from classmanager.editor import BlockStore, ManualScheduler, PreviewSynchronizer
from classmanager.events import EventBus


@pytest.fixture
def store():
    """A store holding one paragraph block with class ``foo``."""
    block_store = BlockStore()
    block_store.insert_block("b1", attributes={"className": "foo"})
    return block_store


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def config():
    return ClassManagerConfig(preview_debounce=0.05, commit_grace=0.5)


@pytest.fixture
def sync(store, scheduler, config, bus):
    return PreviewSynchronizer(store, scheduler=scheduler, config=config, event_bus=bus)

