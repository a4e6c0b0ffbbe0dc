import os

import pytest

# Default to the memory backend so importing the app never touches the filesystem
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from checklist.selection import SelectionTracker  # noqa: E402
from checklist.settings import Settings  # noqa: E402
from checklist.store import ListStore  # noqa: E402

from .helpers import FailingKeyValueStore, seeded  # noqa: E402


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def storage():
    return seeded("a", "b", "c", "d", "e")


@pytest.fixture
def selection():
    return SelectionTracker()


@pytest.fixture
def store(storage, selection):
    return ListStore(storage, selection=selection)


@pytest.fixture
def failing_storage():
    return FailingKeyValueStore()
