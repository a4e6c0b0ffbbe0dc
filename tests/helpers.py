from checklist.errors import PersistenceError
from checklist.models import Item
from checklist.storage import InMemoryKeyValueStore
from checklist.store import dumps


class FailingKeyValueStore(InMemoryKeyValueStore):
    """In-memory store whose reads/writes can be made to fail on demand."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False

    def get(self, key):
        if self.fail_reads:
            raise PersistenceError("read failed")
        return super().get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise PersistenceError("write failed")
        super().set(key, value)


def seeded(*names, checked=()):
    """Return an in-memory store already holding the given names."""
    items = [Item(name=n, checked=n in checked) for n in names]
    return InMemoryKeyValueStore({"todos": dumps(items)})


def names(store):
    return [item.name for item in store.items]
