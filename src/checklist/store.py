from __future__ import annotations

import json
from threading import RLock
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple

import structlog
from pydantic import ValidationError as SchemaError

from .errors import ItemNotFoundError, PersistenceError, ValidationError
from .models import Item
from .schemas import StoredList
from .settings import DEFAULT_ITEM_NAME
from .storage import KeyValueStore

if TYPE_CHECKING:
    from .selection import SelectionTracker

logger = structlog.get_logger(__name__)

Listener = Callable[[str], None]


def dumps(items: Iterable[Item]) -> str:
    """Serialize items the way JSON.stringify would: compact, non-ASCII kept."""
    return json.dumps([item.to_stored() for item in items], separators=(",", ":"), ensure_ascii=False)


def loads(raw: str) -> List[Item]:
    """
    Parse a stored blob into fresh Items.

    Raises:
        pydantic.ValidationError if the blob is not valid JSON or does not
        have the [{name, checked}, ...] shape.
    """
    return [Item(name=s.name, checked=s.checked) for s in StoredList.validate_json(raw)]


# PUBLIC_INTERFACE
class ListStore:
    """
    Owns the ordered collection of items and mediates every mutation.

    Each mutation that changes the list writes the full serialized list to the
    key-value store and then emits a render signal to subscribers. A failed
    write is logged and leaves the in-memory list authoritative; the next
    mutation writes the whole snapshot again.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        key: str = "todos",
        default_item_name: str = DEFAULT_ITEM_NAME,
        selection: Optional["SelectionTracker"] = None,
    ) -> None:
        self._lock = RLock()
        self._storage = storage
        self._key = key
        self._default_item_name = default_item_name
        self._listeners: List[Listener] = []
        self._items: List[Item] = []
        self.selection = selection
        self.dirty = False
        self.load()

    # Read access

    @property
    def items(self) -> Tuple[Item, ...]:
        """Read-only snapshot of the current items in display order."""
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def get(self, item_id: str) -> Item:
        """Return the item with the given in-memory id, or raise ItemNotFoundError."""
        with self._lock:
            for item in self._items:
                if item.id == item_id:
                    return item
        raise ItemNotFoundError(item_id)

    def index_of(self, item: Item) -> int:
        """Position of item by identity, or raise ItemNotFoundError."""
        with self._lock:
            for i, candidate in enumerate(self._items):
                if candidate is item:
                    return i
        raise ItemNotFoundError(item.id)

    def serialize(self) -> str:
        with self._lock:
            return dumps(self._items)

    def serialize_for_clipboard(self) -> str:
        """Newline-joined item names in current order, regardless of checked state."""
        with self._lock:
            return "\n".join(item.name for item in self._items)

    # Render signal

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with the event name after each mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _default_list(self) -> List[Item]:
        return [Item(name=self._default_item_name, checked=False)]

    # Persistence

    def load(self) -> List[Item]:
        """
        Replace the in-memory list with the stored one and return it.

        Never raises: an absent key, a malformed blob or a backend read
        failure all fall back to the single default item.
        """
        try:
            raw = self._storage.get(self._key)
        except PersistenceError as e:
            logger.warning("list_load_failed", key=self._key, error=str(e))
            raw = None

        if raw is None:
            logger.info("list_seeded", key=self._key)
            items = self._default_list()
        else:
            try:
                items = loads(raw)
            except SchemaError as e:
                logger.warning("list_malformed", key=self._key, errors=e.error_count())
                items = self._default_list()
            else:
                logger.info("list_loaded", key=self._key, count=len(items))

        with self._lock:
            self._items = items
            if self.selection is not None:
                self.selection.clear()
        return list(items)

    def _commit(self, event: str, **context) -> None:
        try:
            self._storage.set(self._key, dumps(self._items))
        except PersistenceError as e:
            self.dirty = True
            logger.warning("list_persist_failed", op=event, key=self._key, error=str(e))
        else:
            self.dirty = False
        logger.debug("list_mutated", op=event, count=len(self._items), **context)
        for listener in list(self._listeners):
            listener(event)

    # Mutations

    def add(self, name: str) -> Item:
        """Append a new unchecked item. Raises ValidationError for an empty name."""
        if name == "":
            raise ValidationError("name")
        item = Item(name=name, checked=False)
        with self._lock:
            self._items.append(item)
            self._commit("add", item_id=item.id)
        return item

    def update(self, item: Item, new_name: str) -> None:
        """Rename item in place, keeping its identity. Raises ValidationError for an empty name."""
        if new_name == "":
            raise ValidationError("name")
        with self._lock:
            self.index_of(item)
            item.name = new_name
            self._commit("update", item_id=item.id)

    def toggle(self, item: Item) -> None:
        with self._lock:
            self.index_of(item)
            item.checked = not item.checked
            self._commit("toggle", item_id=item.id, checked=item.checked)

    def move_up(self, item: Item) -> bool:
        """
        Swap item with its predecessor. Returns False (and writes nothing)
        when item is already first.
        """
        with self._lock:
            index = self.index_of(item)
            if index == 0:
                return False
            self._swap(index, index - 1)
            self._commit("move_up", item_id=item.id, index=index - 1)
            return True

    def move_down(self, item: Item) -> bool:
        """
        Swap item with its immediate successor. Returns False (and writes
        nothing) when item is already last.
        """
        with self._lock:
            index = self.index_of(item)
            if index == len(self._items) - 1:
                return False
            self._swap(index, index + 1)
            self._commit("move_down", item_id=item.id, index=index + 1)
            return True

    def _swap(self, i: int, j: int) -> None:
        self._items[i], self._items[j] = self._items[j], self._items[i]

    def remove(self, item: Item) -> None:
        """Remove item by identity and clear the selection if it pointed at it."""
        with self._lock:
            index = self.index_of(item)
            del self._items[index]
            if self.selection is not None:
                self.selection.clear_if_matches(item)
            self._commit("remove", item_id=item.id)

    def uncheck_all(self) -> None:
        """Set checked=False on every item with a single write."""
        with self._lock:
            for item in self._items:
                item.checked = False
            self._commit("uncheck_all")

    def replace_all(self, names: Sequence[str]) -> List[Item]:
        """
        Discard the current list and create one unchecked item per name, in
        order. Names are taken literally, empty strings included.
        """
        items = [Item(name=name, checked=False) for name in names]
        with self._lock:
            self._items = items
            if self.selection is not None:
                self.selection.clear()
            self._commit("replace_all")
        return list(items)
