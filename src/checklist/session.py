from __future__ import annotations

from threading import RLock
from typing import Callable, List, Optional, Protocol, Tuple, Union

import structlog

from .dialogs import ImportDialog, ItemDialog
from .errors import ClipboardError
from .models import Item
from .selection import SelectionTracker
from .settings import Settings, get_settings
from .storage import KeyValueStore
from .store import ListStore

logger = structlog.get_logger(__name__)

ConfirmPrompt = Callable[[str], bool]
Notifier = Callable[[str], None]

DELETE_PROMPT = "are you sure to delete this todo ?"
COPIED_MESSAGE = "copied to clipboard"
COPY_FAILED_MESSAGE = "could not copy to clipboard"


class ClipboardService(Protocol):
    def copy(self, text: str) -> None:
        """Place text on the clipboard. Raise ClipboardError on failure."""


class BufferClipboard:
    """Clipboard that keeps the last copied text; the client reads it back from the response."""

    def __init__(self) -> None:
        self.text: Optional[str] = None

    def copy(self, text: str) -> None:
        self.text = text


# PUBLIC_INTERFACE
class ListSession:
    """
    One list-management session: the list store, its selection and the two
    modal dialogs, plus the external collaborators they talk to.

    UI events are applied one at a time under a single lock, so two
    mutations never interleave. Every render signal (list mutation,
    selection change, dialog transition) bumps `revision`.

    Items are addressed by their in-memory id; ItemNotFoundError is raised
    for an unknown id.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        settings: Optional[Settings] = None,
        clipboard: Optional[ClipboardService] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        settings = settings or get_settings()
        self._lock = RLock()
        self.revision = 0
        self.last_notification: Optional[str] = None
        self.clipboard: ClipboardService = clipboard or BufferClipboard()
        self._notifier = notifier

        self.selection = SelectionTracker()
        self.store = ListStore(
            storage,
            key=settings.storage_key,
            default_item_name=settings.default_item_name,
            selection=self.selection,
        )
        self.item_dialog = ItemDialog(self.store, on_change=self._render)
        self.import_dialog = ImportDialog(self.store, on_change=self._render)

        self.store.subscribe(lambda _event: self._render())
        self.selection.subscribe(lambda _item: self._render())

    def _render(self) -> None:
        self.revision += 1

    def notify(self, message: str) -> None:
        """Show a transient notification."""
        self.last_notification = message
        if self._notifier is not None:
            self._notifier(message)

    def snapshot(self) -> Tuple[Tuple[Item, ...], Optional[Item], int]:
        """Consistent view for rendering: (items, selected item, revision)."""
        with self._lock:
            return self.store.items, self.selection.current(), self.revision

    # Item events

    def click(self, item_id: str) -> Item:
        with self._lock:
            item = self.store.get(item_id)
            self.selection.select(item)
            return item

    def toggle(self, item_id: str) -> Item:
        with self._lock:
            item = self.store.get(item_id)
            self.store.toggle(item)
            self.selection.select(item)
            return item

    def move_up(self, item_id: str) -> bool:
        with self._lock:
            item = self.store.get(item_id)
            moved = self.store.move_up(item)
            self.selection.select(item)
            return moved

    def move_down(self, item_id: str) -> bool:
        with self._lock:
            item = self.store.get(item_id)
            moved = self.store.move_down(item)
            self.selection.select(item)
            return moved

    def request_remove(self, item_id: str, confirm: ConfirmPrompt) -> bool:
        """Remove the item if confirm(DELETE_PROMPT) agrees. Returns whether it was removed."""
        with self._lock:
            item = self.store.get(item_id)
            if not confirm(DELETE_PROMPT):
                logger.info("remove_declined", item_id=item_id)
                return False
            self.store.remove(item)
            return True

    def press_key(self, key: Union[str, int]) -> bool:
        with self._lock:
            return self.selection.handle_key(key, self.store)

    # List events

    def uncheck_all(self) -> None:
        with self._lock:
            self.store.uncheck_all()

    def copy_to_clipboard(self) -> Tuple[str, str]:
        """Copy the item names to the clipboard. Returns (text, notification)."""
        with self._lock:
            text = self.store.serialize_for_clipboard()
        try:
            self.clipboard.copy(text)
        except ClipboardError as e:
            logger.warning("clipboard_copy_failed", error=str(e))
            message = COPY_FAILED_MESSAGE
        else:
            message = COPIED_MESSAGE
        self.notify(message)
        return text, message

    # Dialog events

    def open_add(self) -> None:
        with self._lock:
            self.item_dialog.open_for_add()

    def open_update(self, item_id: str) -> None:
        with self._lock:
            self.item_dialog.open_for_update(self.store.get(item_id))

    def accept_dialog(self, value: Optional[str] = None) -> Item:
        with self._lock:
            return self.item_dialog.accept(value)

    def cancel_dialog(self) -> None:
        with self._lock:
            self.item_dialog.cancel()

    def open_import(self) -> None:
        with self._lock:
            self.import_dialog.open()

    def accept_import(self, text: Optional[str] = None) -> List[Item]:
        with self._lock:
            return self.import_dialog.accept(text)

    def cancel_import(self) -> None:
        with self._lock:
            self.import_dialog.cancel()
