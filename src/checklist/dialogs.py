from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

import structlog

from .errors import DialogStateError, ItemNotFoundError, ValidationError
from .models import DialogAction, DialogState, Item
from .store import ListStore

logger = structlog.get_logger(__name__)

REQUIRED = "required"


@dataclass
class Draft:
    """
    Transient form state of an open dialog.

    - value: current input text
    - error: rejection marker shown next to the input, or None
    """

    value: str = ""
    error: Optional[str] = None

    def reset(self, value: str = "") -> None:
        self.value = value
        self.error = None


# PUBLIC_INTERFACE
class ItemDialog:
    """
    Modal add/update form.

    States: CLOSED -> OPEN_FOR_ADD -> CLOSED and
    CLOSED -> OPEN_FOR_UPDATE(target) -> CLOSED. A rejected accept keeps the
    dialog open with the draft marked as required.
    """

    def __init__(self, store: ListStore, on_change: Optional[Callable[[], None]] = None) -> None:
        self._store = store
        self._on_change = on_change
        self.state = DialogState.CLOSED
        self.target: Optional[Item] = None
        self.draft = Draft()

    @property
    def is_open(self) -> bool:
        return self.state is not DialogState.CLOSED

    @property
    def action(self) -> Optional[DialogAction]:
        if self.state is DialogState.OPEN_FOR_ADD:
            return DialogAction.ADD
        if self.state is DialogState.OPEN_FOR_UPDATE:
            return DialogAction.UPDATE
        return None

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def open_for_add(self) -> None:
        self.state = DialogState.OPEN_FOR_ADD
        self.target = None
        self.draft.reset()
        self._changed()

    def open_for_update(self, item: Item) -> None:
        """Open pre-filled with the current name of item."""
        self._store.index_of(item)
        self.state = DialogState.OPEN_FOR_UPDATE
        self.target = item
        self.draft.reset(item.name)
        self._changed()

    def accept(self, value: Optional[str] = None) -> Item:
        """
        Commit the draft (or value, when given) to the store and close.

        Raises:
            DialogStateError: the dialog is closed.
            ValidationError: the input is empty; the dialog stays open.
            ItemNotFoundError: the update target was removed meanwhile; the dialog closes.
        """
        if not self.is_open:
            raise DialogStateError("dialog is not open")
        if value is not None:
            self.draft.value = value

        if self.draft.value == "":
            self.draft.error = REQUIRED
            logger.info("dialog_rejected", action=self.action.value if self.action else None)
            self._changed()
            raise ValidationError("name", REQUIRED)

        try:
            if self.state is DialogState.OPEN_FOR_ADD:
                item = self._store.add(self.draft.value)
            else:
                if self.target is None:
                    raise DialogStateError("update dialog has no target")
                item = self.target
                self._store.update(item, self.draft.value)
        except ItemNotFoundError:
            self.cancel()
            raise

        self._close()
        return item

    def cancel(self) -> None:
        """Close unconditionally, discarding the draft."""
        self._close()

    def _close(self) -> None:
        self.state = DialogState.CLOSED
        self.target = None
        self.draft.reset()
        self._changed()


# PUBLIC_INTERFACE
class ImportDialog:
    """
    Modal bulk-import form: one item per line, replacing the whole list.
    """

    def __init__(self, store: ListStore, on_change: Optional[Callable[[], None]] = None) -> None:
        self._store = store
        self._on_change = on_change
        self.is_open = False
        self.draft = Draft()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()

    def open(self) -> None:
        self.is_open = True
        self.draft.reset()
        self._changed()

    def accept(self, text: Optional[str] = None) -> List[Item]:
        """
        Replace the list with one unchecked item per line of text.

        Lines are split on '\\n' only and kept verbatim, blank lines included.

        Raises:
            DialogStateError: the dialog is closed.
            ValidationError: the text is empty; the dialog stays open.
        """
        if not self.is_open:
            raise DialogStateError("import dialog is not open")
        if text is not None:
            self.draft.value = text

        if self.draft.value == "":
            self.draft.error = REQUIRED
            logger.info("import_rejected")
            self._changed()
            raise ValidationError("text", REQUIRED)

        items = self._store.replace_all(self.draft.value.split("\n"))
        logger.info("list_imported", count=len(items))
        self.cancel()
        return items

    def cancel(self) -> None:
        self.is_open = False
        self.draft.reset()
        self._changed()
