from __future__ import annotations


class ChecklistError(Exception):
    """Base class for all errors raised by the checklist core."""


# PUBLIC_INTERFACE
class ValidationError(ChecklistError):
    """
    A required field was empty.

    Recovered locally by the caller: the dialog stays open, the draft keeps
    its rejection marker and the list is left untouched.
    """

    def __init__(self, field: str, message: str = "required") -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PersistenceError(ChecklistError):
    """The key-value store failed to read or write."""


class ItemNotFoundError(ChecklistError):
    """No item with the given id exists in the current list."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id


class DialogStateError(ChecklistError):
    """A dialog event arrived while the dialog was in the wrong state."""


class ClipboardError(ChecklistError):
    """The clipboard service refused the copy. Surfaced as a soft notification only."""
