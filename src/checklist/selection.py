from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional, Union

from .models import Item

if TYPE_CHECKING:
    from .store import ListStore

KEY_UP = "ArrowUp"
KEY_DOWN = "ArrowDown"

# Legacy DOM key codes
_KEY_CODES = {38: KEY_UP, 40: KEY_DOWN}


def normalize_key(key: Union[str, int]) -> Optional[str]:
    """Map a key name or legacy key code to KEY_UP/KEY_DOWN, or None for anything else."""
    if isinstance(key, int):
        return _KEY_CODES.get(key)
    if key in (KEY_UP, KEY_DOWN):
        return key
    return None


# PUBLIC_INTERFACE
class SelectionTracker:
    """
    Holds a reference to at most one item. The reference follows the item
    across reorders; its position is only resolved when rendering.
    """

    def __init__(self) -> None:
        self._current: Optional[Item] = None
        self._listeners: List[Callable[[Optional[Item]], None]] = []

    def subscribe(self, listener: Callable[[Optional[Item]], None]) -> None:
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)

    def select(self, item: Item) -> None:
        self._current = item
        self._changed()

    def current(self) -> Optional[Item]:
        return self._current

    def clear(self) -> None:
        if self._current is not None:
            self._current = None
            self._changed()

    def clear_if_matches(self, item: Item) -> bool:
        """Clear the selection only if it is item. Returns True if it was cleared."""
        if self._current is not None and self._current is item:
            self.clear()
            return True
        return False

    def handle_key(self, key: Union[str, int], store: "ListStore") -> bool:
        """
        Apply an up/down key event to the selected item.

        No-op without a selection or for other keys. The selection is
        re-asserted on the same item after the move. Returns True if the list
        order changed.
        """
        direction = normalize_key(key)
        item = self._current
        if direction is None or item is None:
            return False
        moved = store.move_up(item) if direction == KEY_UP else store.move_down(item)
        self.select(item)
        return moved
