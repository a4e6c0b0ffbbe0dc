from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


def new_item_id() -> str:
    return uuid.uuid4().hex[:12]


# PUBLIC_INTERFACE
@dataclass(eq=False)
class Item:
    """
    A single list entry.

    Items are compared by identity, never by value: two items may share the
    same name and still be distinct entries. The `id` only exists in memory so
    that HTTP clients can address an item; it is not part of the stored blob.

    Fields:
    - name: Display text (non-empty when committed through a dialog)
    - checked: Checkbox state
    - id: In-memory identifier, regenerated on every load
    """

    name: str
    checked: bool = False
    id: str = field(default_factory=new_item_id)

    def to_stored(self) -> Dict[str, Any]:
        """Return the persisted representation: only name and checked."""
        return {"name": self.name, "checked": self.checked}


class DialogAction(str, Enum):
    ADD = "add"
    UPDATE = "update"


class DialogState(str, Enum):
    CLOSED = "closed"
    OPEN_FOR_ADD = "open_for_add"
    OPEN_FOR_UPDATE = "open_for_update"
