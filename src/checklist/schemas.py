from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, TypeAdapter, field_validator


class StoredItem(BaseModel):
    """
    One entry of the persisted blob. Types are strict so that a blob written
    by something else (numbers for names, strings for flags) is rejected as
    malformed instead of being coerced.
    """

    model_config = ConfigDict(extra="ignore")

    name: StrictStr
    checked: StrictBool = False


StoredList = TypeAdapter(List[StoredItem])


# PUBLIC_INTERFACE
class ItemOut(BaseModel):
    """
    Schema returned by the API for a single list item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "3f2a9c01d4e5",
                "index": 0,
                "name": "my first todo (https://www.google.com)",
                "display": 'my first todo (<a href="https://www.google.com" target="_blank">https://www.google.com</a>)',
                "checked": False,
                "selected": False,
            }
        }
    )

    id: str = Field(..., description="In-memory identifier of the item (not persisted)")
    index: int = Field(..., description="Position of the item in the list")
    name: str = Field(..., description="Raw item name")
    display: str = Field(..., description="Name with URLs wrapped in hyperlink markup")
    checked: bool = Field(..., description="Checkbox state")
    selected: bool = Field(..., description="Whether this item is the current selection")


# PUBLIC_INTERFACE
class ListOut(BaseModel):
    """
    Full snapshot of the list, returned after every event so the client can
    re-render without a second request.
    """

    items: List[ItemOut] = Field(..., description="Items in display order")
    total: int = Field(..., description="Number of items")
    selected_id: Optional[str] = Field(default=None, description="Id of the selected item, if any")
    revision: int = Field(..., description="Incremented on every render signal")


class DraftOut(BaseModel):
    """
    State of a modal form.
    """

    state: str = Field(..., description="Dialog state")
    action: Optional[str] = Field(default=None, description="'add' or 'update' for the item dialog")
    target_id: Optional[str] = Field(default=None, description="Item being updated, if any")
    value: str = Field(default="", description="Current draft input")
    error: Optional[str] = Field(default=None, description="Rejection marker set by a failed accept")


def _encodable(value: str) -> str:
    """
    Reject text that cannot be stored or sent back as UTF-8, such as a JSON
    "\\ud800" escape decoding to a lone surrogate.
    """
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError("text must be valid UTF-8") from e
    return value


class NameIn(BaseModel):
    """Payload for accepting the add/update dialog. Emptiness is checked by the dialog itself."""

    model_config = ConfigDict(json_schema_extra={"example": {"value": "Buy groceries"}})

    value: str = Field(default="", description="Item name to commit")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: str) -> str:
        return _encodable(v)


class ImportIn(BaseModel):
    """Payload for accepting the import dialog: one item per line."""

    model_config = ConfigDict(json_schema_extra={"example": {"text": "milk\neggs\nbread"}})

    text: str = Field(default="", description="Raw multi-line text")

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _encodable(v)


class KeyIn(BaseModel):
    """Keyboard event forwarded by the client."""

    model_config = ConfigDict(json_schema_extra={"example": {"key": "ArrowUp"}})

    key: Union[StrictStr, int] = Field(..., description="'ArrowUp'/'ArrowDown' or key code 38/40")


class ClipboardOut(BaseModel):
    """Result of copying the list to the clipboard."""

    text: str = Field(..., description="Newline-joined item names")
    notification: str = Field(..., description="Transient message to show the user")
