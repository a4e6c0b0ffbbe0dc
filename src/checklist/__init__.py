"""
Checklist backend package.

An ordered, checkable list persisted to a key-value store, served over a
small FastAPI app. The core (store, selection, dialogs, link annotation) can
be used without the web layer.
"""

from .errors import ChecklistError, ItemNotFoundError, PersistenceError, ValidationError
from .models import Item
from .session import ListSession
from .store import ListStore

__all__ = [
    "ChecklistError",
    "Item",
    "ItemNotFoundError",
    "ListSession",
    "ListStore",
    "PersistenceError",
    "ValidationError",
]
