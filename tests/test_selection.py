import pytest

from checklist.models import Item
from checklist.selection import KEY_DOWN, KEY_UP, SelectionTracker, normalize_key

from .helpers import names


class TestSelectionTracker:
    def test_starts_empty(self, selection):
        assert selection.current() is None

    def test_select_replaces_previous(self, selection):
        a, b = Item("a"), Item("b")
        selection.select(a)
        selection.select(b)
        assert selection.current() is b

    def test_clear_if_matches_only_for_same_object(self, selection):
        a = Item("same")
        twin = Item("same")
        selection.select(a)
        assert selection.clear_if_matches(twin) is False
        assert selection.current() is a
        assert selection.clear_if_matches(a) is True
        assert selection.current() is None

    def test_listeners_see_changes(self):
        tracker = SelectionTracker()
        seen = []
        tracker.subscribe(seen.append)
        a = Item("a")
        tracker.select(a)
        tracker.clear()
        tracker.clear()  # already empty, no signal
        assert seen == [a, None]


class TestKeyboard:
    @pytest.mark.parametrize("key,expected", [
        ("ArrowUp", KEY_UP),
        ("ArrowDown", KEY_DOWN),
        (38, KEY_UP),
        (40, KEY_DOWN),
        ("Enter", None),
        (13, None),
    ])
    def test_normalize_key(self, key, expected):
        assert normalize_key(key) == expected

    def test_key_moves_selected_item(self, store, selection):
        item = store.items[2]
        selection.select(item)
        assert selection.handle_key("ArrowUp", store) is True
        assert names(store) == ["a", "c", "b", "d", "e"]
        assert selection.handle_key(40, store) is True
        assert selection.handle_key(40, store) is True
        assert names(store) == ["a", "b", "d", "c", "e"]

    def test_selection_follows_item(self, store, selection):
        item = store.items[1]
        selection.select(item)
        selection.handle_key("ArrowUp", store)
        assert selection.current() is item
        assert store.index_of(item) == 0

    def test_key_at_boundary_keeps_selection(self, store, selection, storage):
        item = store.items[0]
        selection.select(item)
        assert selection.handle_key("ArrowUp", store) is False
        assert selection.current() is item
        assert storage.writes == 0

    def test_key_without_selection_is_noop(self, store, selection, storage):
        assert selection.handle_key("ArrowDown", store) is False
        assert names(store) == ["a", "b", "c", "d", "e"]
        assert storage.writes == 0

    def test_other_keys_ignored(self, store, selection):
        selection.select(store.items[1])
        assert selection.handle_key("Enter", store) is False
        assert names(store) == ["a", "b", "c", "d", "e"]

    def test_keys_after_deleting_selection_are_noops(self, store, selection):
        item = store.items[3]
        selection.select(item)
        store.remove(item)
        assert selection.handle_key("ArrowUp", store) is False
        assert names(store) == ["a", "b", "c", "e"]
