import pytest

from checklist.dialogs import REQUIRED, ImportDialog, ItemDialog
from checklist.errors import DialogStateError, ItemNotFoundError, ValidationError
from checklist.models import DialogAction, DialogState
from checklist.storage import SQLiteKeyValueStore
from checklist.store import ListStore

from .helpers import names


@pytest.fixture
def dialog(store):
    return ItemDialog(store)


@pytest.fixture
def import_dialog(store):
    return ImportDialog(store)


class TestItemDialog:
    def test_starts_closed(self, dialog):
        assert dialog.state is DialogState.CLOSED
        assert dialog.action is None
        assert dialog.is_open is False

    def test_open_for_add_clears_draft(self, dialog):
        dialog.draft.value = "leftover"
        dialog.open_for_add()
        assert dialog.state is DialogState.OPEN_FOR_ADD
        assert dialog.action is DialogAction.ADD
        assert dialog.draft.value == ""

    def test_accept_add(self, dialog, store):
        dialog.open_for_add()
        item = dialog.accept("f")
        assert store.items[-1] is item
        assert item.checked is False
        assert dialog.state is DialogState.CLOSED
        assert dialog.draft.value == ""

    def test_open_for_update_prefills(self, dialog, store):
        target = store.items[1]
        dialog.open_for_update(target)
        assert dialog.state is DialogState.OPEN_FOR_UPDATE
        assert dialog.action is DialogAction.UPDATE
        assert dialog.target is target
        assert dialog.draft.value == "b"

    def test_accept_update_renames_in_place(self, dialog, store):
        target = store.items[1]
        dialog.open_for_update(target)
        dialog.draft.value = "bee"
        assert dialog.accept() is target
        assert names(store) == ["a", "bee", "c", "d", "e"]
        assert dialog.target is None
        assert dialog.state is DialogState.CLOSED

    def test_empty_accept_stays_open_with_marker(self, dialog, store, storage):
        dialog.open_for_add()
        with pytest.raises(ValidationError) as exc:
            dialog.accept("")
        assert exc.value.field == "name"
        assert dialog.state is DialogState.OPEN_FOR_ADD
        assert dialog.draft.error == REQUIRED
        assert len(store) == 5
        assert storage.writes == 0

    def test_marker_cleared_after_success(self, dialog):
        dialog.open_for_add()
        with pytest.raises(ValidationError):
            dialog.accept("")
        dialog.accept("ok")
        assert dialog.draft.error is None

    def test_empty_update_leaves_name(self, dialog, store):
        target = store.items[0]
        dialog.open_for_update(target)
        with pytest.raises(ValidationError):
            dialog.accept("")
        assert target.name == "a"
        assert dialog.state is DialogState.OPEN_FOR_UPDATE

    def test_cancel_discards_even_invalid_draft(self, dialog, store):
        dialog.open_for_add()
        with pytest.raises(ValidationError):
            dialog.accept("")
        dialog.cancel()
        assert dialog.state is DialogState.CLOSED
        assert dialog.draft.error is None
        assert len(store) == 5

    def test_accept_when_closed(self, dialog):
        with pytest.raises(DialogStateError):
            dialog.accept("x")

    def test_update_target_removed_meanwhile(self, dialog, store):
        target = store.items[0]
        dialog.open_for_update(target)
        store.remove(target)
        with pytest.raises(ItemNotFoundError):
            dialog.accept("x")
        assert dialog.state is DialogState.CLOSED

    def test_transitions_signal_change(self, store):
        calls = []
        dialog = ItemDialog(store, on_change=lambda: calls.append(1))
        dialog.open_for_add()
        dialog.accept("x")
        dialog.open_for_update(store.items[0])
        dialog.cancel()
        assert len(calls) == 4


class TestImportDialog:
    def test_open_and_accept_replaces_list(self, import_dialog, store):
        import_dialog.open()
        items = import_dialog.accept("a\nb\nc")
        assert [(i.name, i.checked) for i in store.items] == [("a", False), ("b", False), ("c", False)]
        assert list(store.items) == items
        assert import_dialog.is_open is False

    def test_blank_lines_become_items(self, import_dialog, store):
        import_dialog.open()
        import_dialog.accept("x\n\n y \n")
        assert names(store) == ["x", "", " y ", ""]

    def test_empty_text_rejected(self, import_dialog, store, storage):
        import_dialog.open()
        with pytest.raises(ValidationError) as exc:
            import_dialog.accept("")
        assert exc.value.field == "text"
        assert import_dialog.is_open is True
        assert import_dialog.draft.error == REQUIRED
        assert len(store) == 5
        assert storage.writes == 0

    def test_single_newline_is_not_empty(self, import_dialog, store):
        import_dialog.open()
        import_dialog.accept("\n")
        assert names(store) == ["", ""]

    def test_accept_when_closed(self, import_dialog):
        with pytest.raises(DialogStateError):
            import_dialog.accept("a")

    def test_cancel(self, import_dialog, store):
        import_dialog.open()
        import_dialog.draft.value = "zzz"
        import_dialog.cancel()
        assert import_dialog.is_open is False
        assert import_dialog.draft.value == ""
        assert len(store) == 5


class TestDialogsOverFailingBackend:
    def test_add_closes_after_failed_write(self, tmp_path):
        store = ListStore(SQLiteKeyValueStore(str(tmp_path / "kv.db")))
        dialog = ItemDialog(store)
        dialog.open_for_add()
        item = dialog.accept("x\ud800")
        assert store.items[-1] is item
        assert store.dirty is True
        assert dialog.state is DialogState.CLOSED
        assert len(store) == 2

    def test_import_closes_after_failed_write(self, tmp_path):
        store = ListStore(SQLiteKeyValueStore(str(tmp_path / "kv.db")))
        dialog = ImportDialog(store)
        dialog.open()
        dialog.accept("ok\nbad\ud800")
        assert names(store) == ["ok", "bad\ud800"]
        assert store.dirty is True
        assert dialog.is_open is False

    def test_update_without_target_is_a_state_error(self, store):
        dialog = ItemDialog(store)
        dialog.open_for_update(store.items[0])
        dialog.target = None
        with pytest.raises(DialogStateError):
            dialog.accept("x")
