from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ..links import annotate
from ..schemas import ClipboardOut, DraftOut, ImportIn, ItemOut, KeyIn, ListOut, NameIn
from ..session import DELETE_PROMPT, ListSession

router = APIRouter(
    prefix="/api/v1/checklist",
    tags=["checklist"],
)


def get_session(request: Request) -> ListSession:
    """
    Dependency returning the session owned by the application.
    """
    return request.app.state.session


def _list_out(session: ListSession) -> ListOut:
    items, selected, revision = session.snapshot()
    return ListOut(
        items=[
            ItemOut(
                id=item.id,
                index=i,
                name=item.name,
                display=annotate(item.name),
                checked=item.checked,
                selected=selected is item,
            )
            for i, item in enumerate(items)
        ],
        total=len(items),
        selected_id=selected.id if selected is not None else None,
        revision=revision,
    )


def _item_dialog_out(session: ListSession) -> DraftOut:
    dialog = session.item_dialog
    return DraftOut(
        state=dialog.state.value,
        action=dialog.action.value if dialog.action else None,
        target_id=dialog.target.id if dialog.target is not None else None,
        value=dialog.draft.value,
        error=dialog.draft.error,
    )


def _import_dialog_out(session: ListSession) -> DraftOut:
    dialog = session.import_dialog
    return DraftOut(
        state="open" if dialog.is_open else "closed",
        value=dialog.draft.value,
        error=dialog.draft.error,
    )


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ListOut,
    summary="Get List",
    description="Return every item in display order with its rendered name and the current selection.",
)
def get_list(session: ListSession = Depends(get_session)) -> ListOut:
    """
    Snapshot of the list for rendering.
    """
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/items/{item_id}/select",
    response_model=ListOut,
    summary="Select Item",
    responses={404: {"description": "Item not found"}},
)
def select_item(item_id: str, session: ListSession = Depends(get_session)) -> ListOut:
    """
    Make the item the current selection (target of keyboard reordering).
    """
    session.click(item_id)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/items/{item_id}/toggle",
    response_model=ListOut,
    summary="Toggle Item",
    description="Flip the checked flag of the item and select it.",
    responses={404: {"description": "Item not found"}},
)
def toggle_item(item_id: str, session: ListSession = Depends(get_session)) -> ListOut:
    """
    Toggle an item's checkbox.
    """
    session.toggle(item_id)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/items/{item_id}/move-up",
    response_model=ListOut,
    summary="Move Item Up",
    description="Swap the item with its predecessor. No-op for the first item.",
    responses={404: {"description": "Item not found"}},
)
def move_item_up(item_id: str, session: ListSession = Depends(get_session)) -> ListOut:
    session.move_up(item_id)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/items/{item_id}/move-down",
    response_model=ListOut,
    summary="Move Item Down",
    description="Swap the item with its successor. No-op for the last item.",
    responses={404: {"description": "Item not found"}},
)
def move_item_down(item_id: str, session: ListSession = Depends(get_session)) -> ListOut:
    session.move_down(item_id)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.delete(
    "/items/{item_id}",
    response_model=ListOut,
    summary="Delete Item",
    description=(
        "Delete the item. The client must ask the user first and pass confirm=true; "
        "without it the list is left unchanged and 409 is returned with the prompt text."
    ),
    responses={
        404: {"description": "Item not found"},
        409: {"description": "Deletion not confirmed"},
    },
)
def delete_item(
    item_id: str,
    confirm: bool = Query(False, description="Whether the user confirmed the deletion"),
    session: ListSession = Depends(get_session),
) -> ListOut:
    """
    Delete an item after confirmation.
    """
    removed = session.request_remove(item_id, lambda _message: confirm)
    if not removed:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DELETE_PROMPT)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/keys",
    response_model=ListOut,
    summary="Keyboard Event",
    description="Forward an ArrowUp/ArrowDown key press; moves the selected item, if any.",
)
def press_key(payload: KeyIn, session: ListSession = Depends(get_session)) -> ListOut:
    session.press_key(payload.key)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post("/uncheck-all", response_model=ListOut, summary="Uncheck All")
def uncheck_all(session: ListSession = Depends(get_session)) -> ListOut:
    """
    Clear the checked flag of every item.
    """
    session.uncheck_all()
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/clipboard",
    response_model=ClipboardOut,
    summary="Copy List",
    description="Copy the newline-joined item names to the clipboard and return them with the notification text.",
)
def copy_list(session: ListSession = Depends(get_session)) -> ClipboardOut:
    text, notification = session.copy_to_clipboard()
    return ClipboardOut(text=text, notification=notification)


# PUBLIC_INTERFACE
@router.get("/dialog", response_model=DraftOut, summary="Get Item Dialog")
def get_dialog(session: ListSession = Depends(get_session)) -> DraftOut:
    return _item_dialog_out(session)


# PUBLIC_INTERFACE
@router.post("/dialog/add", response_model=DraftOut, summary="Open Add Dialog")
def open_add_dialog(session: ListSession = Depends(get_session)) -> DraftOut:
    """
    Open the dialog for a new item with an empty draft.
    """
    session.open_add()
    return _item_dialog_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/dialog/update/{item_id}",
    response_model=DraftOut,
    summary="Open Update Dialog",
    responses={404: {"description": "Item not found"}},
)
def open_update_dialog(item_id: str, session: ListSession = Depends(get_session)) -> DraftOut:
    """
    Open the dialog pre-filled with the item's current name.
    """
    session.open_update(item_id)
    return _item_dialog_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/dialog/accept",
    response_model=ListOut,
    summary="Accept Item Dialog",
    description="Commit the add/update. An empty value returns 422 and keeps the dialog open.",
    responses={
        409: {"description": "Dialog is not open"},
        422: {"description": "Validation error"},
    },
)
def accept_dialog(payload: NameIn, session: ListSession = Depends(get_session)) -> ListOut:
    session.accept_dialog(payload.value)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post("/dialog/cancel", response_model=DraftOut, summary="Cancel Item Dialog")
def cancel_dialog(session: ListSession = Depends(get_session)) -> DraftOut:
    session.cancel_dialog()
    return _item_dialog_out(session)


# PUBLIC_INTERFACE
@router.get("/import", response_model=DraftOut, summary="Get Import Dialog")
def get_import_dialog(session: ListSession = Depends(get_session)) -> DraftOut:
    return _import_dialog_out(session)


# PUBLIC_INTERFACE
@router.post("/import/open", response_model=DraftOut, summary="Open Import Dialog")
def open_import_dialog(session: ListSession = Depends(get_session)) -> DraftOut:
    session.open_import()
    return _import_dialog_out(session)


# PUBLIC_INTERFACE
@router.post(
    "/import/accept",
    response_model=ListOut,
    summary="Accept Import",
    description=(
        "Replace the whole list with one unchecked item per line of text. "
        "Blank lines become items with an empty name. Empty text returns 422."
    ),
    responses={
        409: {"description": "Import dialog is not open"},
        422: {"description": "Validation error"},
    },
)
def accept_import(payload: ImportIn, session: ListSession = Depends(get_session)) -> ListOut:
    session.accept_import(payload.text)
    return _list_out(session)


# PUBLIC_INTERFACE
@router.post("/import/cancel", response_model=DraftOut, summary="Cancel Import Dialog")
def cancel_import(session: ListSession = Depends(get_session)) -> DraftOut:
    session.cancel_import()
    return _import_dialog_out(session)
