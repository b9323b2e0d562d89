from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..dashboard import Dashboard
from ..deps import get_dashboard
from ..schemas import NoteCreate, NoteOut, NoteReorder, NoteUpdate, TagIn

router = APIRouter(
    prefix="/api/v1/notes",
    tags=["notes"],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")


# PUBLIC_INTERFACE
@router.get("/", response_model=List[NoteOut], summary="List Notes", description="Notes in display order.")
def list_notes(dashboard: Dashboard = Depends(get_dashboard)) -> List[NoteOut]:
    return [NoteOut(**n) for n in dashboard.document["notes"]]


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=NoteOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Note",
    description="Create a note at the front of the list.",
)
def create_note(payload: NoteCreate, dashboard: Dashboard = Depends(get_dashboard)) -> NoteOut:
    return NoteOut(**dashboard.add_note(payload.content, payload.color, payload.tags))


# PUBLIC_INTERFACE
@router.post(
    "/reorder",
    response_model=List[NoteOut],
    summary="Reorder Notes",
    description="Move the note at from_index to to_index. Both must address an existing note.",
    responses={400: {"description": "Position out of range"}},
)
def reorder_notes(payload: NoteReorder, dashboard: Dashboard = Depends(get_dashboard)) -> List[NoteOut]:
    try:
        notes = dashboard.reorder_notes(payload.from_index, payload.to_index)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return [NoteOut(**n) for n in notes]


# PUBLIC_INTERFACE
@router.patch(
    "/{note_id}",
    response_model=NoteOut,
    summary="Update Note",
    responses={404: {"description": "Note not found"}},
)
def patch_note(note_id: str, payload: NoteUpdate, dashboard: Dashboard = Depends(get_dashboard)) -> NoteOut:
    updated = dashboard.update_note(note_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    if updated is None:
        raise _not_found()
    return NoteOut(**updated)


# PUBLIC_INTERFACE
@router.post(
    "/{note_id}/tags",
    response_model=NoteOut,
    summary="Add Note Tag",
    description="Add a tag to a note; an existing tag is left as is.",
    responses={404: {"description": "Note not found"}},
)
def add_note_tag(note_id: str, payload: TagIn, dashboard: Dashboard = Depends(get_dashboard)) -> NoteOut:
    updated = dashboard.add_note_tag(note_id, payload.tag)
    if updated is None:
        raise _not_found()
    return NoteOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{note_id}/tags/{tag}",
    response_model=NoteOut,
    summary="Remove Note Tag",
    responses={404: {"description": "Note not found"}},
)
def remove_note_tag(note_id: str, tag: str, dashboard: Dashboard = Depends(get_dashboard)) -> NoteOut:
    updated = dashboard.remove_note_tag(note_id, tag)
    if updated is None:
        raise _not_found()
    return NoteOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Note",
    responses={204: {"description": "Note deleted"}, 404: {"description": "Note not found"}},
)
def delete_note(note_id: str, dashboard: Dashboard = Depends(get_dashboard)) -> None:
    if not dashboard.delete_note(note_id):
        raise _not_found()
    return None
