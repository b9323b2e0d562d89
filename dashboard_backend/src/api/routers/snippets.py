from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dashboard import Dashboard
from ..deps import get_dashboard
from ..schemas import SnippetCreate, SnippetOut, SnippetUpdate

router = APIRouter(
    prefix="/api/v1/snippets",
    tags=["snippets"],
)


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[SnippetOut],
    summary="List Snippets",
    description="Snippets newest first; q filters by title, language or tag (case-insensitive).",
)
def list_snippets(
    q: Optional[str] = Query(None, description="Search text for title/language/tags"),
    dashboard: Dashboard = Depends(get_dashboard),
) -> List[SnippetOut]:
    return [SnippetOut(**s) for s in dashboard.search_snippets(q.strip() if q else None)]


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=SnippetOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Snippet",
)
def create_snippet(payload: SnippetCreate, dashboard: Dashboard = Depends(get_dashboard)) -> SnippetOut:
    return SnippetOut(**dashboard.add_snippet(payload.title, payload.code, payload.language, payload.tags))


# PUBLIC_INTERFACE
@router.patch(
    "/{snippet_id}",
    response_model=SnippetOut,
    summary="Update Snippet",
    responses={404: {"description": "Snippet not found"}},
)
def patch_snippet(snippet_id: str, payload: SnippetUpdate, dashboard: Dashboard = Depends(get_dashboard)) -> SnippetOut:
    updated = dashboard.update_snippet(snippet_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snippet not found")
    return SnippetOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{snippet_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Snippet",
    responses={204: {"description": "Snippet deleted"}, 404: {"description": "Snippet not found"}},
)
def delete_snippet(snippet_id: str, dashboard: Dashboard = Depends(get_dashboard)) -> None:
    if not dashboard.delete_snippet(snippet_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Snippet not found")
    return None
