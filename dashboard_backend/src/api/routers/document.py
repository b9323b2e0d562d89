from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from ..dashboard import Dashboard
from ..deps import get_dashboard
from ..schemas import BackgroundUpdate, ImportOut, ThemeUpdate, ToolsUpdate

router = APIRouter(
    prefix="/api/v1/document",
    tags=["document"],
)

_KEYS = Query(None, description="Top-level keys to include; all collections and settings by default")


# PUBLIC_INTERFACE
@router.get("", summary="Get Document", description="The full persisted document, including lastSavedAt.")
def get_document(dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.snapshot()


# PUBLIC_INTERFACE
@router.get(
    "/export",
    summary="Download Backup",
    description="Download the chosen keys as a JSON backup named night_shift_backup_<date>.json.",
    response_class=Response,
    responses={200: {"content": {"application/json": {}}}},
)
def download_export(keys: Optional[List[str]] = _KEYS, dashboard: Dashboard = Depends(get_dashboard)) -> Response:
    filename, text = dashboard.export(keys)
    return Response(
        content=text,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# PUBLIC_INTERFACE
@router.post(
    "/export",
    status_code=status.HTTP_201_CREATED,
    summary="Write Backup File",
    description="Write a JSON backup into the configured export directory and return its path.",
    responses={500: {"description": "Backup file could not be written"}},
)
def write_export(keys: Optional[List[str]] = _KEYS, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, str]:
    path = dashboard.export_to_directory(dashboard.settings.export_dir, keys)
    if path is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Export failed")
    return {"path": str(path)}


# PUBLIC_INTERFACE
@router.post(
    "/import",
    response_model=ImportOut,
    summary="Import Backup",
    description=(
        "Merge a JSON backup into the document one key at a time. A bare JSON array is read as the task list. "
        "Keys missing from the file are left unchanged; a file that is not JSON changes nothing."
    ),
    responses={400: {"description": "File is not valid JSON"}},
)
async def import_document(file: UploadFile = File(...), dashboard: Dashboard = Depends(get_dashboard)) -> ImportOut:
    content = await file.read()
    result = dashboard.import_file(content)
    return ImportOut(imported=sorted(result.values), warnings=result.warnings)


# PUBLIC_INTERFACE
@router.put("/theme", summary="Set Theme")
def set_theme(payload: ThemeUpdate, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, str]:
    return {"theme": dashboard.set_theme(payload.theme)}


# PUBLIC_INTERFACE
@router.patch("/background", summary="Update Background")
def update_background(payload: BackgroundUpdate, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.update_background(payload.model_dump(exclude_unset=True, exclude_none=True))


# PUBLIC_INTERFACE
@router.patch("/tools", summary="Update Tools")
def update_tools(payload: ToolsUpdate, dashboard: Dashboard = Depends(get_dashboard)) -> Dict[str, Any]:
    return dashboard.update_tools(payload.model_dump(exclude_unset=True, exclude_none=True))
