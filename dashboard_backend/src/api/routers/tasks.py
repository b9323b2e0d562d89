from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dashboard import Dashboard
from ..deps import get_dashboard
from ..models import TaskStatus
from ..schemas import TaskCreate, TaskMove, TaskOut, TaskUpdate

router = APIRouter(
    prefix="/api/v1/tasks",
    tags=["tasks"],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


# PUBLIC_INTERFACE
@router.get(
    "/",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="List board tasks in stored order, optionally restricted to one column.",
)
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status", description="Only tasks in this column"),
    dashboard: Dashboard = Depends(get_dashboard),
) -> List[TaskOut]:
    tasks = dashboard.document["tasks"]
    if status_filter is not None:
        tasks = [t for t in tasks if t.get("status") == status_filter.value]
    return [TaskOut(**t) for t in tasks]


# PUBLIC_INTERFACE
@router.post(
    "/",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Append a new task to the board.",
    responses={201: {"description": "Task created"}, 507: {"description": "Document could not be saved"}},
)
def create_task(payload: TaskCreate, dashboard: Dashboard = Depends(get_dashboard)) -> TaskOut:
    created = dashboard.add_task(**payload.model_dump(mode="json"))
    return TaskOut(**created)


# PUBLIC_INTERFACE
@router.patch(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update Task",
    description="Partially update fields of a task. Any status may be set directly.",
    responses={404: {"description": "Task not found"}},
)
def patch_task(task_id: str, payload: TaskUpdate, dashboard: Dashboard = Depends(get_dashboard)) -> TaskOut:
    changes = payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    updated = dashboard.update_task(task_id, changes)
    if updated is None:
        raise _not_found()
    return TaskOut(**updated)


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/move",
    response_model=TaskOut,
    summary="Move Task",
    description="Drop a task on a board column. Every transition is allowed, including reopening a done task.",
    responses={404: {"description": "Task not found"}},
)
def move_task(task_id: str, payload: TaskMove, dashboard: Dashboard = Depends(get_dashboard)) -> TaskOut:
    moved = dashboard.move_task(task_id, payload.status)
    if moved is None:
        raise _not_found()
    return TaskOut(**moved)


# PUBLIC_INTERFACE
@router.post(
    "/{task_id}/cycle-priority",
    response_model=TaskOut,
    summary="Cycle Priority",
    description="Advance priority one step: LOW -> MEDIUM -> HIGH -> CRITICAL -> LOW.",
    responses={404: {"description": "Task not found"}},
)
def cycle_task_priority(task_id: str, dashboard: Dashboard = Depends(get_dashboard)) -> TaskOut:
    cycled = dashboard.cycle_priority(task_id)
    if cycled is None:
        raise _not_found()
    return TaskOut(**cycled)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Task",
    responses={204: {"description": "Task deleted"}, 404: {"description": "Task not found"}},
)
def delete_task(task_id: str, dashboard: Dashboard = Depends(get_dashboard)) -> None:
    if not dashboard.delete_task(task_id):
        raise _not_found()
    return None
