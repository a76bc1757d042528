from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from ..db.database import get_db
from ..models.task_model import TASK_STATUSES
from ..schemas.employee import AuthUser
from ..schemas.task import RecentTaskOut, TaskStatusUpdate, TaskStatusResult, TaskOut
from ..security.auth import get_current_user
from ..services.task_service import get_recent_tasks, update_task_status

router = APIRouter()

@router.get("/recent", response_model=List[RecentTaskOut])
def recent_tasks(
    limit: int = Query(10, ge=1, le=100),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_recent_tasks(db, organization_id=user.organization_id, limit=limit)

@router.put("/{task_id}/status", response_model=TaskStatusResult)
def set_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Approve/reject style status change (identified -> in_progress -> completed)."""
    if payload.status not in TASK_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")
    task = update_task_status(db, task_id, payload.status)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskStatusResult(success=True, task=TaskOut.model_validate(task))
