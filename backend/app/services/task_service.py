from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import datetime, timezone
from ..models.task_model import Task, TASK_STATUSES
from ..models.employee_model import Employee


def create_task(
    db: Session,
    title: str,
    source_email_id: Optional[int] = None,
    description: Optional[str] = None,
    assigned_to_id: Optional[int] = None,
    created_by_id: Optional[int] = None,
    status: str = 'identified',
    priority: Optional[str] = None,
    due_date: Optional[datetime] = None,
    confidence_score: Optional[float] = None,
    commit: bool = True,
) -> Task:
    task = Task(
        title=title,
        description=description,
        assigned_to_id=assigned_to_id,
        created_by_id=created_by_id,
        status=status,
        priority=priority,
        due_date=due_date,
        confidence_score=confidence_score,
        source_email_id=source_email_id,
    )
    db.add(task)
    if commit:
        db.commit()
        db.refresh(task)
    else:
        db.flush()
    return task

def get_task(db: Session, task_id: int) -> Optional[Task]:
    return db.query(Task).filter(Task.id == task_id).first()

def list_tasks_by_employee(db: Session, employee_id: int) -> List[Task]:
    return db.query(Task).filter(Task.assigned_to_id == employee_id).order_by(Task.created_at.desc()).all()

def get_recent_tasks(db: Session, organization_id: Optional[int] = None, limit: int = 10) -> List[Task]:
    q = db.query(Task).options(joinedload(Task.assigned_to), joinedload(Task.source_email))
    if organization_id is not None:
        q = q.join(Employee, Task.assigned_to_id == Employee.id).filter(Employee.organization_id == organization_id)
    return q.order_by(Task.created_at.desc(), Task.id.desc()).limit(limit).all()

def update_task_status(db: Session, task_id: int, status: str) -> Optional[Task]:
    """Move a task to `status`. Returns None when the task does not exist."""
    if status not in TASK_STATUSES:
        raise ValueError(f"invalid task status: {status}")
    task = get_task(db, task_id)
    if not task:
        return None
    now = datetime.now(timezone.utc)
    task.status = status
    task.updated_at = now
    task.completion_date = now if status == 'completed' else None
    db.commit(); db.refresh(task)
    return task
