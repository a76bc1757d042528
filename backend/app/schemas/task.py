from datetime import datetime
from typing import Optional
from .base import CamelModel
from .employee import EmployeeOut
from .email import EmailOut

class TaskOut(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    assigned_to_id: Optional[int] = None
    created_by_id: Optional[int] = None
    status: Optional[str] = 'identified'
    priority: Optional[str] = None
    due_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    confidence_score: Optional[float] = None
    source_email_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RecentTaskOut(TaskOut):
    assigned_to: Optional[EmployeeOut] = None
    source_email: Optional[EmailOut] = None

class TaskStatusUpdate(CamelModel):
    status: Optional[str] = None

class TaskStatusResult(CamelModel):
    success: bool = True
    task: TaskOut
