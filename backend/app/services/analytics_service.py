from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Optional
from datetime import datetime, timedelta, timezone
from ..models.email_model import Email, EmailAnalysis
from ..models.employee_model import Employee
from ..models.task_model import Task
from ..schemas.annotation import SENTIMENTS


def _emails_in_scope(q, organization_id: Optional[int]):
    # emails belong to an organization through their sender
    if organization_id is None:
        return q
    return q.join(Employee, Email.sender_id == Employee.id).filter(Employee.organization_id == organization_id)

def _tasks_in_scope(q, organization_id: Optional[int]):
    if organization_id is None:
        return q
    return q.join(Employee, Task.assigned_to_id == Employee.id).filter(Employee.organization_id == organization_id)


def email_metrics(db: Session, organization_id: Optional[int] = None) -> Dict[str, int]:
    total = _emails_in_scope(db.query(func.count(Email.id)).select_from(Email), organization_id).scalar() or 0
    analyzed = _emails_in_scope(
        db.query(func.count(EmailAnalysis.id)).select_from(EmailAnalysis).join(Email, EmailAnalysis.email_id == Email.id),
        organization_id,
    ).scalar() or 0
    tasks_q = _tasks_in_scope(db.query(func.count(Task.id)).select_from(Task), organization_id)
    tasks_total = tasks_q.scalar() or 0
    tasks_completed = tasks_q.filter(Task.status == 'completed').scalar() or 0
    return {
        'total_emails': total,
        'tasks_identified': tasks_total,
        'analyzed_emails': analyzed,
        'tasks_completed': tasks_completed,
    }

def sentiment_distribution(db: Session, organization_id: Optional[int] = None) -> Dict[str, int]:
    """Analysed-email counts per sentiment label. Always has all three labels."""
    q = (
        db.query(EmailAnalysis.sentiment, func.count(EmailAnalysis.id))
        .select_from(EmailAnalysis)
        .join(Email, EmailAnalysis.email_id == Email.id)
    )
    rows = _emails_in_scope(q, organization_id).group_by(EmailAnalysis.sentiment).all()
    result = {s: 0 for s in SENTIMENTS}
    for sentiment, count in rows:
        result[sentiment if sentiment in result else 'neutral'] += count
    return result

def email_volume(db: Session, days: int = 7, organization_id: Optional[int] = None) -> List[Dict]:
    """Emails received per calendar day over the last `days` days, oldest first."""
    start = datetime.now(timezone.utc) - timedelta(days=days)
    day = func.date(Email.received_at)
    q = db.query(day.label('day'), func.count(Email.id)).select_from(Email).filter(Email.received_at >= start)
    rows = _emails_in_scope(q, organization_id).group_by(day).order_by(day).all()
    return [
        {'date': d.isoformat() if hasattr(d, 'isoformat') else str(d), 'count': count}
        for d, count in rows
    ]
