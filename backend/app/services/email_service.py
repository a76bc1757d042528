from sqlalchemy.orm import Session, joinedload
from typing import Iterable, List, Optional, Set
from datetime import datetime
from ..models.email_model import Email, EmailAnalysis
from ..models.employee_model import Employee

PROCESSING_VERSION = '1.0'


def create_email(
    db: Session,
    message_id: str,
    received_at: datetime,
    sender_id: Optional[int] = None,
    conversation_id: Optional[str] = None,
    subject: Optional[str] = None,
    body_preview: Optional[str] = None,
    is_read: bool = False,
    importance: Optional[str] = None,
    has_attachments: bool = False,
) -> Email:
    email = Email(
        message_id=message_id,
        conversation_id=conversation_id,
        sender_id=sender_id,
        subject=subject,
        body_preview=body_preview,
        received_at=received_at,
        is_read=is_read,
        importance=importance,
        has_attachments=has_attachments,
    )
    db.add(email)
    db.commit()
    db.refresh(email)
    return email

def existing_message_ids(db: Session, message_ids: Iterable[str]) -> Set[str]:
    """Subset of `message_ids` already stored."""
    ids = list(set(message_ids))
    if not ids:
        return set()
    rows = db.query(Email.message_id).filter(Email.message_id.in_(ids)).all()
    return {r[0] for r in rows}

def get_email(db: Session, email_id: int) -> Optional[Email]:
    return db.query(Email).filter(Email.id == email_id).first()

def list_emails_by_employee(db: Session, employee_id: int, limit: int = 50) -> List[Email]:
    return (
        db.query(Email)
        .filter(Email.sender_id == employee_id)
        .order_by(Email.received_at.desc())
        .limit(limit)
        .all()
    )

def get_recent_emails(db: Session, organization_id: Optional[int] = None, limit: int = 10) -> List[Email]:
    """Newest emails with sender and analysis loaded; scoped to an organization when given."""
    q = db.query(Email).options(joinedload(Email.sender), joinedload(Email.analysis))
    if organization_id is not None:
        q = q.join(Employee, Email.sender_id == Employee.id).filter(Employee.organization_id == organization_id)
    return q.order_by(Email.received_at.desc(), Email.id.desc()).limit(limit).all()


def create_email_analysis(
    db: Session,
    email_id: int,
    sentiment: str,
    urgency_score: Optional[int] = None,
    topics: Optional[List[str]] = None,
    action_items: Optional[List[str]] = None,
    ai_summary: Optional[str] = None,
    key_entities: Optional[dict] = None,
    commit: bool = True,
) -> EmailAnalysis:
    """Store an analysis row. With commit=False the caller owns the transaction."""
    analysis = EmailAnalysis(
        email_id=email_id,
        sentiment=sentiment,
        urgency_score=urgency_score,
        topics=topics or [],
        action_items=action_items or [],
        key_entities=key_entities or {},
        ai_summary=ai_summary,
        processing_version=PROCESSING_VERSION,
    )
    db.add(analysis)
    if commit:
        db.commit()
        db.refresh(analysis)
    else:
        db.flush()
    return analysis

def get_email_analysis(db: Session, email_id: int) -> Optional[EmailAnalysis]:
    return db.query(EmailAnalysis).filter(EmailAnalysis.email_id == email_id).first()
