"""Mailbox ingestion: fetch one Graph page, store new messages, annotate them.

One call walks the newest page of the caller's mailbox in order. Every message
ends in exactly one outcome (processed, skipped or failed); a failing message
never stops the loop. Only the initial Graph calls can fail the whole sync.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session
from .annotator import Annotator
from .graph_client import GraphClient, GraphError, DEFAULT_PAGE_SIZE
from .email_service import create_email, create_email_analysis, existing_message_ids
from .employee_service import update_employee_last_sync
from .task_service import create_task
from ..models.email_model import Email
from ..schemas.annotation import AnnotationResult
from ..schemas.graph import GraphMessage

logger = logging.getLogger(__name__)

TASK_CONFIDENCE_THRESHOLD = 0.7


@dataclass
class MessageOutcome:
    message_id: str
    status: str  # processed | skipped | failed
    stage: Optional[str] = None
    error: Optional[str] = None
    email_id: Optional[int] = None
    tasks_created: int = 0
    annotated: bool = False


@dataclass
class SyncReport:
    total_fetched: int = 0
    outcomes: List[MessageOutcome] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == 'processed')

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == 'skipped')

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == 'failed')

    @property
    def failures(self) -> List[MessageOutcome]:
        """Failed messages plus processed ones whose annotation did not make it."""
        return [o for o in self.outcomes if o.status == 'failed' or o.error]


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_due_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        logger.info("task_due_date_unparseable", extra={"stage": "persist_tasks"})
        return None
    return _as_utc(dt)


def sync_mailbox(db: Session, graph: GraphClient, annotator: Annotator, employee_id: int,
                 page_size: int = DEFAULT_PAGE_SIZE) -> SyncReport:
    """Run one sync pass for `employee_id`. Raises GraphError if the mailbox cannot be read."""
    graph_user = graph.get_current_user()
    if not graph_user.id:
        raise GraphError("user profile has no id")
    messages = graph.list_messages(graph_user.id, top=page_size)
    report = SyncReport(total_fetched=len(messages))
    logger.info("email_sync_started", extra={"employee_id": employee_id, "fetched": len(messages)})

    stored = existing_message_ids(db, [m.id for m in messages])
    seen: set[str] = set()
    for message in messages:
        if message.id in stored or message.id in seen:
            report.outcomes.append(MessageOutcome(message_id=message.id, status='skipped', stage='check_duplicate'))
            continue
        seen.add(message.id)
        report.outcomes.append(_ingest_message(db, annotator, message, employee_id))

    update_employee_last_sync(db, employee_id)
    logger.info("email_sync_finished", extra={
        "employee_id": employee_id,
        "fetched": report.total_fetched,
        "processed": report.processed_count,
    })
    return report


def _ingest_message(db: Session, annotator: Annotator, message: GraphMessage, employee_id: int) -> MessageOutcome:
    outcome = MessageOutcome(message_id=message.id, status='failed', stage='persist_email')
    try:
        email = create_email(
            db,
            message_id=message.id,
            conversation_id=message.conversation_id,
            sender_id=employee_id,
            subject=message.subject,
            body_preview=message.body_preview,
            received_at=_as_utc(message.received_date_time),
            is_read=message.is_read,
            importance=message.importance,
            has_attachments=message.has_attachments,
        )
    except Exception as e:
        # includes the unique message_id violation from a concurrent sync
        db.rollback()
        outcome.error = f"{type(e).__name__}: {getattr(e, 'orig', e)}"
        logger.warning("email_ingest_failed", exc_info=e,
                       extra={"employee_id": employee_id, "message_id": message.id, "stage": outcome.stage})
        return outcome

    outcome.status = 'processed'
    outcome.stage = 'persist_email'
    outcome.email_id = email.id
    if not (message.subject and message.body_preview):
        return outcome

    outcome.stage = 'annotate'
    try:
        annotation = annotator.annotate(
            message.body_preview,
            subject=message.subject,
            sender=message.sender_address,
            recipients=message.recipient_addresses,
        )
        outcome.stage = 'persist_analysis'
        outcome.tasks_created = _store_annotation(db, email, annotation, employee_id)
        outcome.annotated = True
        outcome.stage = 'done'
    except Exception as e:
        db.rollback()
        outcome.error = f"{type(e).__name__}: {e}"
        logger.warning("email_annotation_failed", exc_info=e, extra={
            "employee_id": employee_id, "message_id": message.id, "email_id": outcome.email_id, "stage": outcome.stage,
        })
    return outcome


def _store_annotation(db: Session, email: Email, annotation: AnnotationResult, employee_id: int) -> int:
    """Write analysis and confident tasks in one transaction. Returns tasks created."""
    create_email_analysis(
        db,
        email_id=email.id,
        sentiment=annotation.sentiment,
        urgency_score=annotation.urgency_score,
        topics=annotation.key_topics,
        action_items=[t.title for t in annotation.tasks],
        ai_summary=annotation.summary,
        commit=False,
    )
    created = 0
    for extracted in annotation.tasks:
        if extracted.confidence <= TASK_CONFIDENCE_THRESHOLD:
            continue
        create_task(
            db,
            title=extracted.title,
            description=extracted.description,
            assigned_to_id=employee_id,
            created_by_id=employee_id,
            status='identified',
            priority=extracted.priority,
            due_date=parse_due_date(extracted.due_date),
            confidence_score=extracted.confidence,
            source_email_id=email.id,
            commit=False,
        )
        created += 1
    db.commit()
    return created
