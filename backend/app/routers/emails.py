import logging
from typing import Callable, List
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from ..db.database import get_db
from ..schemas.email import SyncRequest, SyncResult, MessageOutcomeOut, RecentEmailOut
from ..schemas.employee import AuthUser
from ..security.auth import get_current_user
from ..services.annotator import Annotator, get_annotator
from ..services.email_service import get_recent_emails
from ..services.graph_client import GraphClient, GraphError, get_graph_client_factory
from ..services.sync_service import sync_mailbox

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/sync", response_model=SyncResult)
def sync_emails(
    payload: SyncRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    graph_factory: Callable[[str], GraphClient] = Depends(get_graph_client_factory),
    annotator: Annotator = Depends(get_annotator),
):
    """Pull the newest mailbox page from Graph, store new messages and annotate them.

    Per-message failures do not fail the call; they are listed under `failures`.
    """
    if not payload.access_token:
        raise HTTPException(status_code=400, detail="Access token required")
    try:
        with graph_factory(payload.access_token) as graph:
            report = sync_mailbox(db, graph, annotator, employee_id=user.id)
    except GraphError as e:
        logger.error("email_sync_failed", exc_info=e, extra={"employee_id": user.id})
        raise HTTPException(status_code=500, detail=f"Email sync failed: {e}")
    return SyncResult(
        success=True,
        processed_count=report.processed_count,
        total_fetched=report.total_fetched,
        skipped_count=report.skipped_count,
        failed_count=report.failed_count,
        failures=[MessageOutcomeOut.model_validate(o) for o in report.failures],
    )

@router.get("/recent", response_model=List[RecentEmailOut])
def recent_emails(
    limit: int = Query(10, ge=1, le=100),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_recent_emails(db, organization_id=user.organization_id, limit=limit)
