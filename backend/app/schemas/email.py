from datetime import datetime
from typing import Optional, List, Literal
from .base import CamelModel
from .employee import EmployeeOut

class EmailAnalysisOut(CamelModel):
    id: int
    email_id: int
    sentiment: Optional[str] = None
    urgency_score: Optional[int] = None
    topics: List[str] = []
    action_items: List[str] = []
    ai_summary: Optional[str] = None
    processing_version: Optional[str] = None
    created_at: Optional[datetime] = None

class EmailOut(CamelModel):
    id: int
    message_id: str
    conversation_id: Optional[str] = None
    sender_id: Optional[int] = None
    subject: Optional[str] = None
    body_preview: Optional[str] = None
    received_at: datetime
    is_read: bool = False
    importance: Optional[str] = None
    has_attachments: bool = False
    created_at: Optional[datetime] = None

class RecentEmailOut(EmailOut):
    sender: Optional[EmployeeOut] = None
    analysis: Optional[EmailAnalysisOut] = None

class SyncRequest(CamelModel):
    access_token: Optional[str] = None

class MessageOutcomeOut(CamelModel):
    message_id: str
    status: Literal['processed', 'skipped', 'failed']
    stage: Optional[str] = None
    error: Optional[str] = None
    email_id: Optional[int] = None
    tasks_created: int = 0
    annotated: bool = False

class SyncResult(CamelModel):
    success: bool = True
    processed_count: int
    total_fetched: int
    skipped_count: int = 0
    failed_count: int = 0
    failures: List[MessageOutcomeOut] = []
