from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from ..db.database import Base
from datetime import datetime, timezone

class Email(Base):
    __tablename__ = 'emails'
    id = Column(Integer, primary_key=True, index=True)
    # Graph message id; the only deduplication key for ingestion
    message_id = Column(String, nullable=False, unique=True, index=True)
    conversation_id = Column(String, index=True)
    sender_id = Column(Integer, ForeignKey('employees.id'), index=True)
    subject = Column(String)
    body_preview = Column(Text)
    received_at = Column(DateTime(timezone=True), nullable=False, index=True)
    is_read = Column(Boolean, default=False)
    importance = Column(String)
    has_attachments = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    sender = relationship("Employee")
    analysis = relationship("EmailAnalysis", back_populates="email", uselist=False)


class EmailAnalysis(Base):
    __tablename__ = 'email_analysis'
    id = Column(Integer, primary_key=True, index=True)
    email_id = Column(Integer, ForeignKey('emails.id'), unique=True, index=True)
    sentiment = Column(String, index=True)
    urgency_score = Column(Integer)
    topics = Column(JSON, default=list)
    action_items = Column(JSON, default=list)
    key_entities = Column(JSON, default=dict)
    ai_summary = Column(Text)
    processing_version = Column(String)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    email = relationship("Email", back_populates="analysis")
