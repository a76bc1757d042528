from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey
from sqlalchemy.orm import relationship
from ..db.database import Base
from datetime import datetime, timezone

TASK_STATUSES = ('identified', 'in_progress', 'completed')

class Task(Base):
    __tablename__ = 'tasks'
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    assigned_to_id = Column(Integer, ForeignKey('employees.id'), index=True)
    created_by_id = Column(Integer, ForeignKey('employees.id'))
    status = Column(String, default='identified', index=True)
    priority = Column(String)
    due_date = Column(DateTime(timezone=True), nullable=True)
    completion_date = Column(DateTime(timezone=True), nullable=True)
    confidence_score = Column(Float)
    source_email_id = Column(Integer, ForeignKey('emails.id'), index=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    assigned_to = relationship("Employee", foreign_keys=[assigned_to_id])
    created_by = relationship("Employee", foreign_keys=[created_by_id])
    source_email = relationship("Email")
