from typing import Optional, List
from pydantic import field_validator
from .base import CamelModel

SENTIMENTS = ('positive', 'negative', 'neutral')


class ExtractedTask(CamelModel):
    title: str
    description: Optional[str] = ''
    assigned_to: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[str] = 'medium'
    category: Optional[str] = None
    confidence: float = 0.0

    @field_validator('description', 'priority', mode='before')
    @classmethod
    def null_to_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class AnnotationResult(CamelModel):
    """Structured LLM output for one email. Null text fields fall back to their defaults."""
    tasks: List[ExtractedTask] = []
    summary: Optional[str] = ''
    sentiment: Optional[str] = 'neutral'
    urgency_score: int = 0
    key_topics: List[str] = []
    action_required: bool = False

    @field_validator('summary', 'sentiment', mode='before')
    @classmethod
    def null_to_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value
