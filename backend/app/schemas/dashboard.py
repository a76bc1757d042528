from .base import CamelModel

class DashboardMetrics(CamelModel):
    total_emails: int
    tasks_identified: int
    analyzed_emails: int
    tasks_completed: int

class SentimentBreakdown(CamelModel):
    positive: int = 0
    neutral: int = 0
    negative: int = 0

class VolumePoint(CamelModel):
    date: str
    count: int
