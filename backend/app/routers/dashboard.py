from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from ..db.database import get_db
from ..schemas.dashboard import DashboardMetrics, SentimentBreakdown, VolumePoint
from ..schemas.employee import AuthUser
from ..security.auth import get_current_user
from ..services.analytics_service import email_metrics, sentiment_distribution, email_volume

router = APIRouter()

@router.get("/metrics", response_model=DashboardMetrics)
def metrics(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return email_metrics(db, organization_id=user.organization_id)

@router.get("/sentiment", response_model=SentimentBreakdown)
def sentiment(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return sentiment_distribution(db, organization_id=user.organization_id)

@router.get("/email-volume", response_model=List[VolumePoint])
def volume(
    days: int = Query(7, ge=1, le=365),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return email_volume(db, days=days, organization_id=user.organization_id)
