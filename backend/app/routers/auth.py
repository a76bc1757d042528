import logging
from typing import Callable
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..db.database import get_db
from ..schemas.employee import MicrosoftSignIn, AuthResponse
from ..services.auth_service import sign_in_with_microsoft, SignInError
from ..services.graph_client import GraphClient, GraphError, get_graph_client_factory

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("/microsoft", response_model=AuthResponse)
def microsoft_sign_in(
    payload: MicrosoftSignIn,
    db: Session = Depends(get_db),
    graph_factory: Callable[[str], GraphClient] = Depends(get_graph_client_factory),
):
    """Exchange a Microsoft Graph access token for an application JWT."""
    if not payload.access_token:
        raise HTTPException(status_code=400, detail="Access token required")
    try:
        with graph_factory(payload.access_token) as graph:
            return sign_in_with_microsoft(db, graph)
    except SignInError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GraphError as e:
        logger.error("microsoft_auth_failed", exc_info=e)
        raise HTTPException(status_code=500, detail="Authentication failed")
