import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
from sqlalchemy.orm import Session
from ..core.config import get_settings, DEV_JWT_SECRET
from ..models.employee_model import Employee
from ..schemas.employee import AuthUser, AuthResponse
from ..schemas.graph import GraphUser
from .employee_service import get_employee_by_email, create_employee, get_or_create_organization
from .graph_client import GraphClient

logger = logging.getLogger(__name__)

JWT_ALGORITHM = 'HS256'


class SignInError(Exception):
    """The Microsoft profile cannot be turned into an employee account."""


def _secret() -> str:
    secret = get_settings().jwt_secret
    if secret == DEV_JWT_SECRET:
        logger.warning("jwt_secret_not_configured")
    return secret

def generate_token(user: AuthUser) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': str(user.id),
        'email': user.email,
        'displayName': user.display_name,
        'role': user.role,
        'organizationId': user.organization_id,
        'iat': now,
        'exp': now + timedelta(hours=get_settings().jwt_expires_hours),
    }
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)

def verify_token(token: str) -> Optional[AuthUser]:
    """Decode an application JWT. None when it is invalid or expired."""
    try:
        payload = jwt.decode(token, _secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("jwt_expired")
        return None
    except jwt.InvalidTokenError:
        return None
    try:
        return AuthUser(
            id=int(payload['sub']),
            email=payload['email'],
            display_name=payload.get('displayName'),
            role=payload.get('role'),
            organization_id=payload.get('organizationId'),
        )
    except (KeyError, ValueError):
        return None


def auth_user_for(employee: Employee) -> AuthUser:
    return AuthUser(
        id=employee.id,
        email=employee.email,
        display_name=employee.display_name,
        role=employee.role,
        organization_id=employee.organization_id,
    )

def authenticate_employee(db: Session, email: str) -> Optional[AuthResponse]:
    employee = get_employee_by_email(db, email)
    if not employee:
        return None
    user = auth_user_for(employee)
    return AuthResponse(token=generate_token(user), user=user)

def create_employee_from_graph(db: Session, graph_user: GraphUser, organization_id: int) -> Employee:
    return create_employee(
        db,
        email=graph_user.mail,
        organization_id=organization_id,
        display_name=graph_user.display_name,
        department=graph_user.department,
        role=graph_user.job_title,
    )

def sign_in_with_microsoft(db: Session, graph: GraphClient) -> AuthResponse:
    """Exchange a Graph session for an application token, creating org and employee on first sight."""
    graph_user = graph.get_current_user()
    if not graph_user.mail or '@' not in graph_user.mail:
        raise SignInError('No email found in user profile')
    domain = graph_user.mail.split('@', 1)[1].lower()
    organization = get_or_create_organization(db, domain)
    employee = get_employee_by_email(db, graph_user.mail)
    if not employee:
        employee = create_employee_from_graph(db, graph_user, organization.id)
        logger.info("employee_created", extra={"employee_id": employee.id})
    auth = authenticate_employee(db, employee.email)
    if auth is None:
        raise SignInError('Authentication failed')
    return auth
