from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from ..schemas.employee import AuthUser
from ..services.auth_service import verify_token

bearer_scheme = HTTPBearer(auto_error=False)

def get_current_user(credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme)) -> AuthUser:
    """Resolve the caller from the `Authorization: Bearer <jwt>` header.
    Missing credential -> 401, invalid or expired token -> 403."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = verify_token(credentials.credentials)
    if user is None:
        raise HTTPException(status_code=403, detail="Forbidden")
    return user
