from datetime import datetime
from typing import Optional
from .base import CamelModel

class EmployeeOut(CamelModel):
    id: int
    organization_id: Optional[int] = None
    email: str
    display_name: Optional[str] = None
    department: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = True
    last_sync_at: Optional[datetime] = None

class AuthUser(CamelModel):
    """Identity carried inside the application JWT."""
    id: int
    email: str
    display_name: Optional[str] = None
    role: Optional[str] = None
    organization_id: Optional[int] = None

class AuthResponse(CamelModel):
    token: str
    user: AuthUser

class MicrosoftSignIn(CamelModel):
    access_token: Optional[str] = None
