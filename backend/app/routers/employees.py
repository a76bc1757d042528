from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ..db.database import get_db
from ..schemas.employee import AuthUser, EmployeeOut
from ..security.auth import get_current_user
from ..services.employee_service import list_employees_by_organization

router = APIRouter()

@router.get("/team", response_model=List[EmployeeOut])
def team(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    if not user.organization_id:
        raise HTTPException(status_code=400, detail="No organization found")
    return list_employees_by_organization(db, user.organization_id)
