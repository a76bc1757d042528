from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime, timezone
from ..models.employee_model import Organization, Employee


def get_organization_by_domain(db: Session, domain: str) -> Optional[Organization]:
    return db.query(Organization).filter(Organization.domain == domain).first()

def create_organization(db: Session, name: str, domain: str) -> Organization:
    org = Organization(name=name, domain=domain, settings={})
    db.add(org)
    db.commit()
    db.refresh(org)
    return org

def get_or_create_organization(db: Session, domain: str) -> Organization:
    """Organizations are created lazily, named after the mail domain."""
    org = get_organization_by_domain(db, domain)
    if org is None:
        org = create_organization(db, name=domain, domain=domain)
    return org


def get_employee(db: Session, employee_id: int) -> Optional[Employee]:
    return db.query(Employee).filter(Employee.id == employee_id).first()

def get_employee_by_email(db: Session, email: str) -> Optional[Employee]:
    return db.query(Employee).filter(Employee.email == email).first()

def create_employee(db: Session, email: str, organization_id: Optional[int] = None, display_name: Optional[str] = None,
                    department: Optional[str] = None, role: Optional[str] = None) -> Employee:
    employee = Employee(
        organization_id=organization_id,
        email=email,
        display_name=display_name,
        department=department,
        role=role,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee

def list_employees_by_organization(db: Session, organization_id: int) -> List[Employee]:
    return db.query(Employee).filter(Employee.organization_id == organization_id).order_by(Employee.id).all()

def update_employee_last_sync(db: Session, employee_id: int) -> Optional[Employee]:
    employee = get_employee(db, employee_id)
    if not employee:
        return None
    employee.last_sync_at = datetime.now(timezone.utc)
    db.commit(); db.refresh(employee)
    return employee
