"""Admin and system admin data access."""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.admin import Admin, AdminStatus
from app.models.system_admin import SystemAdmin


class SystemAdminRepository:
    """System admin queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, system_admin_id: int) -> Optional[SystemAdmin]:
        return self.db.query(SystemAdmin).filter(SystemAdmin.id == system_admin_id).first()

    def get_by_email(self, email: str) -> Optional[SystemAdmin]:
        return self.db.query(SystemAdmin).filter(SystemAdmin.email == email).first()

    def create(self, **kwargs) -> SystemAdmin:
        system_admin = SystemAdmin(**kwargs)
        self.db.add(system_admin)
        self.db.commit()
        self.db.refresh(system_admin)
        return system_admin

    def save(self, system_admin: SystemAdmin) -> SystemAdmin:
        self.db.commit()
        self.db.refresh(system_admin)
        return system_admin


class AdminRepository:
    """Institution admin queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        return self.db.query(Admin).filter(Admin.id == admin_id).first()

    def get_by_email(self, email: str) -> Optional[Admin]:
        return self.db.query(Admin).filter(Admin.email == email).first()

    def get_by_institution_and_email(self, institution_id: int, email: str) -> Optional[Admin]:
        return (
            self.db.query(Admin)
            .filter(Admin.institution_id == institution_id, Admin.email == email)
            .first()
        )

    def get_all(self, status: Optional[AdminStatus] = None) -> List[Admin]:
        query = self.db.query(Admin).options(joinedload(Admin.institution), joinedload(Admin.approver))
        if status is not None:
            query = query.filter(Admin.status == status)
        return query.order_by(Admin.created_at.desc(), Admin.id.desc()).all()

    def count_by_institution_and_status(self, institution_id: int, status: AdminStatus) -> int:
        return (
            self.db.query(func.count(Admin.id))
            .filter(Admin.institution_id == institution_id, Admin.status == status)
            .scalar()
            or 0
        )

    def create(self, **kwargs) -> Admin:
        admin = Admin(**kwargs)
        self.db.add(admin)
        self.db.commit()
        self.db.refresh(admin)
        return admin

    def save(self, admin: Admin) -> Admin:
        self.db.commit()
        self.db.refresh(admin)
        return admin
