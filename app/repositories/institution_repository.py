"""Institution data access."""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.admin import Admin
from app.models.institution import Institution
from app.models.user import User


class InstitutionRepository:
    """Institution queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, institution_id: int) -> Optional[Institution]:
        return self.db.query(Institution).filter(Institution.id == institution_id).first()

    def get_by_name(self, name: str) -> Optional[Institution]:
        return self.db.query(Institution).filter(Institution.name == name).first()

    def get_by_business_number(self, business_number: str) -> Optional[Institution]:
        return self.db.query(Institution).filter(Institution.business_number == business_number).first()

    def get_active(self) -> List[Institution]:
        return (
            self.db.query(Institution)
            .filter(Institution.is_active.is_(True))
            .order_by(Institution.name)
            .all()
        )

    def count_admins(self, institution_id: int) -> int:
        return self.db.query(func.count(Admin.id)).filter(Admin.institution_id == institution_id).scalar() or 0

    def count_users(self, institution_id: int) -> int:
        return self.db.query(func.count(User.id)).filter(User.institution_id == institution_id).scalar() or 0

    def create(self, **kwargs) -> Institution:
        institution = Institution(**kwargs)
        self.db.add(institution)
        self.db.commit()
        self.db.refresh(institution)
        return institution

    def update(self, institution: Institution, **kwargs) -> Institution:
        for key, value in kwargs.items():
            setattr(institution, key, value)
        self.db.commit()
        self.db.refresh(institution)
        return institution
