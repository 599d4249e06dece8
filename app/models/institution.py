"""Institution (tenant) model."""
from enum import Enum
from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class InstitutionState(str, Enum):
    """Lifecycle of the institution active flag."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class InstitutionAction(str, Enum):
    DEACTIVATE = "deactivate"
    REACTIVATE = "reactivate"


INSTITUTION_TRANSITIONS = {
    (InstitutionState.ACTIVE, InstitutionAction.DEACTIVATE): InstitutionState.INACTIVE,
    (InstitutionState.INACTIVE, InstitutionAction.REACTIVATE): InstitutionState.ACTIVE,
}


def next_institution_state(current: InstitutionState, action: InstitutionAction) -> Optional[InstitutionState]:
    """Return the state reached by action, or None if the transition is not allowed."""
    return INSTITUTION_TRANSITIONS.get((current, action))


class Institution(Base):
    """A welfare center; the unit of data isolation."""

    __tablename__ = "institutions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    business_number = Column(String(20), unique=True, nullable=True)
    registration_number = Column(String(50), nullable=True)
    address = Column(String, nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    website = Column(String(200), nullable=True)
    director_name = Column(String(50), nullable=True)
    contact_person = Column(String(50), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    contact_email = Column(String(100), nullable=True)
    timezone = Column(String(50), nullable=False, default="Asia/Seoul")
    locale = Column(String(10), nullable=False, default="ko_KR")
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    admins = relationship("Admin", back_populates="institution", foreign_keys="Admin.institution_id")
    users = relationship("User", back_populates="institution")

    @property
    def state(self) -> InstitutionState:
        return InstitutionState.ACTIVE if self.is_active else InstitutionState.INACTIVE

    def __repr__(self):
        return f"<Institution(id={self.id}, name={self.name}, is_active={self.is_active})>"
