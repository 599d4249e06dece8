"""Institution admin model and its approval state machine."""
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Enum as SQLEnum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class AdminRole(str, Enum):
    """Roles an institution admin can hold."""
    ADMIN = "ADMIN"
    STAFF = "STAFF"


class AdminStatus(str, Enum):
    """Approval status of an admin account."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SUSPENDED = "SUSPENDED"


class AdminAction(str, Enum):
    """Actions a system admin can apply to an admin account."""
    APPROVE = "approve"
    REJECT = "reject"
    SUSPEND = "suspend"
    REACTIVATE = "reactivate"


# (current status, action) -> next status. REJECTED has no outgoing edge.
ADMIN_STATUS_TRANSITIONS = {
    (AdminStatus.PENDING, AdminAction.APPROVE): AdminStatus.APPROVED,
    (AdminStatus.PENDING, AdminAction.REJECT): AdminStatus.REJECTED,
    (AdminStatus.APPROVED, AdminAction.SUSPEND): AdminStatus.SUSPENDED,
    (AdminStatus.SUSPENDED, AdminAction.REACTIVATE): AdminStatus.APPROVED,
}

# Actions that must carry a reason
ACTIONS_REQUIRING_REASON = frozenset({AdminAction.REJECT, AdminAction.SUSPEND})


def next_admin_status(current: AdminStatus, action: AdminAction) -> Optional[AdminStatus]:
    """Return the status reached by action, or None if the transition is not allowed."""
    return ADMIN_STATUS_TRANSITIONS.get((current, action))


class Admin(Base):
    """Administrator or staff member of one institution."""

    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    email = Column(String(100), index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(SQLEnum(AdminRole), nullable=False, default=AdminRole.STAFF)
    status = Column(SQLEnum(AdminStatus), nullable=False, default=AdminStatus.PENDING)
    approved_by = Column(Integer, ForeignKey("system_admins.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    institution = relationship("Institution", back_populates="admins", foreign_keys=[institution_id])
    approver = relationship("SystemAdmin", foreign_keys=[approved_by])

    __table_args__ = (
        UniqueConstraint("institution_id", "email", name="uq_admin_institution_email"),
    )

    @property
    def can_act(self) -> bool:
        return self.status == AdminStatus.APPROVED and self.is_active

    def __repr__(self):
        return f"<Admin(id={self.id}, email={self.email}, role={self.role}, status={self.status})>"
