"""End-user model."""
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, Boolean, Date, DateTime, Text, ForeignKey, JSON,
    Enum as SQLEnum, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class SeverityLevel(str, Enum):
    """Care severity of a user."""
    MILD = "MILD"
    MODERATE = "MODERATE"
    SEVERE = "SEVERE"


class User(Base):
    """Person served by an institution."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    username = Column(String(50), nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    birth_date = Column(Date, nullable=True)
    severity = Column(SQLEnum(SeverityLevel), nullable=False, default=SeverityLevel.MILD)

    # Guardian
    guardian_name = Column(String(50), nullable=True)
    guardian_relationship = Column(String(20), nullable=True)
    guardian_phone = Column(String(20), nullable=True)
    guardian_email = Column(String(100), nullable=True)
    guardian_address = Column(Text, nullable=True)

    emergency_contacts = Column(JSON, nullable=False, default=list)  # [{name, phone, relation}]
    care_notes = Column(Text, nullable=True)
    fcm_token = Column(String(255), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    institution = relationship("Institution", back_populates="users")
    memberships = relationship("UserGroupMember", back_populates="user", cascade="all, delete-orphan",
                               foreign_keys="UserGroupMember.user_id")

    __table_args__ = (
        UniqueConstraint("institution_id", "username", name="uq_user_institution_username"),
    )

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, institution_id={self.institution_id})>"
