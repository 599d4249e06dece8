"""User group models."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class UserGroup(Base):
    """Named set of users inside one institution."""

    __tablename__ = "user_groups"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    member_count = Column(Integer, default=0, nullable=False)
    created_by = Column(Integer, ForeignKey("admins.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    institution = relationship("Institution")
    creator = relationship("Admin", foreign_keys=[created_by])
    members = relationship("UserGroupMember", back_populates="group", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("institution_id", "name", name="uq_group_institution_name"),
    )

    def __repr__(self):
        return f"<UserGroup(id={self.id}, name={self.name})>"


class UserGroupMember(Base):
    """Membership of a user in a group."""

    __tablename__ = "user_group_members"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("user_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    added_by = Column(Integer, ForeignKey("admins.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    group = relationship("UserGroup", back_populates="members")
    user = relationship("User", back_populates="memberships", foreign_keys=[user_id])

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_member"),
    )

    def __repr__(self):
        return f"<UserGroupMember(group_id={self.group_id}, user_id={self.user_id})>"
