"""Question assignment model."""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class QuestionAssignment(Base):
    """
    Binds one question to exactly one target: a user or a user group.
    Admins assign questions; users answer them.
    """

    __tablename__ = "question_assignments"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)
    group_id = Column(Integer, ForeignKey("user_groups.id", ondelete="CASCADE"), nullable=True, index=True)
    priority = Column(Integer, default=5, nullable=False)
    assigned_by = Column(Integer, ForeignKey("admins.id"), nullable=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    question = relationship("Question", back_populates="assignments")
    user = relationship("User")
    group = relationship("UserGroup")
    assigner = relationship("Admin", foreign_keys=[assigned_by])
    responses = relationship("QuestionResponse", back_populates="assignment", cascade="all, delete-orphan")

    # A question can't be assigned twice to the same target
    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_assignment_question_user"),
        UniqueConstraint("question_id", "group_id", name="uq_assignment_question_group"),
        CheckConstraint(
            "(user_id IS NOT NULL AND group_id IS NULL) OR (user_id IS NULL AND group_id IS NOT NULL)",
            name="ck_assignment_single_target",
        ),
        CheckConstraint("priority >= 1", name="ck_assignment_priority"),
    )

    def __repr__(self):
        return f"<QuestionAssignment(id={self.id}, question_id={self.question_id}, user_id={self.user_id}, group_id={self.group_id})>"
