"""Question model."""
from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class QuestionType(str, Enum):
    """Supported question types."""
    SINGLE_CHOICE = "SINGLE_CHOICE"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    TEXT = "TEXT"
    SCALE = "SCALE"
    YES_NO = "YES_NO"
    DATE = "DATE"
    TIME = "TIME"


CHOICE_TYPES = frozenset({QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE})


class Question(Base):
    """
    Survey question owned by an institution.
    Options are stored as a free-form JSON document, e.g.
    {"choices": ["Good", "Bad"]} or {"min": 1, "max": 5}.
    """

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    question_type = Column(SQLEnum(QuestionType), nullable=False)
    options = Column(JSON, nullable=True)
    allow_other_option = Column(Boolean, default=False, nullable=False)
    other_option_label = Column(String(100), nullable=True, default="Other")
    other_option_placeholder = Column(String(200), nullable=True)
    is_required = Column(Boolean, default=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("admins.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    institution = relationship("Institution")
    category = relationship("Category", back_populates="questions")
    creator = relationship("Admin", foreign_keys=[created_by])
    assignments = relationship("QuestionAssignment", back_populates="question")

    def __repr__(self):
        return f"<Question(id={self.id}, title={self.title}, type={self.question_type})>"
