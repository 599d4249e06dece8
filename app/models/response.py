"""Question response model."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.core.database import Base


class QuestionResponse(Base):
    """
    One submission of an answer to an assignment.
    Users may resubmit; every submission is a new row and reporting
    picks the latest per (day, question, user).
    """

    __tablename__ = "question_responses"

    id = Column(Integer, primary_key=True, index=True)
    assignment_id = Column(Integer, ForeignKey("question_assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)

    # Flexible answer storage
    response_data = Column(JSON, nullable=False, default=dict)
    response_text = Column(Text, nullable=True)
    other_response = Column(Text, nullable=True)
    response_time_seconds = Column(Integer, nullable=True)

    # Metadata
    device_info = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    assignment = relationship("QuestionAssignment", back_populates="responses")
    user = relationship("User")
    question = relationship("Question")

    def __repr__(self):
        return f"<QuestionResponse(id={self.id}, assignment_id={self.assignment_id}, user_id={self.user_id})>"
