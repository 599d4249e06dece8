"""Question category model."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class Category(Base):
    """Grouping of questions within an institution."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    image_path = Column(String(500), nullable=True)
    created_by = Column(Integer, ForeignKey("admins.id"), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    institution = relationship("Institution")
    creator = relationship("Admin", foreign_keys=[created_by])
    questions = relationship("Question", back_populates="category")

    __table_args__ = (
        UniqueConstraint("institution_id", "name", name="uq_category_institution_name"),
    )

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"
