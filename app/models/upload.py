"""User upload models."""
from enum import Enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.database import Base


class FileType(str, Enum):
    """Kinds of attachment."""
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"
    VIDEO = "VIDEO"
    DOCUMENT = "DOCUMENT"
    TEXT = "TEXT"


class Upload(Base):
    """Content posted by a user, optionally answered once by an admin."""

    __tablename__ = "uploads"

    id = Column(Integer, primary_key=True, index=True)
    institution_id = Column(Integer, ForeignKey("institutions.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(200), nullable=True)
    content = Column(Text, nullable=True)
    location_name = Column(String(100), nullable=True)

    # Admin response
    admin_read = Column(Boolean, default=False, nullable=False)
    admin_response = Column(Text, nullable=True)
    admin_response_date = Column(DateTime(timezone=True), nullable=True)
    admin_id = Column(Integer, ForeignKey("admins.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    institution = relationship("Institution")
    user = relationship("User")
    admin = relationship("Admin", foreign_keys=[admin_id])
    files = relationship("UploadFile", back_populates="upload", cascade="all, delete-orphan",
                         order_by="UploadFile.upload_order")

    def __repr__(self):
        return f"<Upload(id={self.id}, user_id={self.user_id}, admin_read={self.admin_read})>"


class UploadFile(Base):
    """A stored file attached to an upload."""

    __tablename__ = "upload_files"

    id = Column(Integer, primary_key=True, index=True)
    upload_id = Column(Integer, ForeignKey("uploads.id", ondelete="CASCADE"), nullable=False, index=True)
    file_type = Column(SQLEnum(FileType), nullable=False)
    file_name = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=True)
    file_path = Column(String(500), nullable=False)
    file_size = Column(Integer, nullable=True)
    mime_type = Column(String(100), nullable=True)
    upload_order = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    upload = relationship("Upload", back_populates="files")

    def __repr__(self):
        return f"<UploadFile(id={self.id}, file_name={self.file_name}, type={self.file_type})>"
