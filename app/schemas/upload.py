"""Upload schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.upload import FileType


class UploadFileResponse(BaseModel):
    id: int
    file_type: FileType
    file_name: str
    original_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    upload_order: int
    url: str
    created_at: datetime


class UploadResponse(BaseModel):
    """Upload detail."""
    id: int
    title: Optional[str] = None
    content: Optional[str] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    institution_id: int
    institution_name: str
    admin_read: bool
    admin_response: Optional[str] = None
    admin_response_date: Optional[datetime] = None
    admin_id: Optional[int] = None
    admin_name: Optional[str] = None
    files: List[UploadFileResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: Optional[datetime] = None


class UploadListItem(BaseModel):
    """Upload row in lists; content is shortened."""
    id: int
    title: Optional[str] = None
    content_preview: Optional[str] = None
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    institution_id: int
    admin_read: bool
    admin_response_date: Optional[datetime] = None
    file_count: int
    first_file_type: Optional[FileType] = None
    created_at: datetime


class AdminUploadReply(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    response: str = Field(min_length=1)
