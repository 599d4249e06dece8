"""Category schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    image_path: Optional[str] = Field(default=None, max_length=500)


class CategoryUpdate(BaseModel):
    """Partial update."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    image_path: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class CategoryResponse(BaseModel):
    id: int
    institution_id: int
    institution_name: str
    name: str
    description: Optional[str] = None
    image_path: Optional[str] = None
    is_active: bool
    question_count: int = 0
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
