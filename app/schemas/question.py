"""Question schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.question import QuestionType
from app.schemas.common import JSONDocument


class QuestionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    question_type: QuestionType
    category_id: Optional[int] = None
    options: Optional[JSONDocument] = None
    allow_other_option: bool = False
    other_option_label: Optional[str] = Field(default="Other", max_length=100)
    other_option_placeholder: Optional[str] = Field(default=None, max_length=200)
    is_required: bool = True


class QuestionUpdate(BaseModel):
    """Partial update."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    question_type: Optional[QuestionType] = None
    category_id: Optional[int] = None
    options: Optional[JSONDocument] = None
    allow_other_option: Optional[bool] = None
    other_option_label: Optional[str] = Field(default=None, max_length=100)
    other_option_placeholder: Optional[str] = Field(default=None, max_length=200)
    is_required: Optional[bool] = None
    is_active: Optional[bool] = None


class QuestionResponseModel(BaseModel):
    """Question as returned to admins."""
    id: int
    institution_id: int
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    title: str
    content: str
    question_type: QuestionType
    options: Optional[JSONDocument] = None
    allow_other_option: bool
    other_option_label: Optional[str] = None
    other_option_placeholder: Optional[str] = None
    is_required: bool
    is_active: bool
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    assignment_count: int = 0
    response_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None


class QuestionStatistics(BaseModel):
    total_questions: int
    active_questions: int
    inactive_questions: int
