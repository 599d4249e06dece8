"""Question assignment schemas."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from app.models.question import QuestionType


class AssignmentSource(str, Enum):
    """How a question reached a user."""
    USER = "USER"
    GROUP = "GROUP"


class AssignmentCreate(BaseModel):
    """Assign a question to exactly one of a user or a group."""
    question_id: int
    user_id: Optional[int] = None
    group_id: Optional[int] = None
    priority: int = Field(default=5, ge=1)


class AssignmentUpdate(BaseModel):
    """Partial update."""
    priority: Optional[int] = Field(default=None, ge=1)


class AssignmentResponse(BaseModel):
    """Assignment as returned to admins."""
    id: int
    question_id: int
    question_title: str
    question_content: str
    question_type: QuestionType
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    group_id: Optional[int] = None
    group_name: Optional[str] = None
    priority: int
    assigned_by: Optional[int] = None
    assigned_by_name: Optional[str] = None
    assigned_at: datetime
    response_count: int = 0


class AssignmentStatistics(BaseModel):
    total_assignments: int
    user_assignments: int
    group_assignments: int
