"""Question response schemas."""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, NonNegativeInt

from app.models.question import QuestionType
from app.schemas.assignment import AssignmentSource
from app.schemas.common import JSONDocument


class ResponseSubmit(BaseModel):
    """A user's answer to an assigned question."""
    response_data: JSONDocument
    response_text: Optional[str] = None
    other_response: Optional[str] = None
    response_time_seconds: Optional[NonNegativeInt] = None
    device_info: Optional[JSONDocument] = None


class AssignedResponseSubmit(ResponseSubmit):
    """A submission that names its assignment in the body."""
    assignment_id: int


class ResponseItem(BaseModel):
    """One response row, as shown in reports."""
    id: int
    assignment_id: int
    user_id: int
    user_name: Optional[str] = None
    question_id: int
    question_title: Optional[str] = None
    question_type: Optional[QuestionType] = None
    response_data: JSONDocument = Field(default_factory=dict)
    response_text: Optional[str] = None
    other_response: Optional[str] = None
    response_time_seconds: Optional[int] = None
    submitted_at: datetime
    is_modified: bool = False
    modification_count: int = 1


class UserResponseSummary(BaseModel):
    user_id: int
    user_name: str
    total_responses: int
    latest_response_at: Optional[datetime] = None
    responses: List[ResponseItem]


class AssignmentResponseSummary(BaseModel):
    assignment_id: int
    question_id: int
    question_title: str
    question_type: QuestionType
    total_responses: int
    responses: List[ResponseItem]


class ResponseHistory(BaseModel):
    """Every submission of one user to one question, optionally within one day."""
    question_id: int
    user_id: int
    on_date: Optional[date] = None
    total_responses: int
    responses: List[ResponseItem]


class MyQuestion(BaseModel):
    """A question in the user's own list."""
    assignment_id: int
    question_id: int
    title: str
    content: str
    question_type: QuestionType
    options: Optional[JSONDocument] = None
    allow_other_option: bool
    other_option_label: Optional[str] = None
    other_option_placeholder: Optional[str] = None
    is_required: bool
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    priority: int
    assigned_at: datetime
    assignment_source: AssignmentSource
    source_id: int
    source_name: str
    is_completed: bool
    latest_response: Optional[ResponseItem] = None


class MyQuestionStatistics(BaseModel):
    total_questions: int
    completed_questions: int
    pending_questions: int
    completion_rate: int
