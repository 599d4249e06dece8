"""
Response reporting for admins.

Users may answer the same assignment several times a day and every
submission is stored. Reports read the latest submission per
(day, question, user) and tell how many submissions it replaced; the
history view returns every row.
"""
import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.clock import day_bounds, local_date
from app.core.exceptions import ResponseNotFound, UserNotFound, ValidationFailed
from app.models.response import QuestionResponse
from app.repositories.response_repository import ResponseRepository
from app.repositories.user_repository import UserRepository
from app.schemas.response import (
    AssignmentResponseSummary,
    ResponseHistory,
    ResponseItem,
    UserResponseSummary,
)
from app.services.assignment_service import AssignmentService
from app.services.question_service import QuestionService
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)

GroupKey = Tuple[date, int, int]


def group_key(response: QuestionResponse) -> GroupKey:
    return local_date(response.submitted_at), response.question_id, response.user_id


def to_response_item(response: QuestionResponse, count: int = 1) -> ResponseItem:
    return ResponseItem(
        id=response.id,
        assignment_id=response.assignment_id,
        user_id=response.user_id,
        user_name=response.user.name if response.user else None,
        question_id=response.question_id,
        question_title=response.question.title if response.question else None,
        question_type=response.question.question_type if response.question else None,
        response_data=response.response_data or {},
        response_text=response.response_text,
        other_response=response.other_response,
        response_time_seconds=response.response_time_seconds,
        submitted_at=response.submitted_at,
        is_modified=count > 1,
        modification_count=count,
    )


def latest_per_day(responses: List[QuestionResponse]) -> List[ResponseItem]:
    """Keep the newest row of each (day, question, user) group, newest first."""
    latest: Dict[GroupKey, QuestionResponse] = {}
    counts: Dict[GroupKey, int] = {}
    for response in responses:
        key = group_key(response)
        counts[key] = counts.get(key, 0) + 1
        current = latest.get(key)
        if current is None or (response.submitted_at, response.id) > (current.submitted_at, current.id):
            latest[key] = response

    items = [to_response_item(response, counts[key]) for key, response in latest.items()]
    items.sort(key=lambda item: (item.submitted_at, item.id), reverse=True)
    return items


def with_group_counts(responses: List[QuestionResponse]) -> List[ResponseItem]:
    """Every row, each carrying the size of its (day, question, user) group."""
    counts: Dict[GroupKey, int] = {}
    for response in responses:
        key = group_key(response)
        counts[key] = counts.get(key, 0) + 1
    items = [to_response_item(response, counts[group_key(response)]) for response in responses]
    items.sort(key=lambda item: (item.submitted_at, item.id), reverse=True)
    return items


class ResponseService:
    """Tenant-scoped response reports."""

    def __init__(self, db: Session):
        self.db = db
        self.response_repo = ResponseRepository(db)
        self.user_repo = UserRepository(db)
        self.assignment_service = AssignmentService(db)
        self.question_service = QuestionService(db)

    def _get_user(self, user_id: int, institution_id: int):
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        ensure_same_institution(user.institution_id, institution_id, "user")
        return user

    def get_user_responses(self, user_id: int, institution_id: int) -> UserResponseSummary:
        """
        Latest responses of a user.

        Raises:
            UserNotFound, InstitutionAccessDenied
        """
        user = self._get_user(user_id, institution_id)
        items = latest_per_day(self.response_repo.get_by_user(user.id))
        return UserResponseSummary(
            user_id=user.id,
            user_name=user.name,
            total_responses=len(items),
            latest_response_at=items[0].submitted_at if items else None,
            responses=items,
        )

    def get_assignment_responses(self, assignment_id: int, institution_id: int) -> AssignmentResponseSummary:
        """
        Latest responses to an assignment.

        Raises:
            QuestionAssignmentNotFound, InstitutionAccessDenied
            ResponseNotFound: If nobody answered yet
        """
        assignment = self.assignment_service.get_assignment(assignment_id, institution_id)
        responses = self.response_repo.get_by_assignment(assignment.id)
        if not responses:
            raise ResponseNotFound("No responses for this assignment")
        items = latest_per_day(responses)
        question = assignment.question
        return AssignmentResponseSummary(
            assignment_id=assignment.id,
            question_id=question.id,
            question_title=question.title,
            question_type=question.question_type,
            total_responses=len(items),
            responses=items,
        )

    def get_user_responses_between(self, user_id: int, start_date: date, end_date: date,
                                   institution_id: int) -> List[ResponseItem]:
        """
        Latest responses of a user between two days, both inclusive.

        Raises:
            ValidationFailed: If start_date is after end_date
            UserNotFound, InstitutionAccessDenied
        """
        if start_date > end_date:
            raise ValidationFailed("start_date must not be after end_date")
        user = self._get_user(user_id, institution_id)
        start, _ = day_bounds(start_date)
        _, end = day_bounds(end_date)
        return latest_per_day(self.response_repo.get_by_user_between(user.id, start, end))

    def get_recent_responses(self, institution_id: int, limit: int = 20) -> List[ResponseItem]:
        """Latest responses across the institution, drawn from the newest `limit` rows."""
        return latest_per_day(self.response_repo.get_recent(institution_id, limit))

    def get_history(self, question_id: int, user_id: int, institution_id: int,
                    on_date: Optional[date] = None) -> ResponseHistory:
        """
        Every submission of a user to a question.

        Raises:
            QuestionNotFound, UserNotFound, InstitutionAccessDenied
        """
        question = self.question_service.get_question(question_id, institution_id)
        user = self._get_user(user_id, institution_id)
        start = end = None
        if on_date is not None:
            start, end = day_bounds(on_date)
        items = with_group_counts(self.response_repo.get_history(question.id, user.id, start, end))
        return ResponseHistory(
            question_id=question.id,
            user_id=user.id,
            on_date=on_date,
            total_responses=len(items),
            responses=items,
        )
