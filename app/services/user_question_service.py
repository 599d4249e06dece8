"""Questions as seen by the user who answers them."""
import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.clock import day_bounds, today, utcnow
from app.core.exceptions import NotAssignmentTarget, QuestionAssignmentNotFound, QuestionNotFound
from app.models.assignment import QuestionAssignment
from app.models.user import User
from app.repositories.assignment_repository import AssignmentRepository
from app.repositories.group_repository import GroupRepository
from app.repositories.response_repository import ResponseRepository
from app.schemas.assignment import AssignmentSource
from app.schemas.response import MyQuestion, MyQuestionStatistics, ResponseItem, ResponseSubmit
from app.services.question_rules import validate_answer
from app.services.response_service import to_response_item

logger = logging.getLogger(__name__)


def _rank(assignment: QuestionAssignment) -> Tuple[int, int]:
    # Direct assignments win over group ones, then the lowest priority value.
    return (0 if assignment.user_id is not None else 1, assignment.priority)


class UserQuestionService:
    """Assigned questions and response submission for one user."""

    def __init__(self, db: Session):
        self.db = db
        self.assignment_repo = AssignmentRepository(db)
        self.group_repo = GroupRepository(db)
        self.response_repo = ResponseRepository(db)

    def _effective_assignments(self, user: User) -> List[QuestionAssignment]:
        """One assignment per active question reaching the user."""
        group_ids = self.group_repo.get_active_group_ids_for_user(user.id)
        candidates = self.assignment_repo.get_by_user(user.id) + self.assignment_repo.get_by_groups(group_ids)

        chosen: Dict[int, QuestionAssignment] = {}
        for assignment in candidates:
            if not assignment.question.is_active:
                continue
            current = chosen.get(assignment.question_id)
            if current is None or _rank(assignment) < _rank(current):
                chosen[assignment.question_id] = assignment
        return list(chosen.values())

    def _to_my_question(self, assignment: QuestionAssignment, user: User, day: date) -> MyQuestion:
        start, _ = day_bounds(day)
        latest = self.response_repo.get_latest_for_assignment_user(assignment.id, user.id, since=start)
        question = assignment.question
        if assignment.user_id is not None:
            source, source_id, source_name = AssignmentSource.USER, user.id, user.name
        else:
            source, source_id, source_name = AssignmentSource.GROUP, assignment.group_id, assignment.group.name

        return MyQuestion(
            assignment_id=assignment.id,
            question_id=question.id,
            title=question.title,
            content=question.content,
            question_type=question.question_type,
            options=question.options,
            allow_other_option=question.allow_other_option,
            other_option_label=question.other_option_label,
            other_option_placeholder=question.other_option_placeholder,
            is_required=question.is_required,
            category_id=question.category_id,
            category_name=question.category.name if question.category else None,
            priority=assignment.priority,
            assigned_at=assignment.assigned_at,
            assignment_source=source,
            source_id=source_id,
            source_name=source_name,
            is_completed=latest is not None,
            latest_response=to_response_item(latest) if latest else None,
        )

    def get_my_questions(self, user: User) -> List[MyQuestion]:
        """
        Questions assigned to the user directly or through an active group
        membership. Unanswered-today questions come first, then by priority,
        then the most recently assigned.
        """
        current_day = today()
        questions = [self._to_my_question(a, user, current_day) for a in self._effective_assignments(user)]
        questions.sort(key=lambda q: q.assigned_at, reverse=True)
        questions.sort(key=lambda q: (q.is_completed, q.priority))
        return questions

    def get_pending_questions(self, user: User) -> List[MyQuestion]:
        return [q for q in self.get_my_questions(user) if not q.is_completed]

    def get_completed_questions(self, user: User) -> List[MyQuestion]:
        return [q for q in self.get_my_questions(user) if q.is_completed]

    def get_statistics(self, user: User) -> MyQuestionStatistics:
        questions = self.get_my_questions(user)
        total = len(questions)
        completed = sum(1 for q in questions if q.is_completed)
        return MyQuestionStatistics(
            total_questions=total,
            completed_questions=completed,
            pending_questions=total - completed,
            completion_rate=round(completed * 100 / total) if total else 0,
        )

    def _get_target_assignment(self, assignment_id: int, user: User) -> QuestionAssignment:
        """
        Raises:
            QuestionAssignmentNotFound: If assignment not found
            NotAssignmentTarget: If the user is neither the target nor an active member of the target group
        """
        assignment = self.assignment_repo.get_by_id(assignment_id)
        if not assignment:
            raise QuestionAssignmentNotFound()
        if assignment.user_id is not None:
            allowed = assignment.user_id == user.id
        else:
            allowed = self.group_repo.is_active_member(assignment.group_id, user.id)
        if not allowed:
            raise NotAssignmentTarget()
        return assignment

    def get_my_question(self, assignment_id: int, user: User) -> MyQuestion:
        assignment = self._get_target_assignment(assignment_id, user)
        return self._to_my_question(assignment, user, today())

    def submit_response(
        self,
        assignment_id: int,
        data: ResponseSubmit,
        user: User,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> ResponseItem:
        """
        Store a new submission. Earlier submissions are never overwritten.

        Raises:
            QuestionAssignmentNotFound, NotAssignmentTarget
            QuestionNotFound: If the question has been deactivated
            InvalidResponseData: If the answer does not fit the question type
        """
        assignment = self._get_target_assignment(assignment_id, user)
        question = assignment.question
        if not question.is_active:
            raise QuestionNotFound("Question is no longer active")
        validate_answer(question, data.response_data, data.other_response)

        response = self.response_repo.create(
            assignment_id=assignment.id,
            user_id=user.id,
            question_id=question.id,
            institution_id=user.institution_id,
            response_data=data.response_data,
            response_text=data.response_text,
            other_response=data.other_response,
            response_time_seconds=data.response_time_seconds,
            device_info=data.device_info,
            ip_address=ip_address,
            user_agent=user_agent,
            submitted_at=utcnow(),
        )
        logger.info("Response %s submitted by user %s for assignment %s", response.id, user.id, assignment.id)
        return to_response_item(response)
