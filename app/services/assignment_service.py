"""Question assignment service."""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import (
    InvalidAssignmentTarget,
    QuestionAlreadyAssigned,
    QuestionAssignmentNotFound,
    UserGroupNotFound,
    UserNotFound,
)
from app.models.admin import Admin
from app.models.assignment import QuestionAssignment
from app.repositories.assignment_repository import AssignmentRepository
from app.repositories.group_repository import GroupRepository
from app.repositories.user_repository import UserRepository
from app.schemas.assignment import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentStatistics,
    AssignmentUpdate,
)
from app.services.question_service import QuestionService
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)


class AssignmentService:
    """Assigns questions to users or groups."""

    def __init__(self, db: Session):
        self.db = db
        self.assignment_repo = AssignmentRepository(db)
        self.user_repo = UserRepository(db)
        self.group_repo = GroupRepository(db)
        self.question_service = QuestionService(db)

    def get_assignment(self, assignment_id: int, institution_id: int) -> QuestionAssignment:
        """
        Get assignment by ID within the institution.

        Raises:
            QuestionAssignmentNotFound: If assignment not found
            InstitutionAccessDenied: If assignment belongs to another institution
        """
        assignment = self.assignment_repo.get_by_id(assignment_id)
        if not assignment:
            raise QuestionAssignmentNotFound()
        ensure_same_institution(assignment.institution_id, institution_id, "assignment")
        return assignment

    def create_assignment(self, data: AssignmentCreate, admin: Admin) -> AssignmentResponse:
        """
        Assign a question to exactly one user or one group.

        Raises:
            InvalidAssignmentTarget: If both or neither of user_id and group_id are given
            QuestionNotFound, UserNotFound, UserGroupNotFound: If a referenced row is missing
            InstitutionAccessDenied: If the question or target belongs to another institution
            QuestionAlreadyAssigned: If the pair already exists
        """
        if (data.user_id is None) == (data.group_id is None):
            raise InvalidAssignmentTarget()

        institution_id = admin.institution_id
        question = self.question_service.get_question(data.question_id, institution_id)

        if data.user_id is not None:
            user = self.user_repo.get_by_id(data.user_id)
            if not user:
                raise UserNotFound()
            ensure_same_institution(user.institution_id, institution_id, "user")
            if self.assignment_repo.get_by_question_and_user(question.id, user.id):
                raise QuestionAlreadyAssigned()
        else:
            group = self.group_repo.get_by_id(data.group_id)
            if not group:
                raise UserGroupNotFound()
            ensure_same_institution(group.institution_id, institution_id, "user group")
            if self.assignment_repo.get_by_question_and_group(question.id, group.id):
                raise QuestionAlreadyAssigned()

        assignment = self.assignment_repo.create(
            institution_id=institution_id,
            question_id=question.id,
            user_id=data.user_id,
            group_id=data.group_id,
            priority=data.priority,
            assigned_by=admin.id,
        )
        logger.info(
            "Question %s assigned to %s %s by admin %s",
            question.id,
            "user" if data.user_id is not None else "group",
            data.user_id if data.user_id is not None else data.group_id,
            admin.id,
        )
        return self.to_response(assignment)

    def get_assignments(self, institution_id: int) -> List[AssignmentResponse]:
        return [self.to_response(a) for a in self.assignment_repo.get_by_institution(institution_id)]

    def get_user_assignments(self, user_id: int, institution_id: int) -> List[AssignmentResponse]:
        """
        Direct assignments of a user.

        Raises:
            UserNotFound, InstitutionAccessDenied
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        ensure_same_institution(user.institution_id, institution_id, "user")
        return [self.to_response(a) for a in self.assignment_repo.get_by_user(user.id)]

    def get_group_assignments(self, group_id: int, institution_id: int) -> List[AssignmentResponse]:
        """
        Assignments of a group.

        Raises:
            UserGroupNotFound, InstitutionAccessDenied
        """
        group = self.group_repo.get_by_id(group_id)
        if not group:
            raise UserGroupNotFound()
        ensure_same_institution(group.institution_id, institution_id, "user group")
        return [self.to_response(a) for a in self.assignment_repo.get_by_group(group.id)]

    def get_statistics(self, institution_id: int) -> AssignmentStatistics:
        return AssignmentStatistics(
            total_assignments=self.assignment_repo.count_by_institution(institution_id),
            user_assignments=self.assignment_repo.count_by_institution(institution_id, target="user"),
            group_assignments=self.assignment_repo.count_by_institution(institution_id, target="group"),
        )

    def update_assignment(self, assignment_id: int, data: AssignmentUpdate, admin: Admin) -> AssignmentResponse:
        assignment = self.get_assignment(assignment_id, admin.institution_id)
        if data.priority is not None:
            assignment.priority = data.priority
        return self.to_response(self.assignment_repo.save(assignment))

    def delete_assignment(self, assignment_id: int, admin: Admin) -> None:
        """Remove an assignment together with its responses."""
        assignment = self.get_assignment(assignment_id, admin.institution_id)
        self.assignment_repo.delete(assignment)
        logger.info("Assignment deleted: %s", assignment_id)

    def to_response(self, assignment: QuestionAssignment) -> AssignmentResponse:
        question = assignment.question
        return AssignmentResponse(
            id=assignment.id,
            question_id=question.id,
            question_title=question.title,
            question_content=question.content,
            question_type=question.question_type,
            user_id=assignment.user_id,
            user_name=assignment.user.name if assignment.user else None,
            group_id=assignment.group_id,
            group_name=assignment.group.name if assignment.group else None,
            priority=assignment.priority,
            assigned_by=assignment.assigned_by,
            assigned_by_name=assignment.assigner.name if assignment.assigner else None,
            assigned_at=assignment.assigned_at,
            response_count=self.assignment_repo.count_responses(assignment.id),
        )
