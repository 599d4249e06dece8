"""Question service."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import QuestionNotFound
from app.models.admin import Admin
from app.models.question import Question, QuestionType
from app.repositories.question_repository import QuestionRepository
from app.schemas.question import (
    QuestionCreate,
    QuestionResponseModel,
    QuestionStatistics,
    QuestionUpdate,
)
from app.services.category_service import CategoryService
from app.services.question_rules import validate_options
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)


class QuestionService:
    """Question business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.question_repo = QuestionRepository(db)
        self.category_service = CategoryService(db)

    def get_question(self, question_id: int, institution_id: int) -> Question:
        """
        Get question by ID within the institution.

        Raises:
            QuestionNotFound: If question not found
            InstitutionAccessDenied: If question belongs to another institution
        """
        question = self.question_repo.get_by_id(question_id)
        if not question:
            raise QuestionNotFound()
        ensure_same_institution(question.institution_id, institution_id, "question")
        return question

    def get_questions(
        self,
        institution_id: int,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
        is_active: Optional[bool] = None,
        question_type: Optional[QuestionType] = None,
    ) -> List[QuestionResponseModel]:
        """List questions with optional filters."""
        if category_id is not None and not uncategorized:
            self.category_service.get_category(category_id, institution_id)
        questions = self.question_repo.get_by_institution(
            institution_id,
            category_id=category_id,
            uncategorized=uncategorized,
            is_active=is_active,
            question_type=question_type,
        )
        return [self.to_response(question) for question in questions]

    def get_statistics(self, institution_id: int) -> QuestionStatistics:
        total = self.question_repo.count_by_institution(institution_id)
        active = self.question_repo.count_by_institution(institution_id, is_active=True)
        return QuestionStatistics(
            total_questions=total,
            active_questions=active,
            inactive_questions=total - active,
        )

    def create_question(self, data: QuestionCreate, admin: Admin) -> QuestionResponseModel:
        """
        Create a question in the admin's institution.

        Raises:
            CategoryNotFound, InstitutionAccessDenied: If the category is not usable
            ValidationFailed: If the options do not fit the question type
        """
        if data.category_id is not None:
            self.category_service.get_category(data.category_id, admin.institution_id)
        validate_options(data.question_type, data.options)

        question = self.question_repo.create(
            institution_id=admin.institution_id,
            created_by=admin.id,
            **data.model_dump(),
        )
        logger.info("Question created: %s (%s)", question.id, question.question_type.value)
        return self.to_response(question)

    def update_question(self, question_id: int, data: QuestionUpdate, admin: Admin) -> QuestionResponseModel:
        """
        Update a question; only provided fields change.

        Raises:
            QuestionNotFound, InstitutionAccessDenied, CategoryNotFound, ValidationFailed
        """
        question = self.get_question(question_id, admin.institution_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("category_id") is not None:
            self.category_service.get_category(changes["category_id"], admin.institution_id)
        if "question_type" in changes or "options" in changes:
            validate_options(
                changes.get("question_type") or question.question_type,
                changes["options"] if "options" in changes else question.options,
            )

        for key, value in changes.items():
            if key in ("question_type", "title", "content", "is_required", "is_active",
                       "allow_other_option") and value is None:
                continue
            setattr(question, key, value)
        return self.to_response(self.question_repo.save(question))

    def delete_question(self, question_id: int, admin: Admin) -> None:
        """Soft delete a question."""
        question = self.get_question(question_id, admin.institution_id)
        question.is_active = False
        self.question_repo.save(question)
        logger.info("Question deactivated: %s", question_id)

    def to_response(self, question: Question) -> QuestionResponseModel:
        return QuestionResponseModel(
            id=question.id,
            institution_id=question.institution_id,
            category_id=question.category_id,
            category_name=question.category.name if question.category else None,
            title=question.title,
            content=question.content,
            question_type=question.question_type,
            options=question.options,
            allow_other_option=question.allow_other_option,
            other_option_label=question.other_option_label,
            other_option_placeholder=question.other_option_placeholder,
            is_required=question.is_required,
            is_active=question.is_active,
            created_by=question.created_by,
            created_by_name=question.creator.name if question.creator else None,
            assignment_count=self.question_repo.count_assignments(question.id),
            response_count=self.question_repo.count_responses(question.id),
            created_at=question.created_at,
            updated_at=question.updated_at,
        )
