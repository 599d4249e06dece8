"""Category and question data access."""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.assignment import QuestionAssignment
from app.models.category import Category
from app.models.question import Question, QuestionType
from app.models.response import QuestionResponse


class CategoryRepository:
    """Category queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, category_id: int) -> Optional[Category]:
        return self.db.query(Category).filter(Category.id == category_id).first()

    def get_by_institution_and_name(self, institution_id: int, name: str) -> Optional[Category]:
        return (
            self.db.query(Category)
            .filter(Category.institution_id == institution_id, Category.name == name)
            .first()
        )

    def get_by_institution(self, institution_id: int, active_only: bool = False) -> List[Category]:
        query = self.db.query(Category).filter(Category.institution_id == institution_id)
        if active_only:
            query = query.filter(Category.is_active.is_(True))
        return query.order_by(Category.name).all()

    def count_questions(self, category_id: int) -> int:
        return (
            self.db.query(func.count(Question.id))
            .filter(Question.category_id == category_id, Question.is_active.is_(True))
            .scalar()
            or 0
        )

    def create(self, **kwargs) -> Category:
        category = Category(**kwargs)
        self.db.add(category)
        self.db.commit()
        self.db.refresh(category)
        return category

    def save(self, category: Category) -> Category:
        self.db.commit()
        self.db.refresh(category)
        return category


class QuestionRepository:
    """Question queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, question_id: int) -> Optional[Question]:
        return self.db.query(Question).filter(Question.id == question_id).first()

    def get_by_institution(
        self,
        institution_id: int,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
        is_active: Optional[bool] = None,
        question_type: Optional[QuestionType] = None,
    ) -> List[Question]:
        query = self.db.query(Question).filter(Question.institution_id == institution_id)
        if uncategorized:
            query = query.filter(Question.category_id.is_(None))
        elif category_id is not None:
            query = query.filter(Question.category_id == category_id)
        if is_active is not None:
            query = query.filter(Question.is_active.is_(is_active))
        if question_type is not None:
            query = query.filter(Question.question_type == question_type)
        return query.order_by(Question.created_at.desc(), Question.id.desc()).all()

    def count_by_institution(self, institution_id: int, is_active: Optional[bool] = None) -> int:
        query = self.db.query(func.count(Question.id)).filter(Question.institution_id == institution_id)
        if is_active is not None:
            query = query.filter(Question.is_active.is_(is_active))
        return query.scalar() or 0

    def count_assignments(self, question_id: int) -> int:
        return (
            self.db.query(func.count(QuestionAssignment.id))
            .filter(QuestionAssignment.question_id == question_id)
            .scalar()
            or 0
        )

    def count_responses(self, question_id: int) -> int:
        return (
            self.db.query(func.count(QuestionResponse.id))
            .filter(QuestionResponse.question_id == question_id)
            .scalar()
            or 0
        )

    def create(self, **kwargs) -> Question:
        question = Question(**kwargs)
        self.db.add(question)
        self.db.commit()
        self.db.refresh(question)
        return question

    def save(self, question: Question) -> Question:
        self.db.commit()
        self.db.refresh(question)
        return question
