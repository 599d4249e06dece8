"""Question assignment data access."""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.assignment import QuestionAssignment
from app.models.response import QuestionResponse


class AssignmentRepository:
    """Assignment queries."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(QuestionAssignment).options(
            joinedload(QuestionAssignment.question),
            joinedload(QuestionAssignment.user),
            joinedload(QuestionAssignment.group),
            joinedload(QuestionAssignment.assigner),
        )

    def get_by_id(self, assignment_id: int) -> Optional[QuestionAssignment]:
        return self._query().filter(QuestionAssignment.id == assignment_id).first()

    def get_by_question_and_user(self, question_id: int, user_id: int) -> Optional[QuestionAssignment]:
        return (
            self.db.query(QuestionAssignment)
            .filter(QuestionAssignment.question_id == question_id, QuestionAssignment.user_id == user_id)
            .first()
        )

    def get_by_question_and_group(self, question_id: int, group_id: int) -> Optional[QuestionAssignment]:
        return (
            self.db.query(QuestionAssignment)
            .filter(QuestionAssignment.question_id == question_id, QuestionAssignment.group_id == group_id)
            .first()
        )

    def get_by_institution(self, institution_id: int) -> List[QuestionAssignment]:
        return (
            self._query()
            .filter(QuestionAssignment.institution_id == institution_id)
            .order_by(QuestionAssignment.assigned_at.desc(), QuestionAssignment.id.desc())
            .all()
        )

    def get_by_user(self, user_id: int) -> List[QuestionAssignment]:
        return (
            self._query()
            .filter(QuestionAssignment.user_id == user_id)
            .order_by(QuestionAssignment.priority, QuestionAssignment.assigned_at.desc())
            .all()
        )

    def get_by_group(self, group_id: int) -> List[QuestionAssignment]:
        return (
            self._query()
            .filter(QuestionAssignment.group_id == group_id)
            .order_by(QuestionAssignment.priority, QuestionAssignment.assigned_at.desc())
            .all()
        )

    def get_by_groups(self, group_ids: List[int]) -> List[QuestionAssignment]:
        if not group_ids:
            return []
        return self._query().filter(QuestionAssignment.group_id.in_(group_ids)).all()

    def count_by_institution(self, institution_id: int, target: Optional[str] = None) -> int:
        query = self.db.query(func.count(QuestionAssignment.id)).filter(
            QuestionAssignment.institution_id == institution_id
        )
        if target == "user":
            query = query.filter(QuestionAssignment.user_id.isnot(None))
        elif target == "group":
            query = query.filter(QuestionAssignment.group_id.isnot(None))
        return query.scalar() or 0

    def count_by_group(self, group_id: int) -> int:
        return (
            self.db.query(func.count(QuestionAssignment.id))
            .filter(QuestionAssignment.group_id == group_id)
            .scalar()
            or 0
        )

    def count_responses(self, assignment_id: int) -> int:
        return (
            self.db.query(func.count(QuestionResponse.id))
            .filter(QuestionResponse.assignment_id == assignment_id)
            .scalar()
            or 0
        )

    def create(self, **kwargs) -> QuestionAssignment:
        assignment = QuestionAssignment(**kwargs)
        self.db.add(assignment)
        self.db.commit()
        return self.get_by_id(assignment.id)

    def save(self, assignment: QuestionAssignment) -> QuestionAssignment:
        self.db.commit()
        self.db.refresh(assignment)
        return assignment

    def delete(self, assignment: QuestionAssignment) -> None:
        self.db.delete(assignment)
        self.db.commit()
