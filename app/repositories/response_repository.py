"""Question response data access."""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.response import QuestionResponse


class ResponseRepository:
    """Response queries. Results are ordered newest first."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(QuestionResponse).options(
            joinedload(QuestionResponse.user),
            joinedload(QuestionResponse.question),
        )

    def get_by_user(self, user_id: int) -> List[QuestionResponse]:
        return (
            self._query()
            .filter(QuestionResponse.user_id == user_id)
            .order_by(QuestionResponse.submitted_at.desc(), QuestionResponse.id.desc())
            .all()
        )

    def get_by_assignment(self, assignment_id: int) -> List[QuestionResponse]:
        return (
            self._query()
            .filter(QuestionResponse.assignment_id == assignment_id)
            .order_by(QuestionResponse.submitted_at.desc(), QuestionResponse.id.desc())
            .all()
        )

    def get_by_user_between(self, user_id: int, start: datetime, end: datetime) -> List[QuestionResponse]:
        return (
            self._query()
            .filter(
                QuestionResponse.user_id == user_id,
                QuestionResponse.submitted_at >= start,
                QuestionResponse.submitted_at < end,
            )
            .order_by(QuestionResponse.submitted_at.desc(), QuestionResponse.id.desc())
            .all()
        )

    def get_by_institution_between(self, institution_id: int, start: datetime, end: datetime) -> List[QuestionResponse]:
        return (
            self._query()
            .filter(
                QuestionResponse.institution_id == institution_id,
                QuestionResponse.submitted_at >= start,
                QuestionResponse.submitted_at < end,
            )
            .all()
        )

    def get_recent(self, institution_id: int, limit: int) -> List[QuestionResponse]:
        return (
            self._query()
            .filter(QuestionResponse.institution_id == institution_id)
            .order_by(QuestionResponse.submitted_at.desc(), QuestionResponse.id.desc())
            .limit(limit)
            .all()
        )

    def get_history(self, question_id: int, user_id: int,
                    start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[QuestionResponse]:
        query = self._query().filter(
            QuestionResponse.question_id == question_id,
            QuestionResponse.user_id == user_id,
        )
        if start is not None:
            query = query.filter(QuestionResponse.submitted_at >= start)
        if end is not None:
            query = query.filter(QuestionResponse.submitted_at < end)
        return query.order_by(QuestionResponse.submitted_at.desc(), QuestionResponse.id.desc()).all()

    def get_latest_for_assignment_user(self, assignment_id: int, user_id: int,
                                       since: datetime) -> Optional[QuestionResponse]:
        return (
            self._query()
            .filter(
                QuestionResponse.assignment_id == assignment_id,
                QuestionResponse.user_id == user_id,
                QuestionResponse.submitted_at >= since,
            )
            .order_by(QuestionResponse.submitted_at.desc(), QuestionResponse.id.desc())
            .first()
        )

    def count_by_institution_between(self, institution_id: int, start: datetime, end: datetime) -> int:
        return (
            self.db.query(func.count(QuestionResponse.id))
            .filter(
                QuestionResponse.institution_id == institution_id,
                QuestionResponse.submitted_at >= start,
                QuestionResponse.submitted_at < end,
            )
            .scalar()
            or 0
        )

    def count_by_assignments(self, assignment_ids: List[int]) -> int:
        if not assignment_ids:
            return 0
        return (
            self.db.query(func.count(QuestionResponse.id))
            .filter(QuestionResponse.assignment_id.in_(assignment_ids))
            .scalar()
            or 0
        )

    def create(self, **kwargs) -> QuestionResponse:
        response = QuestionResponse(**kwargs)
        self.db.add(response)
        self.db.commit()
        self.db.refresh(response)
        return response
