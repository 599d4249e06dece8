"""User data access."""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.group import UserGroupMember
from app.models.user import User


class UserRepository:
    """User queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_institution_and_username(self, institution_id: int, username: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.institution_id == institution_id, User.username == username)
            .first()
        )

    def exists_by_institution_and_username(self, institution_id: int, username: str) -> bool:
        return self.get_by_institution_and_username(institution_id, username) is not None

    def get_by_institution(self, institution_id: int, is_active: Optional[bool] = None) -> List[User]:
        query = self.db.query(User).filter(User.institution_id == institution_id)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))
        return query.order_by(User.name, User.id).all()

    def get_by_ids(self, user_ids: List[int]) -> List[User]:
        if not user_ids:
            return []
        return self.db.query(User).filter(User.id.in_(user_ids)).all()

    def active_group_ids(self, user_ids: List[int]) -> Dict[int, List[int]]:
        """Map user id -> ids of groups with an active membership."""
        result: Dict[int, List[int]] = {user_id: [] for user_id in user_ids}
        if not user_ids:
            return result
        rows = (
            self.db.query(UserGroupMember.user_id, UserGroupMember.group_id)
            .filter(UserGroupMember.user_id.in_(user_ids), UserGroupMember.is_active.is_(True))
            .order_by(UserGroupMember.group_id)
            .all()
        )
        for user_id, group_id in rows:
            result[user_id].append(group_id)
        return result

    def count_by_institution(self, institution_id: int, is_active: Optional[bool] = None,
                             created_before: Optional[datetime] = None) -> int:
        query = self.db.query(func.count(User.id)).filter(User.institution_id == institution_id)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))
        if created_before is not None:
            query = query.filter(User.created_at < created_before)
        return query.scalar() or 0

    def count_logged_in_since(self, institution_id: int, since: datetime) -> int:
        return (
            self.db.query(func.count(User.id))
            .filter(User.institution_id == institution_id, User.is_active.is_(True), User.last_login >= since)
            .scalar()
            or 0
        )

    def create(self, **kwargs) -> User:
        user = User(**kwargs)
        self.db.add(user)
        self.db.flush()
        return user

    def save(self, user: User) -> User:
        self.db.commit()
        self.db.refresh(user)
        return user
