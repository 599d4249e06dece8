"""User group data access."""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.group import UserGroup, UserGroupMember


class GroupRepository:
    """User group and membership queries."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, group_id: int) -> Optional[UserGroup]:
        return self.db.query(UserGroup).filter(UserGroup.id == group_id).first()

    def get_by_institution_and_name(self, institution_id: int, name: str) -> Optional[UserGroup]:
        return (
            self.db.query(UserGroup)
            .filter(UserGroup.institution_id == institution_id, UserGroup.name == name)
            .first()
        )

    def get_by_institution(self, institution_id: int, is_active: Optional[bool] = None) -> List[UserGroup]:
        query = self.db.query(UserGroup).filter(UserGroup.institution_id == institution_id)
        if is_active is not None:
            query = query.filter(UserGroup.is_active.is_(is_active))
        return query.order_by(UserGroup.name).all()

    def get_by_ids(self, group_ids: List[int]) -> List[UserGroup]:
        if not group_ids:
            return []
        return self.db.query(UserGroup).filter(UserGroup.id.in_(group_ids)).all()

    def create(self, **kwargs) -> UserGroup:
        group = UserGroup(**kwargs)
        self.db.add(group)
        self.db.commit()
        self.db.refresh(group)
        return group

    def save(self, group: UserGroup) -> UserGroup:
        self.db.commit()
        self.db.refresh(group)
        return group

    # Memberships

    def get_membership(self, group_id: int, user_id: int) -> Optional[UserGroupMember]:
        return (
            self.db.query(UserGroupMember)
            .filter(UserGroupMember.group_id == group_id, UserGroupMember.user_id == user_id)
            .first()
        )

    def is_active_member(self, group_id: int, user_id: int) -> bool:
        membership = self.get_membership(group_id, user_id)
        return membership is not None and membership.is_active

    def get_active_members(self, group_id: int) -> List[UserGroupMember]:
        return (
            self.db.query(UserGroupMember)
            .options(joinedload(UserGroupMember.user))
            .filter(UserGroupMember.group_id == group_id, UserGroupMember.is_active.is_(True))
            .order_by(UserGroupMember.joined_at, UserGroupMember.id)
            .all()
        )

    def get_active_group_ids_for_user(self, user_id: int) -> List[int]:
        rows = (
            self.db.query(UserGroupMember.group_id)
            .join(UserGroup, UserGroup.id == UserGroupMember.group_id)
            .filter(
                UserGroupMember.user_id == user_id,
                UserGroupMember.is_active.is_(True),
                UserGroup.is_active.is_(True),
            )
            .all()
        )
        return [row[0] for row in rows]

    def count_active_members(self, group_id: int) -> int:
        return (
            self.db.query(func.count(UserGroupMember.id))
            .filter(UserGroupMember.group_id == group_id, UserGroupMember.is_active.is_(True))
            .scalar()
            or 0
        )

    def add_membership(self, group_id: int, user_id: int, added_by: Optional[int]) -> UserGroupMember:
        membership = UserGroupMember(group_id=group_id, user_id=user_id, added_by=added_by, is_active=True)
        self.db.add(membership)
        self.db.flush()
        return membership

    def delete_membership(self, membership: UserGroupMember) -> None:
        self.db.delete(membership)
        self.db.flush()

    def refresh_member_count(self, group: UserGroup) -> None:
        group.member_count = self.count_active_members(group.id)
