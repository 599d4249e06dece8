"""User group service."""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import UserGroupAlreadyExists, UserGroupNotFound, UserNotFound
from app.models.admin import Admin
from app.models.group import UserGroup
from app.repositories.group_repository import GroupRepository
from app.repositories.user_repository import UserRepository
from app.schemas.group import (
    GroupMemberResponse,
    GroupMembersAdd,
    UserGroupCreate,
    UserGroupResponse,
    UserGroupUpdate,
)
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)


class GroupService:
    """User group business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.group_repo = GroupRepository(db)
        self.user_repo = UserRepository(db)

    def get_group(self, group_id: int, institution_id: int) -> UserGroup:
        """
        Get group by ID within the institution.

        Raises:
            UserGroupNotFound: If group not found
            InstitutionAccessDenied: If group belongs to another institution
        """
        group = self.group_repo.get_by_id(group_id)
        if not group:
            raise UserGroupNotFound()
        ensure_same_institution(group.institution_id, institution_id, "user group")
        return group

    def get_groups(self, institution_id: int, active_only: bool = True) -> List[UserGroupResponse]:
        groups = self.group_repo.get_by_institution(institution_id, is_active=True if active_only else None)
        return [self.to_response(group) for group in groups]

    def create_group(self, data: UserGroupCreate, admin: Admin) -> UserGroupResponse:
        """
        Create a group in the admin's institution.

        Raises:
            UserGroupAlreadyExists: If the name is taken
        """
        if self.group_repo.get_by_institution_and_name(admin.institution_id, data.name):
            raise UserGroupAlreadyExists()
        group = self.group_repo.create(
            institution_id=admin.institution_id,
            name=data.name,
            description=data.description,
            created_by=admin.id,
        )
        logger.info("User group created: %s (%s)", group.id, group.name)
        return self.to_response(group)

    def update_group(self, group_id: int, data: UserGroupUpdate, admin: Admin) -> UserGroupResponse:
        """
        Update a group; only provided fields change.

        Raises:
            UserGroupNotFound, InstitutionAccessDenied, UserGroupAlreadyExists
        """
        group = self.get_group(group_id, admin.institution_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != group.name:
            existing = self.group_repo.get_by_institution_and_name(admin.institution_id, changes["name"])
            if existing and existing.id != group.id:
                raise UserGroupAlreadyExists()
        for key, value in changes.items():
            if value is not None or key == "description":
                setattr(group, key, value)
        return self.to_response(self.group_repo.save(group))

    def delete_group(self, group_id: int, admin: Admin) -> None:
        """Soft delete a group."""
        group = self.get_group(group_id, admin.institution_id)
        group.is_active = False
        self.group_repo.save(group)
        logger.info("User group deactivated: %s", group_id)

    def get_members(self, group_id: int, admin: Admin) -> List[GroupMemberResponse]:
        group = self.get_group(group_id, admin.institution_id)
        return [
            GroupMemberResponse(
                user_id=member.user_id,
                username=member.user.username,
                name=member.user.name,
                joined_at=member.joined_at,
                added_by=member.added_by,
            )
            for member in self.group_repo.get_active_members(group.id)
        ]

    def add_members(self, group_id: int, data: GroupMembersAdd, admin: Admin) -> UserGroupResponse:
        """
        Add users to a group. Users already in the group are skipped.

        Raises:
            UserGroupNotFound, UserNotFound, InstitutionAccessDenied
        """
        group = self.get_group(group_id, admin.institution_id)
        user_ids = list(dict.fromkeys(data.user_ids))
        users = {user.id: user for user in self.user_repo.get_by_ids(user_ids)}

        for user_id in user_ids:
            user = users.get(user_id)
            if user is None:
                raise UserNotFound(f"User {user_id} not found")
            ensure_same_institution(user.institution_id, admin.institution_id, "user")

        added = 0
        for user_id in user_ids:
            membership = self.group_repo.get_membership(group.id, user_id)
            if membership is None:
                self.group_repo.add_membership(group.id, user_id, added_by=admin.id)
                added += 1
            elif not membership.is_active:
                membership.is_active = True
                membership.added_by = admin.id
                added += 1
        self.db.flush()

        self.group_repo.refresh_member_count(group)
        group = self.group_repo.save(group)
        logger.info("Added %s members to group %s", added, group.id)
        return self.to_response(group)

    def remove_member(self, group_id: int, user_id: int, admin: Admin) -> UserGroupResponse:
        """
        Remove a user from a group. The membership row is deleted; adding the
        user again creates a new one.

        Raises:
            UserGroupNotFound, InstitutionAccessDenied, UserNotFound
        """
        group = self.get_group(group_id, admin.institution_id)
        membership = self.group_repo.get_membership(group.id, user_id)
        if membership is None:
            raise UserNotFound("User is not a member of this group")

        self.group_repo.delete_membership(membership)
        self.group_repo.refresh_member_count(group)
        group = self.group_repo.save(group)
        logger.info("Removed user %s from group %s", user_id, group.id)
        return self.to_response(group)

    def to_response(self, group: UserGroup) -> UserGroupResponse:
        return UserGroupResponse(
            id=group.id,
            institution_id=group.institution_id,
            name=group.name,
            description=group.description,
            member_count=group.member_count,
            is_active=group.is_active,
            created_by=group.created_by,
            created_by_name=group.creator.name if group.creator else None,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )
