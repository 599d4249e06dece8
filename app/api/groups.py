"""User group router."""
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal
from app.core.database import get_db
from app.schemas.group import (
    GroupMemberResponse,
    GroupMembersAdd,
    UserGroupCreate,
    UserGroupResponse,
    UserGroupUpdate,
)
from app.services.group_service import GroupService

router = APIRouter(prefix="/user-groups", tags=["User Groups"])


@router.get("", response_model=List[UserGroupResponse])
def list_groups(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    active_only: bool = True,
):
    return GroupService(db).get_groups(current_admin.institution_id, active_only=active_only)


@router.get("/active", response_model=List[UserGroupResponse])
def list_active_groups(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return GroupService(db).get_groups(current_admin.institution_id, active_only=True)


@router.post("", response_model=UserGroupResponse, status_code=201)
def create_group(
    data: UserGroupCreate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return GroupService(db).create_group(data, current_admin)


@router.get("/{group_id}", response_model=UserGroupResponse)
def get_group(group_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    service = GroupService(db)
    return service.to_response(service.get_group(group_id, current_admin.institution_id))


@router.put("/{group_id}", response_model=UserGroupResponse)
def update_group(
    group_id: int,
    data: UserGroupUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return GroupService(db).update_group(group_id, data, current_admin)


@router.delete("/{group_id}", status_code=204)
def delete_group(group_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    """Soft delete a group. Memberships are kept."""
    GroupService(db).delete_group(group_id, current_admin)


@router.get("/{group_id}/members", response_model=List[GroupMemberResponse])
def list_members(group_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return GroupService(db).get_members(group_id, current_admin)


@router.post("/{group_id}/members", response_model=UserGroupResponse)
def add_members(
    group_id: int,
    data: GroupMembersAdd,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    """
    Add users to a group.

    Users already in the group are skipped; all users must belong to the
    caller's institution.
    """
    return GroupService(db).add_members(group_id, data, current_admin)


@router.delete("/{group_id}/members/{user_id}", response_model=UserGroupResponse)
def remove_member(
    group_id: int,
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return GroupService(db).remove_member(group_id, user_id, current_admin)
