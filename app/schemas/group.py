"""User group schemas."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class UserGroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class UserGroupUpdate(BaseModel):
    """Partial update."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class UserGroupResponse(BaseModel):
    id: int
    institution_id: int
    name: str
    description: Optional[str] = None
    member_count: int
    is_active: bool
    created_by: Optional[int] = None
    created_by_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class GroupMembersAdd(BaseModel):
    user_ids: List[int] = Field(min_length=1)


class GroupMemberResponse(BaseModel):
    user_id: int
    username: str
    name: str
    joined_at: datetime
    added_by: Optional[int] = None
