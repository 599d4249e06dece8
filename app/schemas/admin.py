"""Admin registration and approval schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.admin import AdminRole, AdminStatus


class AdminRegisterRequest(BaseModel):
    """Self-registration of an institution admin."""
    name: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    role: AdminRole = AdminRole.STAFF
    institution_id: int


class AdminRegisterResponse(BaseModel):
    admin_id: int
    name: str
    email: str
    role: AdminRole
    institution_id: int
    institution_name: str
    status: AdminStatus
    created_at: datetime
    message: str


class AdminApprovalRequest(BaseModel):
    """Approve or reject a pending admin."""
    approved: bool
    rejection_reason: Optional[str] = Field(default=None, max_length=500)


class AdminApprovalResponse(BaseModel):
    admin_id: int
    name: str
    email: str
    approved: bool
    status: AdminStatus
    processed_at: datetime
    processed_by: str
    rejection_reason: Optional[str] = None
    message: str


class AdminStatusChangeRequest(BaseModel):
    """Suspend or reactivate an approved admin."""
    status: AdminStatus
    reason: Optional[str] = Field(default=None, max_length=500)


class AdminStatusChangeResponse(BaseModel):
    admin_id: int
    name: str
    email: str
    previous_status: AdminStatus
    status: AdminStatus
    reason: Optional[str] = None
    changed_at: datetime
    message: str


class AdminListItem(BaseModel):
    """Admin as seen by a system admin."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: AdminRole
    status: AdminStatus
    institution_id: int
    institution_name: str
    is_active: bool
    last_login: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by_name: Optional[str] = None
    rejection_reason: Optional[str] = None
    created_at: datetime


class AdminProfile(BaseModel):
    """Own profile of an admin or staff member."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: AdminRole
    status: AdminStatus
    institution_id: int
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
