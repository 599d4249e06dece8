"""User schemas."""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.models.user import SeverityLevel
from app.schemas.common import JSONDocumentList


class UserSignupRequest(BaseModel):
    """Self-signup of an end user."""
    institution_id: int
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=4, max_length=100)
    name: str = Field(min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=20)
    birth_date: Optional[date] = None


class UserRegisterRequest(BaseModel):
    """Registration of an end user by an admin; the institution is the admin's."""
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=4, max_length=100)
    name: str = Field(min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    birth_date: Optional[date] = None
    severity: SeverityLevel = SeverityLevel.MILD
    guardian_name: Optional[str] = Field(default=None, max_length=50)
    guardian_relationship: Optional[str] = Field(default=None, max_length=20)
    guardian_phone: Optional[str] = Field(default=None, max_length=20)
    guardian_email: Optional[EmailStr] = None
    guardian_address: Optional[str] = None
    emergency_contacts: JSONDocumentList = Field(default_factory=list)
    care_notes: Optional[str] = None
    group_ids: List[int] = Field(default_factory=list)


class UserProfileUpdate(BaseModel):
    """Partial profile update by an admin."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    birth_date: Optional[date] = None
    severity: Optional[SeverityLevel] = None
    guardian_name: Optional[str] = Field(default=None, max_length=50)
    guardian_relationship: Optional[str] = Field(default=None, max_length=20)
    guardian_phone: Optional[str] = Field(default=None, max_length=20)
    guardian_email: Optional[EmailStr] = None
    guardian_address: Optional[str] = None
    emergency_contacts: Optional[JSONDocumentList] = None
    care_notes: Optional[str] = None
    is_active: Optional[bool] = None


class UserSelfUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    emergency_contacts: Optional[JSONDocumentList] = None
    fcm_token: Optional[str] = Field(default=None, max_length=255)


class UserProfile(BaseModel):
    """Full user profile."""
    id: int
    institution_id: int
    username: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    birth_date: Optional[date] = None
    severity: SeverityLevel
    guardian_name: Optional[str] = None
    guardian_relationship: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_address: Optional[str] = None
    emergency_contacts: JSONDocumentList = Field(default_factory=list)
    care_notes: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserListItem(BaseModel):
    """User row in the admin list, with active group memberships."""
    id: int
    username: str
    name: str
    phone: Optional[str] = None
    severity: SeverityLevel
    is_active: bool
    last_login: Optional[datetime] = None
    group_ids: List[int] = Field(default_factory=list)
    created_at: datetime


class UserRegisterResponse(BaseModel):
    """Registered user plus a first temporary login code."""
    user: UserProfile
    temporary_code: str
    expires_in_minutes: int


class LoginCodeResponse(BaseModel):
    user_id: int
    temporary_code: str
    expires_in_minutes: int
