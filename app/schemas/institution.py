"""Institution schemas."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class InstitutionBase(BaseModel):
    """Fields shared by create and response."""
    name: str = Field(min_length=1, max_length=100)
    business_number: Optional[str] = Field(default=None, max_length=20)
    registration_number: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(default=None, max_length=200)
    director_name: Optional[str] = Field(default=None, max_length=50)
    contact_person: Optional[str] = Field(default=None, max_length=50)
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    contact_email: Optional[EmailStr] = None


class InstitutionCreate(InstitutionBase):
    """Create an institution (system admin)."""
    timezone: Optional[str] = None
    locale: Optional[str] = None


class InstitutionUpdate(BaseModel):
    """Partial update; only provided fields change."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    business_number: Optional[str] = Field(default=None, max_length=20)
    registration_number: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[EmailStr] = None
    website: Optional[str] = Field(default=None, max_length=200)
    director_name: Optional[str] = Field(default=None, max_length=50)
    contact_person: Optional[str] = Field(default=None, max_length=50)
    contact_phone: Optional[str] = Field(default=None, max_length=20)
    contact_email: Optional[EmailStr] = None
    timezone: Optional[str] = None
    locale: Optional[str] = None
    is_active: Optional[bool] = None


class InstitutionSummary(BaseModel):
    """Public list entry."""
    id: int
    name: str
    address: Optional[str] = None
    phone: Optional[str] = None
    admin_count: int = 0
    user_count: int = 0


class InstitutionResponse(InstitutionBase):
    """Institution detail."""
    id: int
    email: Optional[str] = None
    contact_email: Optional[str] = None
    timezone: str
    locale: str
    is_active: bool
    admin_count: int = 0
    user_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
