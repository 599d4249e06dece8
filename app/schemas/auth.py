"""Authentication schemas."""
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator


class SystemAdminLogin(BaseModel):
    """System administrator credentials."""
    principal_type: Literal["system_admin"] = "system_admin"
    email: EmailStr
    password: str = Field(min_length=1)


class AdminLogin(BaseModel):
    """Institution admin credentials; the institution must match the account."""
    principal_type: Literal["admin"] = "admin"
    institution_id: int
    email: EmailStr
    password: str = Field(min_length=1)


class UserLogin(BaseModel):
    """
    End-user credentials.

    Either institution_id + username + password, or a one-time login_code.
    """
    principal_type: Literal["user"] = "user"
    institution_id: Optional[int] = None
    username: Optional[str] = None
    password: Optional[str] = None
    login_code: Optional[str] = Field(default=None, pattern=r"^\d{4}$")

    @model_validator(mode="after")
    def check_mode(self):
        has_credentials = all(v is not None for v in (self.institution_id, self.username, self.password))
        if self.login_code is None and not has_credentials:
            raise ValueError("Provide institution_id, username and password, or a login_code")
        if self.login_code is not None and any(
            v is not None for v in (self.username, self.password)
        ):
            raise ValueError("login_code cannot be combined with username/password")
        return self


LoginRequest = Annotated[
    Union[SystemAdminLogin, AdminLogin, UserLogin],
    Field(discriminator="principal_type"),
]


class UserInfo(BaseModel):
    """Identity returned with a token pair."""
    id: int
    user_type: str
    name: str
    email: Optional[str] = None
    username: Optional[str] = None
    institution_id: Optional[int] = None
    institution_name: Optional[str] = None
    authorities: List[str]


class LoginResponse(BaseModel):
    """Token pair plus the authenticated identity."""
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_at: datetime
    user: UserInfo


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Fresh access token."""
    access_token: str
    token_type: str = "Bearer"
    expires_at: datetime


class SystemAdminRegister(BaseModel):
    """Create a system administrator."""
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    name: str = Field(min_length=1, max_length=50)


class SystemAdminResponse(BaseModel):
    id: int
    email: str
    name: str
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
