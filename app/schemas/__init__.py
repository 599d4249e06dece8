"""Pydantic schemas for API validation and serialization."""
from app.schemas.common import JSONDocument, MessageResponse
from app.schemas.auth import (
    SystemAdminLogin, AdminLogin, UserLogin, LoginRequest, LoginResponse,
    RefreshTokenRequest, TokenResponse, UserInfo
)
from app.schemas.assignment import AssignmentCreate, AssignmentUpdate, AssignmentResponse
from app.schemas.response import ResponseSubmit, ResponseItem

__all__ = [
    "JSONDocument",
    "MessageResponse",
    "SystemAdminLogin",
    "AdminLogin",
    "UserLogin",
    "LoginRequest",
    "LoginResponse",
    "RefreshTokenRequest",
    "TokenResponse",
    "UserInfo",
    "AssignmentCreate",
    "AssignmentUpdate",
    "AssignmentResponse",
    "ResponseSubmit",
    "ResponseItem",
]
