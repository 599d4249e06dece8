"""Authentication router."""
from typing import Annotated

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import CurrentPrincipal, LoginCodes
from app.core.database import get_db
from app.schemas.auth import (
    AdminLogin,
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    SystemAdminLogin,
    TokenResponse,
    UserInfo,
    UserLogin,
)
from app.schemas.common import MessageResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=LoginResponse)
def login(
    request: Annotated[LoginRequest, Body()],
    db: Annotated[Session, Depends(get_db)],
    login_codes: LoginCodes,
):
    """
    Login any principal.

    The body's ``principal_type`` (system_admin, admin, user) selects the
    credential check. Returns an access/refresh token pair.
    """
    return AuthService(db, login_codes).login(request)


@router.post("/login/system-admin", response_model=LoginResponse)
def login_system_admin(request: SystemAdminLogin, db: Annotated[Session, Depends(get_db)]):
    return AuthService(db).login_system_admin(request)


@router.post("/login/admin", response_model=LoginResponse)
def login_admin(request: AdminLogin, db: Annotated[Session, Depends(get_db)]):
    """
    Login an institution admin or staff member.

    The account must be approved by a system administrator.
    """
    return AuthService(db).login_admin(request)


@router.post("/login/user", response_model=LoginResponse)
def login_user(request: UserLogin, db: Annotated[Session, Depends(get_db)], login_codes: LoginCodes):
    """
    Login an end user with institution + username + password, or with a
    4-digit login code handed out by an admin.
    """
    return AuthService(db, login_codes).login_user(request)


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(request: RefreshTokenRequest, db: Annotated[Session, Depends(get_db)]):
    """
    Exchange a refresh token for a new access token.

    Role and institution are read again from the account.
    """
    return AuthService(db).refresh(request.refresh_token)


@router.post("/logout", response_model=MessageResponse)
def logout():
    """
    Logout.

    Tokens are stateless; the client discards them.
    """
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=UserInfo)
def get_current_user_info(principal: CurrentPrincipal, db: Annotated[Session, Depends(get_db)]):
    return AuthService(db).me(principal)
