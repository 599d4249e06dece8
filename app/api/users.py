"""User router: sign-up, admin-side user management and own profile."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal, LoginCodes, UserPrincipal
from app.core.database import get_db
from app.schemas.auth import LoginResponse, UserLogin
from app.schemas.user import (
    LoginCodeResponse,
    UserListItem,
    UserProfile,
    UserProfileUpdate,
    UserRegisterRequest,
    UserRegisterResponse,
    UserSelfUpdate,
    UserSignupRequest,
)
from app.services.auth_service import AuthService
from app.services.user_service import UserService

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("/signup", response_model=UserProfile, status_code=201)
def signup(data: UserSignupRequest, db: Annotated[Session, Depends(get_db)]):
    """
    Self-registration of an end user (public).

    Usernames are unique within an institution.
    """
    return UserService(db).signup(data)


@router.post("/login", response_model=LoginResponse)
def login_user(request: UserLogin, db: Annotated[Session, Depends(get_db)], login_codes: LoginCodes):
    """Same as POST /api/auth/login/user."""
    return AuthService(db, login_codes).login_user(request)


@router.post("/register", response_model=UserRegisterResponse, status_code=201)
def register_user(
    data: UserRegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    login_codes: LoginCodes,
):
    """
    Register a user in the caller's institution (Admin/Staff).

    Returns a temporary login code so the user can sign in the first time.
    """
    return UserService(db, login_codes).register(data, current_admin)


@router.get("", response_model=List[UserListItem])
def list_users(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    is_active: Optional[bool] = None,
):
    return UserService(db).get_users(current_admin.institution_id, is_active=is_active)


@router.get("/profile", response_model=UserProfile)
def get_own_profile(current_user: UserPrincipal):
    return current_user


@router.put("/profile", response_model=UserProfile)
def update_own_profile(
    data: UserSelfUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: UserPrincipal,
):
    """Update own contact details; only provided fields change."""
    return UserService(db).update_own_profile(current_user, data)


@router.get("/{user_id}/profile", response_model=UserProfile)
def get_user_profile(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return UserService(db).get_user_in_institution(user_id, current_admin.institution_id)


@router.put("/{user_id}/profile", response_model=UserProfile)
def update_user_profile(
    user_id: int,
    data: UserProfileUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    """Update a user's profile (Admin/Staff); only provided fields change."""
    return UserService(db).update_profile(user_id, data, current_admin.institution_id)


@router.delete("/{user_id}", status_code=204)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    login_codes: LoginCodes,
):
    """Soft delete user (Admin/Staff)."""
    UserService(db, login_codes).delete_user(user_id, current_admin.institution_id)


@router.post("/{user_id}/generate-code", response_model=LoginCodeResponse)
def generate_login_code(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    login_codes: LoginCodes,
):
    """
    Issue a 4-digit one-time login code for a user.

    Any earlier code of the user stops working.
    """
    return UserService(db, login_codes).generate_login_code(user_id, current_admin.institution_id)
