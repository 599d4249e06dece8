"""System administration router."""
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import SystemAdminPrincipal
from app.core.database import get_db
from app.schemas.auth import LoginResponse, SystemAdminLogin, SystemAdminRegister, SystemAdminResponse
from app.services.auth_service import AuthService
from app.services.system_service import SystemService

router = APIRouter(prefix="/system", tags=["System"])


@router.post("/register", response_model=SystemAdminResponse, status_code=201)
def register_system_admin(data: SystemAdminRegister, db: Annotated[Session, Depends(get_db)]):
    """
    Create a system administrator.

    Only available while ALLOW_SYSTEM_ADMIN_REGISTRATION is enabled.
    """
    return SystemService(db).register(data)


@router.post("/login", response_model=LoginResponse)
def login_system_admin(request: SystemAdminLogin, db: Annotated[Session, Depends(get_db)]):
    """Same as POST /api/auth/login/system-admin."""
    return AuthService(db).login_system_admin(request)


@router.get("/me", response_model=SystemAdminResponse)
def get_system_admin_profile(current_admin: SystemAdminPrincipal):
    return current_admin
