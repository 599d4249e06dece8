"""Admin registration, approval and admin-side upload handling."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal, Storage, SystemAdminPrincipal
from app.core.database import get_db
from app.models.admin import AdminStatus
from app.schemas.admin import (
    AdminApprovalRequest,
    AdminApprovalResponse,
    AdminListItem,
    AdminProfile,
    AdminRegisterRequest,
    AdminRegisterResponse,
    AdminStatusChangeRequest,
    AdminStatusChangeResponse,
)
from app.schemas.auth import AdminLogin, LoginResponse
from app.schemas.upload import AdminUploadReply, UploadListItem, UploadResponse
from app.services.admin_service import AdminService
from app.services.auth_service import AuthService
from app.services.upload_service import UploadService

router = APIRouter(prefix="/admin", tags=["Admins"])


@router.post("/register", response_model=AdminRegisterResponse, status_code=201)
def register_admin(data: AdminRegisterRequest, db: Annotated[Session, Depends(get_db)]):
    """
    Register an admin or staff account (public).

    The account starts PENDING and cannot log in until a system
    administrator approves it.
    """
    return AdminService(db).register(data)


@router.post("/login", response_model=LoginResponse)
def login_admin(request: AdminLogin, db: Annotated[Session, Depends(get_db)]):
    """Same as POST /api/auth/login/admin."""
    return AuthService(db).login_admin(request)


@router.get("/me", response_model=AdminProfile)
def get_admin_profile(current_admin: AdminPrincipal):
    return current_admin


@router.get("", response_model=List[AdminListItem])
def list_admins(
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
    status: Optional[AdminStatus] = None,
):
    return AdminService(db).get_admins(status)


@router.get("/pending", response_model=List[AdminListItem])
def list_pending_admins(db: Annotated[Session, Depends(get_db)], current_admin: SystemAdminPrincipal):
    return AdminService(db).get_pending_admins()


@router.put("/approve/{admin_id}", response_model=AdminApprovalResponse)
def approve_admin(
    admin_id: int,
    data: AdminApprovalRequest,
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
):
    """
    Approve or reject a pending registration.

    A rejection requires a reason.
    """
    return AdminService(db).process_approval(admin_id, data, current_admin)


@router.put("/{admin_id}/status", response_model=AdminStatusChangeResponse)
def change_admin_status(
    admin_id: int,
    data: AdminStatusChangeRequest,
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
):
    """
    Suspend an approved admin or reactivate a suspended one.

    A suspension requires a reason.
    """
    return AdminService(db).change_status(admin_id, data, current_admin)


@router.get("/uploads", response_model=List[UploadListItem])
def list_institution_uploads(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    storage: Storage,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    return UploadService(db, storage).get_institution_uploads(current_admin.institution_id, limit, offset)


@router.get("/uploads/{upload_id}", response_model=UploadResponse)
def get_institution_upload(
    upload_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    storage: Storage,
):
    service = UploadService(db, storage)
    return service.to_response(service.get_upload(upload_id, current_admin.institution_id))


@router.put("/uploads/{upload_id}/response", response_model=UploadResponse)
def reply_to_upload(
    upload_id: int,
    data: AdminUploadReply,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    storage: Storage,
):
    """Answer a user's upload. A second answer replaces the first."""
    return UploadService(db, storage).reply(upload_id, data, current_admin)
