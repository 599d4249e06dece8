"""Institution router."""
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import SystemAdminPrincipal
from app.core.database import get_db
from app.schemas.institution import (
    InstitutionCreate,
    InstitutionResponse,
    InstitutionSummary,
    InstitutionUpdate,
)
from app.services.institution_service import InstitutionService

router = APIRouter(prefix="/institutions", tags=["Institutions"])


@router.get("", response_model=List[InstitutionSummary])
def list_active_institutions(db: Annotated[Session, Depends(get_db)]):
    """
    List active institutions (public).

    Used by sign-up and login screens to pick an institution.
    """
    return InstitutionService(db).get_active_institutions()


@router.get("/{institution_id}", response_model=InstitutionResponse)
def get_institution(
    institution_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
):
    return InstitutionService(db).get_institution_detail(institution_id)


@router.post("", response_model=InstitutionResponse, status_code=201)
def create_institution(
    data: InstitutionCreate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
):
    """
    Create an institution.

    Name and business number must be unique.
    """
    return InstitutionService(db).create_institution(data)


@router.put("/{institution_id}", response_model=InstitutionResponse)
def update_institution(
    institution_id: int,
    data: InstitutionUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
):
    """Update an institution; only provided fields change."""
    return InstitutionService(db).update_institution(institution_id, data)


@router.delete("/{institution_id}", status_code=204)
def delete_institution(
    institution_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: SystemAdminPrincipal,
):
    """
    Deactivate an institution.

    Refused while the institution still has admins or users.
    """
    InstitutionService(db).delete_institution(institution_id)
