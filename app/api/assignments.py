"""Question assignment router."""
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal
from app.core.database import get_db
from app.schemas.assignment import AssignmentCreate, AssignmentResponse, AssignmentStatistics, AssignmentUpdate
from app.services.assignment_service import AssignmentService

router = APIRouter(prefix="/question-assignments", tags=["Question Assignments"])


@router.post("", response_model=AssignmentResponse, status_code=201)
def create_assignment(
    data: AssignmentCreate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    """
    Assign a question to a user or to a group.

    Exactly one of ``user_id`` and ``group_id`` must be given.
    """
    return AssignmentService(db).create_assignment(data, current_admin)


@router.get("", response_model=List[AssignmentResponse])
def list_assignments(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return AssignmentService(db).get_assignments(current_admin.institution_id)


@router.get("/statistics", response_model=AssignmentStatistics)
def get_assignment_statistics(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return AssignmentService(db).get_statistics(current_admin.institution_id)


@router.get("/user/{user_id}", response_model=List[AssignmentResponse])
@router.get("/by-user/{user_id}", response_model=List[AssignmentResponse], include_in_schema=False)
def list_user_assignments(user_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return AssignmentService(db).get_user_assignments(user_id, current_admin.institution_id)


@router.get("/group/{group_id}", response_model=List[AssignmentResponse])
@router.get("/by-group/{group_id}", response_model=List[AssignmentResponse], include_in_schema=False)
def list_group_assignments(group_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return AssignmentService(db).get_group_assignments(group_id, current_admin.institution_id)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    service = AssignmentService(db)
    return service.to_response(service.get_assignment(assignment_id, current_admin.institution_id))


@router.put("/{assignment_id}", response_model=AssignmentResponse)
def update_assignment(
    assignment_id: int,
    data: AssignmentUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return AssignmentService(db).update_assignment(assignment_id, data, current_admin)


@router.delete("/{assignment_id}", status_code=204)
def delete_assignment(assignment_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    AssignmentService(db).delete_assignment(assignment_id, current_admin)
