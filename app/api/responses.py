"""Response reporting router (Admin/Staff)."""
from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal
from app.core.database import get_db
from app.schemas.response import (
    AssignmentResponseSummary,
    ResponseHistory,
    ResponseItem,
    UserResponseSummary,
)
from app.services.response_service import ResponseService

router = APIRouter(prefix="/responses", tags=["Responses"])


@router.get("/recent", response_model=List[ResponseItem])
def get_recent_responses(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    limit: int = Query(20, ge=1, le=100),
):
    return ResponseService(db).get_recent_responses(current_admin.institution_id, limit)


@router.get("/user/{user_id}", response_model=UserResponseSummary)
def get_user_responses(user_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    """
    Responses of a user.

    When a question was answered several times on one day only the latest
    answer is listed, flagged with how many submissions it replaced.
    """
    return ResponseService(db).get_user_responses(user_id, current_admin.institution_id)


@router.get("/user/{user_id}/date-range", response_model=List[ResponseItem])
def get_user_responses_between(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    start_date: date = Query(...),
    end_date: date = Query(...),
):
    return ResponseService(db).get_user_responses_between(
        user_id, start_date, end_date, current_admin.institution_id
    )


@router.get("/assignment/{assignment_id}", response_model=AssignmentResponseSummary)
def get_assignment_responses(
    assignment_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return ResponseService(db).get_assignment_responses(assignment_id, current_admin.institution_id)


@router.get("/question/{question_id}/user/{user_id}/history", response_model=ResponseHistory)
def get_response_history(
    question_id: int,
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    on_date: Optional[date] = Query(None, alias="date"),
):
    """Every submission of a user to a question, optionally on one day."""
    return ResponseService(db).get_history(question_id, user_id, current_admin.institution_id, on_date)
