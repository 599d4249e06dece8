"""End-user routers: assigned questions, responses and uploads."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from sqlalchemy.orm import Session

from app.api.dependencies import Storage, UserPrincipal, client_ip
from app.core.database import get_db
from app.schemas.response import AssignedResponseSubmit, MyQuestion, MyQuestionStatistics, ResponseItem, ResponseSubmit
from app.schemas.upload import UploadListItem, UploadResponse
from app.services.file_storage import IncomingFile
from app.services.upload_service import UploadService
from app.services.user_question_service import UserQuestionService

router = APIRouter(prefix="/user/questions", tags=["User Questions"])
uploads_router = APIRouter(prefix="/user/uploads", tags=["User Uploads"])


@router.get("", response_model=List[MyQuestion])
def get_my_questions(db: Annotated[Session, Depends(get_db)], current_user: UserPrincipal):
    """
    Questions assigned to the current user, directly or through a group.

    Questions not yet answered today come first.
    """
    return UserQuestionService(db).get_my_questions(current_user)


@router.get("/pending", response_model=List[MyQuestion])
def get_pending_questions(db: Annotated[Session, Depends(get_db)], current_user: UserPrincipal):
    return UserQuestionService(db).get_pending_questions(current_user)


@router.get("/completed", response_model=List[MyQuestion])
def get_completed_questions(db: Annotated[Session, Depends(get_db)], current_user: UserPrincipal):
    return UserQuestionService(db).get_completed_questions(current_user)


@router.get("/statistics", response_model=MyQuestionStatistics)
def get_my_statistics(db: Annotated[Session, Depends(get_db)], current_user: UserPrincipal):
    return UserQuestionService(db).get_statistics(current_user)


@router.get("/{assignment_id}", response_model=MyQuestion)
def get_my_question(
    assignment_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: UserPrincipal,
):
    return UserQuestionService(db).get_my_question(assignment_id, current_user)


@router.post("/{assignment_id}/response", response_model=ResponseItem, status_code=201)
def submit_response(
    assignment_id: int,
    data: ResponseSubmit,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: UserPrincipal,
):
    """
    Answer an assigned question.

    Every submission is kept; reports show the latest one per day.
    """
    return UserQuestionService(db).submit_response(
        assignment_id,
        data,
        current_user,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.post("/responses", response_model=ResponseItem, status_code=201)
def submit_response_by_body(
    data: AssignedResponseSubmit,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    current_user: UserPrincipal,
):
    return UserQuestionService(db).submit_response(
        data.assignment_id,
        data,
        current_user,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@uploads_router.post("", response_model=UploadResponse, status_code=201)
async def create_upload(
    db: Annotated[Session, Depends(get_db)],
    current_user: UserPrincipal,
    storage: Storage,
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    files: List[UploadFile] = File(default=[]),
):
    """
    Post text and/or files to the institution.

    Accepted files: images, audio, video, documents and text, each within
    the configured size limit.
    """
    incoming = [
        IncomingFile(filename=f.filename or "", content_type=f.content_type, data=await f.read())
        for f in files
        if f.filename
    ]
    return UploadService(db, storage).create_upload(current_user, title, content, incoming)


@uploads_router.get("", response_model=List[UploadListItem])
def list_my_uploads(db: Annotated[Session, Depends(get_db)], current_user: UserPrincipal, storage: Storage):
    return UploadService(db, storage).get_my_uploads(current_user)


@uploads_router.get("/{upload_id}", response_model=UploadResponse)
def get_my_upload(
    upload_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: UserPrincipal,
    storage: Storage,
):
    return UploadService(db, storage).get_my_upload(upload_id, current_user)
