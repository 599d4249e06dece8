"""Question router."""
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal
from app.core.database import get_db
from app.models.question import QuestionType
from app.schemas.question import QuestionCreate, QuestionResponseModel, QuestionStatistics, QuestionUpdate
from app.services.question_service import QuestionService

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.get("", response_model=List[QuestionResponseModel])
def list_questions(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    category_id: Optional[int] = None,
    uncategorized: bool = False,
    is_active: Optional[bool] = None,
):
    """
    List questions of the institution.

    Filter by category, by questions without a category, or by active flag.
    """
    return QuestionService(db).get_questions(
        current_admin.institution_id,
        category_id=category_id,
        uncategorized=uncategorized,
        is_active=is_active,
    )


@router.get("/active", response_model=List[QuestionResponseModel])
def list_active_questions(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return QuestionService(db).get_questions(current_admin.institution_id, is_active=True)


@router.get("/statistics", response_model=QuestionStatistics)
def get_question_statistics(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return QuestionService(db).get_statistics(current_admin.institution_id)


@router.get("/type/{question_type}", response_model=List[QuestionResponseModel])
@router.get("/by-type/{question_type}", response_model=List[QuestionResponseModel], include_in_schema=False)
def list_questions_by_type(
    question_type: QuestionType,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return QuestionService(db).get_questions(current_admin.institution_id, question_type=question_type)


@router.post("", response_model=QuestionResponseModel, status_code=201)
def create_question(
    data: QuestionCreate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    """
    Create a question.

    Choice questions need a non-empty ``options.choices`` list; SCALE
    questions may bound answers with ``options.min`` and ``options.max``.
    """
    return QuestionService(db).create_question(data, current_admin)


@router.get("/{question_id}", response_model=QuestionResponseModel)
def get_question(question_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    service = QuestionService(db)
    return service.to_response(service.get_question(question_id, current_admin.institution_id))


@router.put("/{question_id}", response_model=QuestionResponseModel)
def update_question(
    question_id: int,
    data: QuestionUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return QuestionService(db).update_question(question_id, data, current_admin)


@router.delete("/{question_id}", status_code=204)
def delete_question(question_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    """Soft delete a question. Existing assignments and responses are kept."""
    QuestionService(db).delete_question(question_id, current_admin)
