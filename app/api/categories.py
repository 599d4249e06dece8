"""Question category router."""
from typing import Annotated, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal
from app.core.database import get_db
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryResponse])
def list_categories(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return CategoryService(db).get_categories(current_admin.institution_id)


@router.get("/active", response_model=List[CategoryResponse])
def list_active_categories(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return CategoryService(db).get_categories(current_admin.institution_id, active_only=True)


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    data: CategoryCreate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return CategoryService(db).create_category(data, current_admin)


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    service = CategoryService(db)
    return service.to_response(service.get_category(category_id, current_admin.institution_id))


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: int,
    data: CategoryUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
):
    return CategoryService(db).update_category(category_id, data, current_admin)


@router.delete("/{category_id}", status_code=204)
def delete_category(category_id: int, db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    CategoryService(db).delete_category(category_id, current_admin)
