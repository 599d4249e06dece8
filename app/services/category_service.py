"""Category service."""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.exceptions import CategoryAlreadyExists, CategoryNotFound
from app.models.admin import Admin
from app.models.category import Category
from app.repositories.question_repository import CategoryRepository
from app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)


class CategoryService:
    """Category business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.category_repo = CategoryRepository(db)

    def get_category(self, category_id: int, institution_id: int) -> Category:
        """
        Get category by ID within the institution.

        Raises:
            CategoryNotFound: If category not found
            InstitutionAccessDenied: If category belongs to another institution
        """
        category = self.category_repo.get_by_id(category_id)
        if not category:
            raise CategoryNotFound()
        ensure_same_institution(category.institution_id, institution_id, "category")
        return category

    def get_categories(self, institution_id: int, active_only: bool = False) -> List[CategoryResponse]:
        categories = self.category_repo.get_by_institution(institution_id, active_only=active_only)
        return [self.to_response(category) for category in categories]

    def create_category(self, data: CategoryCreate, admin: Admin) -> CategoryResponse:
        """
        Create a category in the admin's institution.

        Raises:
            CategoryAlreadyExists: If the name is taken
        """
        if self.category_repo.get_by_institution_and_name(admin.institution_id, data.name):
            raise CategoryAlreadyExists()
        category = self.category_repo.create(
            institution_id=admin.institution_id,
            created_by=admin.id,
            **data.model_dump(),
        )
        logger.info("Category created: %s (%s)", category.id, category.name)
        return self.to_response(category)

    def update_category(self, category_id: int, data: CategoryUpdate, admin: Admin) -> CategoryResponse:
        """
        Update a category; only provided fields change.

        Raises:
            CategoryNotFound, InstitutionAccessDenied, CategoryAlreadyExists
        """
        category = self.get_category(category_id, admin.institution_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != category.name:
            existing = self.category_repo.get_by_institution_and_name(admin.institution_id, changes["name"])
            if existing and existing.id != category.id:
                raise CategoryAlreadyExists()
        for key, value in changes.items():
            setattr(category, key, value)
        return self.to_response(self.category_repo.save(category))

    def delete_category(self, category_id: int, admin: Admin) -> None:
        """Soft delete a category."""
        category = self.get_category(category_id, admin.institution_id)
        category.is_active = False
        self.category_repo.save(category)
        logger.info("Category deactivated: %s", category_id)

    def to_response(self, category: Category) -> CategoryResponse:
        return CategoryResponse(
            id=category.id,
            institution_id=category.institution_id,
            institution_name=category.institution.name if category.institution else "Unknown institution",
            name=category.name,
            description=category.description,
            image_path=category.image_path,
            is_active=category.is_active,
            question_count=self.category_repo.count_questions(category.id),
            created_by=category.created_by,
            created_by_name=category.creator.name if category.creator else None,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )
