"""Institution service."""
import logging
from typing import List

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import (
    InstitutionAlreadyExists,
    InstitutionHasDependencies,
    InstitutionNotFound,
    InvalidStatus,
)
from app.models.institution import Institution, InstitutionAction, next_institution_state, InstitutionState
from app.repositories.institution_repository import InstitutionRepository
from app.schemas.institution import (
    InstitutionCreate,
    InstitutionResponse,
    InstitutionSummary,
    InstitutionUpdate,
)

logger = logging.getLogger(__name__)


class InstitutionService:
    """Institution business logic (system admin)."""

    def __init__(self, db: Session):
        self.db = db
        self.institution_repo = InstitutionRepository(db)

    def get_active_institutions(self) -> List[InstitutionSummary]:
        """Active institutions with their admin and user counts."""
        return [
            InstitutionSummary(
                id=institution.id,
                name=institution.name,
                address=institution.address,
                phone=institution.phone,
                admin_count=self.institution_repo.count_admins(institution.id),
                user_count=self.institution_repo.count_users(institution.id),
            )
            for institution in self.institution_repo.get_active()
        ]

    def get_institution(self, institution_id: int) -> Institution:
        """
        Get institution by ID.

        Raises:
            InstitutionNotFound: If institution not found
        """
        institution = self.institution_repo.get_by_id(institution_id)
        if not institution:
            raise InstitutionNotFound()
        return institution

    def get_institution_detail(self, institution_id: int) -> InstitutionResponse:
        return self._to_response(self.get_institution(institution_id))

    def create_institution(self, data: InstitutionCreate) -> InstitutionResponse:
        """
        Create a new institution.

        Raises:
            InstitutionAlreadyExists: If name or business number is taken
        """
        if self.institution_repo.get_by_name(data.name):
            raise InstitutionAlreadyExists(f"Institution '{data.name}' already exists")
        if data.business_number and self.institution_repo.get_by_business_number(data.business_number):
            raise InstitutionAlreadyExists("Business number is already registered")

        values = data.model_dump()
        values["timezone"] = data.timezone or settings.DEFAULT_TIMEZONE
        values["locale"] = data.locale or settings.DEFAULT_LOCALE
        institution = self.institution_repo.create(**values)
        logger.info("Institution created: %s (%s)", institution.id, institution.name)
        return self._to_response(institution)

    def update_institution(self, institution_id: int, data: InstitutionUpdate) -> InstitutionResponse:
        """
        Update institution; only provided fields change.

        Raises:
            InstitutionNotFound: If institution not found
            InstitutionAlreadyExists: If the new name or business number is taken
        """
        institution = self.get_institution(institution_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("name") and changes["name"] != institution.name:
            existing = self.institution_repo.get_by_name(changes["name"])
            if existing and existing.id != institution_id:
                raise InstitutionAlreadyExists(f"Institution '{changes['name']}' already exists")
        if changes.get("business_number") and changes["business_number"] != institution.business_number:
            existing = self.institution_repo.get_by_business_number(changes["business_number"])
            if existing and existing.id != institution_id:
                raise InstitutionAlreadyExists("Business number is already registered")

        if "is_active" in changes:
            is_active = changes.pop("is_active")
            if is_active is not None and is_active != institution.is_active:
                action = InstitutionAction.REACTIVATE if is_active else InstitutionAction.DEACTIVATE
                self._apply(institution, action)

        institution = self.institution_repo.update(institution, **changes)
        return self._to_response(institution)

    def delete_institution(self, institution_id: int) -> None:
        """
        Deactivate an institution.

        Raises:
            InstitutionNotFound: If institution not found
            InstitutionHasDependencies: If admins or users still belong to it
        """
        institution = self.get_institution(institution_id)
        admin_count = self.institution_repo.count_admins(institution_id)
        user_count = self.institution_repo.count_users(institution_id)
        if admin_count or user_count:
            raise InstitutionHasDependencies(
                f"Institution has {admin_count} admins and {user_count} users"
            )

        self._apply(institution, InstitutionAction.DEACTIVATE)
        self.institution_repo.update(institution)
        logger.info("Institution deactivated: %s", institution_id)

    def _apply(self, institution: Institution, action: InstitutionAction) -> None:
        target = next_institution_state(institution.state, action)
        if target is None:
            raise InvalidStatus(f"Cannot {action.value} an institution that is {institution.state.value}")
        institution.is_active = target == InstitutionState.ACTIVE

    def _to_response(self, institution: Institution) -> InstitutionResponse:
        response = InstitutionResponse.model_validate(institution)
        response.admin_count = self.institution_repo.count_admins(institution.id)
        response.user_count = self.institution_repo.count_users(institution.id)
        return response
