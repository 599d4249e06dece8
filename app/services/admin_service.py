"""Admin registration and approval service."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.exceptions import (
    AdminAlreadyExists,
    AdminNotFound,
    InstitutionNotFound,
    InvalidStatus,
    ValidationFailed,
)
from app.core.security import get_password_hash
from app.models.admin import (
    ACTIONS_REQUIRING_REASON,
    Admin,
    AdminAction,
    AdminStatus,
    next_admin_status,
)
from app.models.system_admin import SystemAdmin
from app.repositories.admin_repository import AdminRepository
from app.repositories.institution_repository import InstitutionRepository
from app.schemas.admin import (
    AdminApprovalRequest,
    AdminApprovalResponse,
    AdminListItem,
    AdminRegisterRequest,
    AdminRegisterResponse,
    AdminStatusChangeRequest,
    AdminStatusChangeResponse,
)

logger = logging.getLogger(__name__)

# Target status requested through the status-change endpoint -> action
STATUS_CHANGE_ACTIONS = {
    AdminStatus.SUSPENDED: AdminAction.SUSPEND,
    AdminStatus.APPROVED: AdminAction.REACTIVATE,
}


class AdminService:
    """Admin lifecycle business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.admin_repo = AdminRepository(db)
        self.institution_repo = InstitutionRepository(db)

    def register(self, data: AdminRegisterRequest) -> AdminRegisterResponse:
        """
        Register a new admin in PENDING state.

        Raises:
            AdminAlreadyExists: If the email is already registered
            InstitutionNotFound: If the institution does not exist or is inactive
        """
        if self.admin_repo.get_by_email(data.email):
            raise AdminAlreadyExists()

        institution = self.institution_repo.get_by_id(data.institution_id)
        if not institution or not institution.is_active:
            raise InstitutionNotFound()

        admin = self.admin_repo.create(
            institution_id=institution.id,
            email=data.email,
            password_hash=get_password_hash(data.password),
            name=data.name,
            phone=data.phone,
            role=data.role,
            status=AdminStatus.PENDING,
        )
        logger.info("Admin registered: %s (%s) for institution %s", admin.id, admin.email, institution.id)

        return AdminRegisterResponse(
            admin_id=admin.id,
            name=admin.name,
            email=admin.email,
            role=admin.role,
            institution_id=institution.id,
            institution_name=institution.name,
            status=admin.status,
            created_at=admin.created_at,
            message="Registration received. You can log in once a system administrator approves it.",
        )

    def get_admin(self, admin_id: int) -> Admin:
        """
        Get admin by ID.

        Raises:
            AdminNotFound: If admin not found
        """
        admin = self.admin_repo.get_by_id(admin_id)
        if not admin:
            raise AdminNotFound()
        return admin

    def get_admins(self, status: Optional[AdminStatus] = None) -> List[AdminListItem]:
        """All admins, optionally filtered by status."""
        return [self._to_list_item(admin) for admin in self.admin_repo.get_all(status)]

    def get_pending_admins(self) -> List[AdminListItem]:
        return self.get_admins(AdminStatus.PENDING)

    def process_approval(self, admin_id: int, data: AdminApprovalRequest,
                         system_admin: SystemAdmin) -> AdminApprovalResponse:
        """
        Approve or reject a pending admin.

        Raises:
            AdminNotFound: If admin not found
            InvalidStatus: If the admin is not PENDING
            ValidationFailed: If a rejection has no reason
        """
        admin = self.get_admin(admin_id)
        action = AdminAction.APPROVE if data.approved else AdminAction.REJECT
        reason = (data.rejection_reason or "").strip() or None

        self._transition(admin, action, reason)
        admin.approved_by = system_admin.id
        admin.approved_at = utcnow()
        admin.rejection_reason = reason if action == AdminAction.REJECT else None
        admin = self.admin_repo.save(admin)
        logger.info("Admin %s %s by system admin %s", admin.id, admin.status.value, system_admin.id)

        return AdminApprovalResponse(
            admin_id=admin.id,
            name=admin.name,
            email=admin.email,
            approved=data.approved,
            status=admin.status,
            processed_at=admin.approved_at,
            processed_by=system_admin.name,
            rejection_reason=admin.rejection_reason,
            message="Admin approved" if data.approved else "Admin rejected",
        )

    def change_status(self, admin_id: int, data: AdminStatusChangeRequest,
                      system_admin: SystemAdmin) -> AdminStatusChangeResponse:
        """
        Suspend an approved admin or reactivate a suspended one.

        Pending and rejected admins must go through approval instead.

        Raises:
            AdminNotFound: If admin not found
            InvalidStatus: If the transition is not allowed
            ValidationFailed: If a suspension has no reason
        """
        admin = self.get_admin(admin_id)
        action = STATUS_CHANGE_ACTIONS.get(data.status)
        if action is None:
            raise InvalidStatus(f"Status can only be changed to APPROVED or SUSPENDED, not {data.status.value}")
        if admin.status in (AdminStatus.PENDING, AdminStatus.REJECTED):
            raise InvalidStatus(f"Admin is {admin.status.value}; use the approval endpoint")

        reason = (data.reason or "").strip() or None
        previous = admin.status
        self._transition(admin, action, reason)
        admin.rejection_reason = reason if action == AdminAction.SUSPEND else None
        admin = self.admin_repo.save(admin)
        logger.info("Admin %s status %s -> %s by system admin %s",
                    admin.id, previous.value, admin.status.value, system_admin.id)

        return AdminStatusChangeResponse(
            admin_id=admin.id,
            name=admin.name,
            email=admin.email,
            previous_status=previous,
            status=admin.status,
            reason=reason,
            changed_at=utcnow(),
            message=f"Admin status changed to {admin.status.value}",
        )

    def _transition(self, admin: Admin, action: AdminAction, reason: Optional[str]) -> None:
        target = next_admin_status(admin.status, action)
        if target is None:
            raise InvalidStatus(f"Cannot {action.value} an admin that is {admin.status.value}")
        if action in ACTIONS_REQUIRING_REASON and not reason:
            raise ValidationFailed(f"A reason is required to {action.value} an admin")
        admin.status = target

    def _to_list_item(self, admin: Admin) -> AdminListItem:
        return AdminListItem(
            id=admin.id,
            name=admin.name,
            email=admin.email,
            phone=admin.phone,
            role=admin.role,
            status=admin.status,
            institution_id=admin.institution_id,
            institution_name=admin.institution.name if admin.institution else "Unknown institution",
            is_active=admin.is_active,
            last_login=admin.last_login,
            approved_at=admin.approved_at,
            approved_by_name=admin.approver.name if admin.approver else None,
            rejection_reason=admin.rejection_reason,
            created_at=admin.created_at,
        )
