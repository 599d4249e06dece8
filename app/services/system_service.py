"""System administrator service."""
import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AccessDenied, Conflict
from app.core.security import get_password_hash
from app.models.system_admin import SystemAdmin
from app.repositories.admin_repository import SystemAdminRepository
from app.schemas.auth import SystemAdminRegister

logger = logging.getLogger(__name__)


class SystemService:
    """System administrator accounts."""

    def __init__(self, db: Session):
        self.db = db
        self.system_admin_repo = SystemAdminRepository(db)

    def register(self, data: SystemAdminRegister) -> SystemAdmin:
        """
        Create a system administrator.

        Raises:
            AccessDenied: If registration is disabled
            Conflict: If the email is already registered
        """
        if not settings.ALLOW_SYSTEM_ADMIN_REGISTRATION:
            raise AccessDenied("System administrator registration is disabled")
        if self.system_admin_repo.get_by_email(data.email):
            raise Conflict("System administrator with this email already exists")

        system_admin = self.system_admin_repo.create(
            email=data.email,
            password_hash=get_password_hash(data.password),
            name=data.name,
        )
        logger.info("System admin registered: %s (%s)", system_admin.id, system_admin.email)
        return system_admin
