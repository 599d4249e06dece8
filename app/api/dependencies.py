"""Shared route dependencies: current principal, role guards and services."""
from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.authorization import Principal
from app.core.database import get_db
from app.core.exceptions import AccessDenied, AccountDisabled, AuthenticationFailed
from app.core.login_codes import LoginCodeStore, get_login_code_store
from app.core.security import PrincipalRole
from app.models.admin import Admin
from app.models.system_admin import SystemAdmin
from app.models.user import User
from app.repositories.admin_repository import AdminRepository, SystemAdminRepository
from app.repositories.user_repository import UserRepository
from app.services.auth_service import ensure_admin_can_act
from app.services.file_storage import FileStorage, get_file_storage
from app.services.login_code_service import LoginCodeService


def get_principal(request: Request) -> Principal:
    """
    Principal resolved by the authentication middleware.

    Raises:
        AuthenticationFailed: If the request carries no valid access token
    """
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationFailed()
    return principal


CurrentPrincipal = Annotated[Principal, Depends(get_principal)]


def require_roles(*roles: PrincipalRole) -> Callable[..., Principal]:
    """Dependency factory that only lets the given roles through."""
    def checker(principal: CurrentPrincipal) -> Principal:
        if principal.role not in roles:
            raise AccessDenied()
        return principal
    return checker


def get_current_system_admin(
    principal: Annotated[Principal, Depends(require_roles(PrincipalRole.SYSTEM_ADMIN))],
    db: Annotated[Session, Depends(get_db)],
) -> SystemAdmin:
    system_admin = SystemAdminRepository(db).get_by_id(principal.id)
    if system_admin is None:
        raise AuthenticationFailed()
    if not system_admin.is_active:
        raise AccountDisabled()
    return system_admin


def get_current_admin(
    principal: Annotated[Principal, Depends(require_roles(PrincipalRole.ADMIN, PrincipalRole.STAFF))],
    db: Annotated[Session, Depends(get_db)],
) -> Admin:
    """
    Persisted admin behind the token. The approval state is checked on every
    request, so a suspension takes effect before the token expires.
    """
    admin = AdminRepository(db).get_by_id(principal.id)
    if admin is None:
        raise AuthenticationFailed()
    ensure_admin_can_act(admin)
    return admin


def get_current_user(
    principal: Annotated[Principal, Depends(require_roles(PrincipalRole.USER))],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    user = UserRepository(db).get_by_id(principal.id)
    if user is None:
        raise AuthenticationFailed()
    if not user.is_active:
        raise AccountDisabled()
    return user


# Type aliases for cleaner route signatures
SystemAdminPrincipal = Annotated[SystemAdmin, Depends(get_current_system_admin)]
AdminPrincipal = Annotated[Admin, Depends(get_current_admin)]
UserPrincipal = Annotated[User, Depends(get_current_user)]


def get_login_code_service(
    store: Annotated[LoginCodeStore, Depends(get_login_code_store)],
) -> LoginCodeService:
    return LoginCodeService(store)


LoginCodes = Annotated[LoginCodeService, Depends(get_login_code_service)]
Storage = Annotated[FileStorage, Depends(get_file_storage)]


def client_ip(request: Request) -> Optional[str]:
    """Client address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
