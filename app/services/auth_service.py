"""Authentication service."""
import logging
from typing import Callable, Dict, Optional, Union

from sqlalchemy.orm import Session

from app.core.authorization import Principal
from app.core.clock import utcnow
from app.core.exceptions import (
    AccountDisabled,
    AdminApprovalPending,
    AdminApprovalRejected,
    AdminSuspended,
    InvalidCredentials,
    InvalidToken,
)
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    PrincipalRole,
    PrincipalType,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password,
)
from app.models.admin import Admin, AdminRole, AdminStatus
from app.models.system_admin import SystemAdmin
from app.models.user import User
from app.repositories.admin_repository import AdminRepository, SystemAdminRepository
from app.repositories.institution_repository import InstitutionRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth import (
    AdminLogin,
    LoginResponse,
    SystemAdminLogin,
    TokenResponse,
    UserInfo,
    UserLogin,
)
from app.services.login_code_service import LoginCodeService

logger = logging.getLogger(__name__)

AnyPrincipal = Union[SystemAdmin, Admin, User]

ROLE_PRINCIPAL_TYPES = {
    PrincipalRole.SYSTEM_ADMIN: PrincipalType.SYSTEM_ADMIN,
    PrincipalRole.ADMIN: PrincipalType.ADMIN,
    PrincipalRole.STAFF: PrincipalType.ADMIN,
    PrincipalRole.USER: PrincipalType.USER,
}


def role_of(principal: AnyPrincipal) -> PrincipalRole:
    """Role a persisted principal acts with."""
    if isinstance(principal, SystemAdmin):
        return PrincipalRole.SYSTEM_ADMIN
    if isinstance(principal, Admin):
        return PrincipalRole.ADMIN if principal.role == AdminRole.ADMIN else PrincipalRole.STAFF
    return PrincipalRole.USER


def type_of(principal: AnyPrincipal) -> PrincipalType:
    if isinstance(principal, SystemAdmin):
        return PrincipalType.SYSTEM_ADMIN
    if isinstance(principal, Admin):
        return PrincipalType.ADMIN
    return PrincipalType.USER


def ensure_admin_can_act(admin: Admin) -> None:
    """
    Only approved, active admins may authenticate or act.

    Raises:
        AdminApprovalPending, AdminApprovalRejected, AdminSuspended, AccountDisabled
    """
    if admin.status == AdminStatus.PENDING:
        raise AdminApprovalPending()
    if admin.status == AdminStatus.REJECTED:
        raise AdminApprovalRejected()
    if admin.status == AdminStatus.SUSPENDED:
        raise AdminSuspended()
    if not admin.is_active:
        raise AccountDisabled()


class AuthService:
    """Authentication business logic."""

    def __init__(self, db: Session, login_codes: Optional[LoginCodeService] = None):
        self.db = db
        self.login_codes = login_codes
        self.institution_repo = InstitutionRepository(db)
        self.system_admin_repo = SystemAdminRepository(db)
        self.admin_repo = AdminRepository(db)
        self.user_repo = UserRepository(db)

    def login(self, request: Union[SystemAdminLogin, AdminLogin, UserLogin]) -> LoginResponse:
        """Dispatch a login request to the handler of its principal type."""
        handlers: Dict[str, Callable[..., LoginResponse]] = {
            "system_admin": self.login_system_admin,
            "admin": self.login_admin,
            "user": self.login_user,
        }
        return handlers[request.principal_type](request)

    def login_system_admin(self, request: SystemAdminLogin) -> LoginResponse:
        """
        Login a system administrator by email.

        Raises:
            InvalidCredentials: If email or password is wrong
            AccountDisabled: If the account is inactive
        """
        system_admin = self.system_admin_repo.get_by_email(request.email)
        if not system_admin or not verify_password(request.password, system_admin.password_hash):
            logger.info("System admin login failed for %s", request.email)
            raise InvalidCredentials()
        if not system_admin.is_active:
            raise AccountDisabled()

        return self._issue(system_admin)

    def login_admin(self, request: AdminLogin) -> LoginResponse:
        """
        Login an institution admin.

        The admin is looked up within the given institution only, so a correct
        email/password for another institution is still rejected.

        Raises:
            InvalidCredentials: If institution, email or password do not match
            AdminApprovalPending, AdminApprovalRejected, AdminSuspended, AccountDisabled
        """
        institution = self.institution_repo.get_by_id(request.institution_id)
        if not institution or not institution.is_active:
            logger.info("Admin login failed: institution %s missing or inactive", request.institution_id)
            raise InvalidCredentials()

        admin = self.admin_repo.get_by_institution_and_email(request.institution_id, request.email)
        if not admin or not verify_password(request.password, admin.password_hash):
            logger.info("Admin login failed for %s in institution %s", request.email, request.institution_id)
            raise InvalidCredentials()

        ensure_admin_can_act(admin)
        return self._issue(admin)

    def login_user(self, request: UserLogin) -> LoginResponse:
        """
        Login an end user by credentials or a one-time login code.

        Raises:
            InvalidCredentials: If the credentials or code are not valid
            AccountDisabled: If the user is inactive
        """
        if request.login_code is not None:
            user = self._user_from_code(request.login_code)
        else:
            institution = self.institution_repo.get_by_id(request.institution_id)
            if not institution or not institution.is_active:
                raise InvalidCredentials()
            user = self.user_repo.get_by_institution_and_username(request.institution_id, request.username)
            if not user or not verify_password(request.password, user.password_hash):
                logger.info("User login failed for %s in institution %s", request.username, request.institution_id)
                raise InvalidCredentials()

        if not user.is_active:
            raise AccountDisabled()
        if not user.institution or not user.institution.is_active:
            raise InvalidCredentials()

        return self._issue(user)

    def _user_from_code(self, code: str) -> User:
        if self.login_codes is None:
            raise InvalidCredentials("Login codes are not available")
        user_id = self.login_codes.consume(code)
        user = self.user_repo.get_by_id(user_id) if user_id is not None else None
        if not user:
            logger.info("Login with unknown or expired code")
            raise InvalidCredentials("Invalid or expired login code")
        return user

    def refresh(self, refresh_token: str) -> TokenResponse:
        """
        Mint a new access token from a refresh token.

        Role, institution and authorities are read from the stored principal,
        never from the old token.

        Raises:
            InvalidToken: If the token is invalid or its principal can no longer log in
        """
        claims = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        if claims is None:
            raise InvalidToken("Invalid refresh token")

        principal = self._load_principal(claims.principal_type, claims.subject_id)
        if principal is None:
            raise InvalidToken("Account no longer exists")
        if not principal.is_active:
            raise InvalidToken("Account is disabled")
        if isinstance(principal, Admin) and principal.status != AdminStatus.APPROVED:
            raise InvalidToken("Admin account is not approved")

        role = role_of(principal)
        access_token, expires_at = create_access_token(
            subject_id=principal.id,
            role=role,
            institution_id=getattr(principal, "institution_id", None),
            authorities=[role.authority],
        )
        return TokenResponse(access_token=access_token, expires_at=expires_at)

    def me(self, principal: Principal) -> UserInfo:
        """
        Identity of the authenticated caller.

        Raises:
            InvalidToken: If the account behind the token no longer exists
        """
        principal_type = ROLE_PRINCIPAL_TYPES[principal.role]
        persisted = self._load_principal(principal_type, principal.id)
        if persisted is None:
            raise InvalidToken("Account no longer exists")
        return build_user_info(persisted)

    def _load_principal(self, principal_type: PrincipalType, subject_id: int) -> Optional[AnyPrincipal]:
        if principal_type == PrincipalType.SYSTEM_ADMIN:
            return self.system_admin_repo.get_by_id(subject_id)
        if principal_type == PrincipalType.ADMIN:
            return self.admin_repo.get_by_id(subject_id)
        return self.user_repo.get_by_id(subject_id)

    def _issue(self, principal: AnyPrincipal) -> LoginResponse:
        """Stamp last_login and build the token pair."""
        principal.last_login = utcnow()
        self.db.commit()
        self.db.refresh(principal)

        role = role_of(principal)
        authorities = [role.authority]
        institution_id = getattr(principal, "institution_id", None)

        access_token, expires_at = create_access_token(
            subject_id=principal.id,
            role=role,
            institution_id=institution_id,
            authorities=authorities,
        )
        refresh_token = create_refresh_token(principal.id, type_of(principal))
        logger.info("%s %s logged in", role.value, principal.id)

        return LoginResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            user=build_user_info(principal),
        )


def build_user_info(principal: AnyPrincipal) -> UserInfo:
    """Identity payload for a persisted principal."""
    role = role_of(principal)
    institution = getattr(principal, "institution", None)
    return UserInfo(
        id=principal.id,
        user_type=role.value,
        name=principal.name,
        email=getattr(principal, "email", None),
        username=getattr(principal, "username", None),
        institution_id=getattr(principal, "institution_id", None),
        institution_name=institution.name if institution else None,
        authorities=[role.authority],
    )
