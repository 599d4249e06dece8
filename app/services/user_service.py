"""User service."""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InstitutionNotFound, UserAlreadyExists, UserGroupNotFound, UserNotFound
from app.core.security import get_password_hash
from app.models.admin import Admin
from app.models.user import User
from app.repositories.group_repository import GroupRepository
from app.repositories.institution_repository import InstitutionRepository
from app.repositories.user_repository import UserRepository
from app.schemas.user import (
    LoginCodeResponse,
    UserListItem,
    UserProfile,
    UserProfileUpdate,
    UserRegisterRequest,
    UserRegisterResponse,
    UserSelfUpdate,
    UserSignupRequest,
)
from app.services.login_code_service import LoginCodeService
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)


class UserService:
    """User business logic."""

    def __init__(self, db: Session, login_codes: Optional[LoginCodeService] = None):
        self.db = db
        self.login_codes = login_codes
        self.user_repo = UserRepository(db)
        self.group_repo = GroupRepository(db)
        self.institution_repo = InstitutionRepository(db)

    def signup(self, data: UserSignupRequest) -> User:
        """
        Self-signup of an end user.

        Raises:
            InstitutionNotFound: If the institution does not exist or is inactive
            UserAlreadyExists: If the username is taken in the institution
        """
        institution = self.institution_repo.get_by_id(data.institution_id)
        if not institution or not institution.is_active:
            raise InstitutionNotFound()
        if self.user_repo.exists_by_institution_and_username(institution.id, data.username):
            raise UserAlreadyExists()

        user = self.user_repo.create(
            institution_id=institution.id,
            username=data.username,
            password_hash=get_password_hash(data.password),
            name=data.name,
            phone=data.phone,
            birth_date=data.birth_date,
        )
        user = self.user_repo.save(user)
        logger.info("User signed up: %s (%s) in institution %s", user.id, user.username, institution.id)
        return user

    def register(self, data: UserRegisterRequest, admin: Admin) -> UserRegisterResponse:
        """
        Register a user in the admin's institution, add group memberships and
        issue a first temporary login code.

        Raises:
            UserAlreadyExists: If the username is taken in the institution
            UserGroupNotFound: If a group does not exist
            InstitutionAccessDenied: If a group belongs to another institution
        """
        institution_id = admin.institution_id
        if self.user_repo.exists_by_institution_and_username(institution_id, data.username):
            raise UserAlreadyExists()

        group_ids = list(dict.fromkeys(data.group_ids))
        groups = self.group_repo.get_by_ids(group_ids)
        if len(groups) != len(group_ids):
            raise UserGroupNotFound()
        for group in groups:
            ensure_same_institution(group.institution_id, institution_id, "user group")

        values = data.model_dump(exclude={"password", "group_ids"})
        user = self.user_repo.create(
            institution_id=institution_id,
            password_hash=get_password_hash(data.password),
            **values,
        )
        for group in groups:
            self.group_repo.add_membership(group.id, user.id, added_by=admin.id)
            self.group_repo.refresh_member_count(group)
        user = self.user_repo.save(user)
        logger.info("User registered: %s (%s) by admin %s", user.id, user.username, admin.id)

        code = self.login_codes.generate(user.id)
        return UserRegisterResponse(
            user=UserProfile.model_validate(user),
            temporary_code=code,
            expires_in_minutes=self.login_codes.ttl_minutes,
        )

    def get_user(self, user_id: int) -> User:
        """
        Get user by ID.

        Raises:
            UserNotFound: If user not found
        """
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise UserNotFound()
        return user

    def get_user_in_institution(self, user_id: int, institution_id: int) -> User:
        """
        Get user by ID, checking it belongs to the institution.

        Raises:
            UserNotFound: If user not found
            InstitutionAccessDenied: If user belongs to another institution
        """
        user = self.get_user(user_id)
        ensure_same_institution(user.institution_id, institution_id, "user")
        return user

    def get_users(self, institution_id: int, is_active: Optional[bool] = None) -> List[UserListItem]:
        """Users of the institution with their active group ids."""
        users = self.user_repo.get_by_institution(institution_id, is_active=is_active)
        group_ids = self.user_repo.active_group_ids([user.id for user in users])
        return [
            UserListItem(
                id=user.id,
                username=user.username,
                name=user.name,
                phone=user.phone,
                severity=user.severity,
                is_active=user.is_active,
                last_login=user.last_login,
                group_ids=group_ids.get(user.id, []),
                created_at=user.created_at,
            )
            for user in users
        ]

    def update_profile(self, user_id: int, data: UserProfileUpdate, institution_id: int) -> User:
        """
        Update a user's profile; only provided fields change.

        Raises:
            UserNotFound: If user not found
            InstitutionAccessDenied: If user belongs to another institution
        """
        user = self.get_user_in_institution(user_id, institution_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        return self.user_repo.save(user)

    def update_own_profile(self, user: User, data: UserSelfUpdate) -> User:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(user, key, value)
        return self.user_repo.save(user)

    def delete_user(self, user_id: int, institution_id: int) -> None:
        """
        Soft delete user.

        Raises:
            UserNotFound: If user not found
            InstitutionAccessDenied: If user belongs to another institution
        """
        user = self.get_user_in_institution(user_id, institution_id)
        user.is_active = False
        self.user_repo.save(user)
        if self.login_codes is not None:
            self.login_codes.revoke(user.id)
        logger.info("User deactivated: %s", user_id)

    def generate_login_code(self, user_id: int, institution_id: int) -> LoginCodeResponse:
        """
        Issue a temporary login code for a user of the institution.

        Raises:
            UserNotFound: If user not found
            InstitutionAccessDenied: If user belongs to another institution
        """
        user = self.get_user_in_institution(user_id, institution_id)
        code = self.login_codes.generate(user.id)
        return LoginCodeResponse(
            user_id=user.id,
            temporary_code=code,
            expires_in_minutes=self.login_codes.ttl_minutes,
        )
