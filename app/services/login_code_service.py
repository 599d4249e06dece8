"""Temporary one-time login codes for end users."""
import logging
import secrets
from typing import Optional

from app.core.config import settings
from app.core.exceptions import InternalError
from app.core.login_codes import LoginCodeStore

logger = logging.getLogger(__name__)

CODE_KEY = "code:{}"
USER_KEY = "user:{}"


class LoginCodeService:
    """
    Issues 4-digit codes that let a user log in once without a password.

    Both directions (code -> user and user -> code) are stored with the same
    TTL so a new code for a user revokes the previous one.
    """

    def __init__(self, store: LoginCodeStore):
        self.store = store

    @property
    def ttl_minutes(self) -> int:
        return settings.LOGIN_CODE_TTL_MINUTES

    def generate(self, user_id: int) -> str:
        """
        Create a fresh code for the user.

        Raises:
            InternalError: If no free code was found
        """
        self.revoke(user_id)
        ttl_seconds = self.ttl_minutes * 60

        for _ in range(settings.LOGIN_CODE_MAX_ATTEMPTS):
            code = f"{secrets.randbelow(10000):04d}"
            if self.store.get(CODE_KEY.format(code)) is not None:
                continue
            self.store.set(CODE_KEY.format(code), str(user_id), ttl_seconds)
            self.store.set(USER_KEY.format(user_id), code, ttl_seconds)
            logger.info("Temporary login code issued for user %s", user_id)
            return code

        logger.error("Could not find a free login code after %s attempts", settings.LOGIN_CODE_MAX_ATTEMPTS)
        raise InternalError("Could not generate a login code, try again later", code="LOGIN_CODE_UNAVAILABLE")

    def consume(self, code: str) -> Optional[int]:
        """Return the user id for code and invalidate it, or None if unknown/expired."""
        user_id = self.store.pop(CODE_KEY.format(code))
        if user_id is None:
            return None
        self.store.delete(USER_KEY.format(user_id))
        return int(user_id)

    def revoke(self, user_id: int) -> None:
        """Drop the user's current code, if any."""
        existing = self.store.get(USER_KEY.format(user_id))
        if existing is not None:
            self.store.delete(CODE_KEY.format(existing))
            self.store.delete(USER_KEY.format(user_id))
