"""Password hashing and token issuance/verification."""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Tuple

import bcrypt
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

from app.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class PrincipalRole(str, Enum):
    """Roles carried in access tokens."""
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    ADMIN = "ADMIN"
    STAFF = "STAFF"
    USER = "USER"

    @property
    def authority(self) -> str:
        return f"ROLE_{self.value}"


class PrincipalType(str, Enum):
    """Credential table a subject id refers to."""
    SYSTEM_ADMIN = "system_admin"
    ADMIN = "admin"
    USER = "user"


@dataclass
class TokenClaims:
    """Decoded token content."""
    subject_id: int
    token_type: str
    expires_at: datetime
    role: Optional[PrincipalRole] = None
    institution_id: Optional[int] = None
    authorities: List[str] = field(default_factory=list)
    principal_type: Optional[PrincipalType] = None


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _encode(claims: dict, expires_delta: timedelta) -> Tuple[str, datetime]:
    now = datetime.now(timezone.utc)
    expire = now + expires_delta
    to_encode = dict(claims)
    to_encode.update({"iat": int(now.timestamp()), "exp": int(expire.timestamp())})
    token = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, datetime.fromtimestamp(int(expire.timestamp()), tz=timezone.utc)


def create_access_token(
    subject_id: int,
    role: PrincipalRole,
    institution_id: Optional[int],
    authorities: List[str],
    expires_delta: Optional[timedelta] = None,
) -> Tuple[str, datetime]:
    """
    Create a signed access token.

    Returns:
        Tuple of (token, expiry instant in UTC)
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(subject_id),
        "type": ACCESS_TOKEN_TYPE,
        "role": role.value,
        "institution_id": institution_id,
        "authorities": list(authorities),
    }
    return _encode(claims, expires_delta)


def create_refresh_token(
    subject_id: int,
    principal_type: PrincipalType,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed refresh token.

    Only identifies the subject; role, tenant and authorities are looked up
    again when the token is exchanged.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(subject_id),
        "type": REFRESH_TOKEN_TYPE,
        "principal": principal_type.value,
    }
    token, _ = _encode(claims, expires_delta)
    return token


def decode_token(token: Optional[str], expected_type: str = ACCESS_TOKEN_TYPE) -> Optional[TokenClaims]:
    """
    Verify a token and return its claims.

    Returns None for any invalid token (bad signature, malformed, expired,
    unsupported algorithm, wrong token type, empty). Never raises.
    """
    if not token:
        logger.warning("Token is empty")
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        return None
    except JWTClaimsError as e:
        logger.warning("Invalid token claims: %s", e)
        return None
    except JWTError as e:
        logger.warning("Token verification failed: %s", e)
        return None

    if payload.get("type") != expected_type:
        logger.warning("Unexpected token type: %s", payload.get("type"))
        return None

    try:
        claims = TokenClaims(
            subject_id=int(payload["sub"]),
            token_type=payload["type"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
        if expected_type == ACCESS_TOKEN_TYPE:
            claims.role = PrincipalRole(payload["role"])
            institution_id = payload.get("institution_id")
            claims.institution_id = int(institution_id) if institution_id is not None else None
            claims.authorities = [str(a) for a in payload.get("authorities", [])]
        else:
            claims.principal_type = PrincipalType(payload["principal"])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Malformed token payload: %s", e)
        return None

    return claims
