"""Authentication gateway and route access policy."""
import logging
from typing import Optional, Sequence

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.authorization import ACCESS_RULES, AccessRule, Decision, Principal, evaluate
from app.core.exceptions import error_body
from app.core.security import decode_token

logger = logging.getLogger(__name__)


def principal_from_header(authorization: Optional[str]) -> Optional[Principal]:
    """Principal carried by a ``Bearer`` access token, or None."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None

    claims = decode_token(token.strip())
    if claims is None:
        return None
    return Principal(
        id=claims.subject_id,
        role=claims.role,
        institution_id=claims.institution_id,
        authorities=claims.authorities,
    )


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """
    Resolve the caller once per request and enforce the access rules
    before routing. ``request.state.principal`` is None for anonymous callers.
    """

    def __init__(self, app, rules: Sequence[AccessRule] = ACCESS_RULES):
        super().__init__(app)
        self.rules = rules

    async def dispatch(self, request: Request, call_next):
        try:
            principal = principal_from_header(request.headers.get("Authorization"))
        except Exception:
            logger.exception("Failed to resolve principal; treating request as anonymous")
            principal = None
        request.state.principal = principal

        decision = evaluate(request.method, request.url.path, principal, self.rules)
        if decision == Decision.UNAUTHENTICATED:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=error_body("Authentication required", "UNAUTHORIZED"),
                headers={"WWW-Authenticate": "Bearer"},
            )
        if decision == Decision.FORBIDDEN:
            logger.info("Denied %s %s to %s %s", request.method, request.url.path,
                        principal.role.value, principal.id)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content=error_body("Access denied", "FORBIDDEN"),
            )
        return await call_next(request)
