"""
Route-level access policy.

A static, ordered list of rules is evaluated top-down for every request;
the first rule matching the method and path decides. Specific sub-paths
must appear before the broader pattern covering the same prefix.

Path patterns:
    ``*``     one path segment
    ``**``    any remainder, including nothing
    ``{id}``  one numeric segment
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Sequence

from app.core.security import PrincipalRole


@dataclass(frozen=True)
class Principal:
    """Authenticated caller attached to the request."""
    id: int
    role: PrincipalRole
    institution_id: Optional[int] = None
    authorities: List[str] = field(default_factory=list)


class Decision(str, Enum):
    ALLOW = "allow"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


PUBLIC: FrozenSet[PrincipalRole] = frozenset()
AUTHENTICATED: FrozenSet[PrincipalRole] = frozenset(PrincipalRole)

SYSTEM_ADMIN = frozenset({PrincipalRole.SYSTEM_ADMIN})
ADMIN_OR_STAFF = frozenset({PrincipalRole.ADMIN, PrincipalRole.STAFF})
USER = frozenset({PrincipalRole.USER})


def _compile(pattern: str) -> "re.Pattern[str]":
    regex = ""
    segments = pattern.strip("/").split("/")
    for index, segment in enumerate(segments):
        if segment == "**":
            # "/a/**" also matches "/a"
            regex += "(?:/.*)?"
            if index != len(segments) - 1:
                raise ValueError(f"'**' must be the last segment: {pattern}")
        elif segment == "*":
            regex += "/[^/]+"
        elif segment == "{id}":
            regex += r"/\d+"
        else:
            regex += "/" + re.escape(segment)
    return re.compile(f"^{regex}/?$")


@dataclass(frozen=True)
class AccessRule:
    """One row of the access table."""
    pattern: str
    roles: FrozenSet[PrincipalRole]
    methods: Optional[FrozenSet[str]] = None
    public: bool = False

    def __post_init__(self):
        object.__setattr__(self, "_regex", _compile(self.pattern))

    def matches(self, method: str, path: str) -> bool:
        if self.methods is not None and method.upper() not in self.methods:
            return False
        return self._regex.match(path) is not None


def rule(pattern: str, roles: FrozenSet[PrincipalRole], *methods: str) -> AccessRule:
    return AccessRule(
        pattern=pattern,
        roles=roles,
        methods=frozenset(m.upper() for m in methods) if methods else None,
        public=not roles,
    )


ACCESS_RULES: List[AccessRule] = [
    # Open routes
    rule("/api/auth/**", PUBLIC),
    rule("/api/test/**", PUBLIC),
    rule("/api/files/**", PUBLIC, "GET"),
    rule("/api/system/register", PUBLIC, "POST"),
    rule("/api/system/login", PUBLIC, "POST"),
    rule("/api/admin/register", PUBLIC, "POST"),
    rule("/api/admin/login", PUBLIC, "POST"),
    rule("/api/user/signup", PUBLIC, "POST"),
    rule("/api/user/login", PUBLIC, "POST"),
    rule("/api/institutions", PUBLIC, "GET"),

    # System administration
    rule("/api/institutions/**", SYSTEM_ADMIN),
    rule("/api/system/**", SYSTEM_ADMIN),
    rule("/api/admin", SYSTEM_ADMIN, "GET"),
    rule("/api/admin/pending", SYSTEM_ADMIN, "GET"),
    rule("/api/admin/*/status", SYSTEM_ADMIN, "PUT"),
    rule("/api/admin/approve/**", SYSTEM_ADMIN),

    # Institution administration
    rule("/api/admin/**", ADMIN_OR_STAFF),
    rule("/api/user/register", ADMIN_OR_STAFF, "POST"),
    rule("/api/user", ADMIN_OR_STAFF, "GET"),
    rule("/api/user/{id}/**", ADMIN_OR_STAFF),

    # End-user self service
    rule("/api/user/**", USER),

    rule("/api/categories/**", ADMIN_OR_STAFF),
    rule("/api/questions/**", ADMIN_OR_STAFF),
    rule("/api/user-groups/**", ADMIN_OR_STAFF),
    rule("/api/question-assignments/**", ADMIN_OR_STAFF),
    rule("/api/responses/**", ADMIN_OR_STAFF),
    rule("/api/dashboard/**", ADMIN_OR_STAFF),

    rule("/api/**", AUTHENTICATED),
]


def evaluate(
    method: str,
    path: str,
    principal: Optional[Principal],
    rules: Sequence[AccessRule] = ACCESS_RULES,
) -> Decision:
    """Decide whether the caller may reach method + path."""
    if method.upper() == "OPTIONS":
        return Decision.ALLOW
    for access_rule in rules:
        if not access_rule.matches(method, path):
            continue
        if access_rule.public:
            return Decision.ALLOW
        if principal is None:
            return Decision.UNAUTHENTICATED
        if principal.role in access_rule.roles:
            return Decision.ALLOW
        return Decision.FORBIDDEN
    # Outside /api (docs, OpenAPI schema, liveness)
    return Decision.ALLOW
