"""Route access policy and authentication middleware tests."""
import pytest

from app.core.authorization import (
    PUBLIC,
    SYSTEM_ADMIN,
    Decision,
    Principal,
    evaluate,
    rule,
)
from app.core.security import PrincipalRole

SYSTEM = Principal(id=1, role=PrincipalRole.SYSTEM_ADMIN)
ADMIN = Principal(id=1, role=PrincipalRole.ADMIN, institution_id=1)
STAFF = Principal(id=2, role=PrincipalRole.STAFF, institution_id=1)
USER = Principal(id=1, role=PrincipalRole.USER, institution_id=1)


@pytest.mark.parametrize("method,path", [
    ("POST", "/api/auth/login"),
    ("POST", "/api/auth/refresh"),
    ("GET", "/api/test/health"),
    ("GET", "/api/institutions"),
    ("POST", "/api/admin/register"),
    ("POST", "/api/user/signup"),
    ("POST", "/api/system/register"),
    ("POST", "/api/system/login"),
    ("POST", "/api/admin/login"),
    ("POST", "/api/user/login"),
    ("GET", "/api/files/12"),
    ("GET", "/docs"),
    ("GET", "/health"),
])
def test_public_routes_allow_anonymous(method, path):
    assert evaluate(method, path, None) == Decision.ALLOW


@pytest.mark.parametrize("method,path", [
    ("GET", "/api/questions"),
    ("POST", "/api/institutions"),
    ("GET", "/api/user/questions"),
    ("GET", "/api/dashboard/stats"),
    ("GET", "/api/anything-else"),
])
def test_protected_routes_need_a_principal(method, path):
    assert evaluate(method, path, None) == Decision.UNAUTHENTICATED


def test_preflight_is_always_allowed():
    assert evaluate("OPTIONS", "/api/questions", None) == Decision.ALLOW


def test_institution_management_is_system_admin_only():
    assert evaluate("POST", "/api/institutions", SYSTEM) == Decision.ALLOW
    assert evaluate("PUT", "/api/institutions/3", SYSTEM) == Decision.ALLOW
    assert evaluate("POST", "/api/institutions", ADMIN) == Decision.FORBIDDEN
    assert evaluate("DELETE", "/api/institutions/3", USER) == Decision.FORBIDDEN


def test_admin_approval_is_system_admin_only():
    assert evaluate("GET", "/api/admin/pending", SYSTEM) == Decision.ALLOW
    assert evaluate("PUT", "/api/admin/approve/4", SYSTEM) == Decision.ALLOW
    assert evaluate("PUT", "/api/admin/4/status", SYSTEM) == Decision.ALLOW
    assert evaluate("GET", "/api/admin", SYSTEM) == Decision.ALLOW
    assert evaluate("GET", "/api/admin/pending", ADMIN) == Decision.FORBIDDEN
    assert evaluate("PUT", "/api/admin/approve/4", STAFF) == Decision.FORBIDDEN


def test_institution_admin_routes():
    for principal in (ADMIN, STAFF):
        assert evaluate("GET", "/api/admin/me", principal) == Decision.ALLOW
        assert evaluate("GET", "/api/admin/uploads", principal) == Decision.ALLOW
        assert evaluate("POST", "/api/questions", principal) == Decision.ALLOW
        assert evaluate("GET", "/api/responses/user/3", principal) == Decision.ALLOW
        assert evaluate("POST", "/api/user/register", principal) == Decision.ALLOW
        assert evaluate("GET", "/api/user", principal) == Decision.ALLOW
    assert evaluate("GET", "/api/admin/me", SYSTEM) == Decision.FORBIDDEN
    assert evaluate("POST", "/api/questions", USER) == Decision.FORBIDDEN
    assert evaluate("GET", "/api/dashboard/stats", SYSTEM) == Decision.FORBIDDEN


def test_numeric_user_paths_belong_to_admins_and_the_rest_to_users():
    assert evaluate("GET", "/api/user/5/profile", ADMIN) == Decision.ALLOW
    assert evaluate("DELETE", "/api/user/5", STAFF) == Decision.ALLOW
    assert evaluate("GET", "/api/user/5/profile", USER) == Decision.FORBIDDEN

    assert evaluate("GET", "/api/user/questions", USER) == Decision.ALLOW
    assert evaluate("POST", "/api/user/uploads", USER) == Decision.ALLOW
    assert evaluate("GET", "/api/user/profile", USER) == Decision.ALLOW
    assert evaluate("GET", "/api/user/questions", ADMIN) == Decision.FORBIDDEN


def test_first_matching_rule_wins():
    rules = [
        rule("/api/reports/public", PUBLIC, "GET"),
        rule("/api/reports/**", SYSTEM_ADMIN),
    ]

    assert evaluate("GET", "/api/reports/public", None, rules) == Decision.ALLOW
    assert evaluate("POST", "/api/reports/public", None, rules) == Decision.UNAUTHENTICATED
    assert evaluate("GET", "/api/reports/7", USER, rules) == Decision.FORBIDDEN


def test_unmatched_path_is_allowed():
    assert evaluate("GET", "/elsewhere", None, [rule("/api/**", SYSTEM_ADMIN)]) == Decision.ALLOW


def test_double_star_must_be_last():
    with pytest.raises(ValueError):
        rule("/api/**/items", SYSTEM_ADMIN)


def test_middleware_rejects_anonymous_request(client):
    response = client.get("/api/questions")

    assert response.status_code == 401
    body = response.json()
    assert body["code"] == "UNAUTHORIZED"
    assert "timestamp" in body
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_middleware_rejects_wrong_role(client, user, auth_headers):
    response = client.get("/api/questions", headers=auth_headers(user))

    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_middleware_treats_bad_token_as_anonymous(client):
    response = client.get("/api/questions", headers={"Authorization": "Bearer nonsense"})

    assert response.status_code == 401


def test_middleware_ignores_non_bearer_scheme(client, admin, auth_headers):
    token = auth_headers(admin)["Authorization"].split(" ", 1)[1]

    response = client.get("/api/questions", headers={"Authorization": f"Basic {token}"})

    assert response.status_code == 401


def test_public_health_routes(client):
    assert client.get("/health").json() == {"status": "healthy"}
    body = client.get("/api/test/health").json()
    assert body["status"] == "OK"
    assert "version" in client.get("/api/test/version").json()
