"""User sign-up, registration and profile tests."""
import re

from conftest import PASSWORD


def _signup(client, institution, username="newbie", **extra):
    body = {"institution_id": institution.id, "username": username, "password": "pass1234", "name": "Newbie"}
    body.update(extra)
    return client.post("/api/user/signup", json=body)


def test_signup_then_login(client, institution):
    response = _signup(client, institution, phone="010-1234-5678")

    assert response.status_code == 201
    assert response.json()["severity"] == "MILD"

    login = client.post("/api/auth/login/user", json={
        "institution_id": institution.id, "username": "newbie", "password": "pass1234",
    })
    assert login.status_code == 200


def test_username_is_unique_per_institution_only(client, institution, other_institution):
    assert _signup(client, institution).status_code == 201

    duplicate = _signup(client, institution)
    elsewhere = _signup(client, other_institution)

    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "USER_ALREADY_EXISTS"
    assert elsewhere.status_code == 201


def test_signup_to_inactive_institution(client, db, institution):
    institution.is_active = False
    db.commit()

    response = _signup(client, institution)

    assert response.status_code == 404


def test_signup_validates_fields(client, institution):
    response = _signup(client, institution, username="ab")

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "username"


def test_admin_registers_user_with_groups_and_code(client, admin, institution, make_group, auth_headers):
    group = make_group(institution, admin=admin)

    response = client.post("/api/user/register", json={
        "username": "grandma",
        "password": "pass1234",
        "name": "Kim Grandma",
        "severity": "MODERATE",
        "guardian_name": "Kim Son",
        "emergency_contacts": [{"name": "Kim Son", "phone": "010-0000-0000", "relation": "son"}],
        "group_ids": [group.id],
    }, headers=auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert re.fullmatch(r"\d{4}", body["temporary_code"])
    assert body["expires_in_minutes"] == 15
    assert body["user"]["institution_id"] == institution.id
    assert body["user"]["emergency_contacts"][0]["relation"] == "son"

    listing = client.get("/api/user", headers=auth_headers(admin)).json()
    assert listing[0]["group_ids"] == [group.id]

    login = client.post("/api/auth/login/user", json={"login_code": body["temporary_code"]})
    assert login.status_code == 200
    assert login.json()["user"]["username"] == "grandma"


def test_register_with_foreign_group_is_refused(client, admin, other_institution, make_group, auth_headers):
    foreign = make_group(other_institution)

    response = client.post("/api/user/register", json={
        "username": "grandpa", "password": "pass1234", "name": "Grandpa", "group_ids": [foreign.id],
    }, headers=auth_headers(admin))

    assert response.status_code == 403
    assert response.json()["code"] == "INSTITUTION_ACCESS_DENIED"


def test_register_with_unknown_group(client, admin, auth_headers):
    response = client.post("/api/user/register", json={
        "username": "grandpa", "password": "pass1234", "name": "Grandpa", "group_ids": [999],
    }, headers=auth_headers(admin))

    assert response.status_code == 404


def test_list_users_is_scoped_and_filterable(client, db, admin, user, other_user, make_user, institution,
                                             auth_headers):
    retired = make_user(institution, "retired")
    retired.is_active = False
    db.commit()
    headers = auth_headers(admin)

    everyone = client.get("/api/user", headers=headers).json()
    active = client.get("/api/user", params={"is_active": True}, headers=headers).json()

    assert {item["id"] for item in everyone} == {user.id, retired.id}
    assert [item["id"] for item in active] == [user.id]


def test_admin_reads_and_updates_profile(client, admin, user, auth_headers):
    headers = auth_headers(admin)

    response = client.put(f"/api/user/{user.id}/profile",
                          json={"care_notes": "Needs a walker", "severity": "SEVERE"}, headers=headers)

    assert response.status_code == 200
    profile = client.get(f"/api/user/{user.id}/profile", headers=headers).json()
    assert profile["care_notes"] == "Needs a walker"
    assert profile["severity"] == "SEVERE"
    assert profile["name"] == user.name


def test_admin_cannot_touch_other_institution_users(client, admin, other_user, auth_headers):
    headers = auth_headers(admin)

    read = client.get(f"/api/user/{other_user.id}/profile", headers=headers)
    update = client.put(f"/api/user/{other_user.id}/profile", json={"name": "X"}, headers=headers)
    code = client.post(f"/api/user/{other_user.id}/generate-code", headers=headers)

    for response in (read, update, code):
        assert response.status_code == 403
        assert response.json()["code"] == "INSTITUTION_ACCESS_DENIED"


def test_delete_is_soft_and_blocks_login(client, admin, user, institution, auth_headers):
    response = client.delete(f"/api/user/{user.id}", headers=auth_headers(admin))

    assert response.status_code == 204
    profile = client.get(f"/api/user/{user.id}/profile", headers=auth_headers(admin)).json()
    assert profile["is_active"] is False
    login = client.post("/api/auth/login/user", json={
        "institution_id": institution.id, "username": user.username, "password": PASSWORD,
    })
    assert login.status_code == 403


def test_new_code_replaces_the_old_one(client, admin, user, auth_headers):
    headers = auth_headers(admin)

    first = client.post(f"/api/user/{user.id}/generate-code", headers=headers).json()["temporary_code"]
    second = client.post(f"/api/user/{user.id}/generate-code", headers=headers).json()["temporary_code"]

    if first != second:
        assert client.post("/api/auth/login/user", json={"login_code": first}).status_code == 401
    assert client.post("/api/auth/login/user", json={"login_code": second}).status_code == 200


def test_user_own_profile(client, user, auth_headers):
    headers = auth_headers(user)

    assert client.get("/api/user/profile", headers=headers).json()["username"] == user.username

    response = client.put("/api/user/profile",
                          json={"phone": "010-9999-8888", "fcm_token": "device-token"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["phone"] == "010-9999-8888"


def test_user_cannot_change_protected_fields(client, user, auth_headers):
    response = client.put("/api/user/profile", json={"severity": "SEVERE", "name": "Boss"},
                          headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["severity"] == "MILD"
    assert response.json()["name"] == user.name


def test_deactivated_user_token_is_refused(client, db, user, auth_headers):
    headers = auth_headers(user)
    user.is_active = False
    db.commit()

    response = client.get("/api/user/profile", headers=headers)

    assert response.status_code == 403
    assert response.json()["code"] == "ACCOUNT_DISABLED"
