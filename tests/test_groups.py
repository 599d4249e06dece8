"""User group tests."""


def _create(client, headers, name="Morning Program", description=None):
    return client.post("/api/user-groups", json={"name": name, "description": description}, headers=headers)


def test_create_and_list(client, admin, institution, auth_headers):
    headers = auth_headers(admin)

    response = _create(client, headers, description="Daily walk")

    assert response.status_code == 201
    body = response.json()
    assert body["institution_id"] == institution.id
    assert body["member_count"] == 0
    assert body["created_by_name"] == admin.name
    assert [g["name"] for g in client.get("/api/user-groups", headers=headers).json()] == ["Morning Program"]


def test_name_is_unique_per_institution(client, admin, other_admin, auth_headers):
    assert _create(client, auth_headers(admin)).status_code == 201

    duplicate = _create(client, auth_headers(admin))
    elsewhere = _create(client, auth_headers(other_admin))

    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "USER_GROUP_ALREADY_EXISTS"
    assert elsewhere.status_code == 201


def test_add_members_skips_existing(client, admin, user, make_user, institution, auth_headers):
    headers = auth_headers(admin)
    second = make_user(institution, "user2")
    group_id = _create(client, headers).json()["id"]

    first = client.post(f"/api/user-groups/{group_id}/members", json={"user_ids": [user.id]}, headers=headers)
    again = client.post(f"/api/user-groups/{group_id}/members",
                        json={"user_ids": [user.id, second.id, second.id]}, headers=headers)

    assert first.json()["member_count"] == 1
    assert again.json()["member_count"] == 2
    members = client.get(f"/api/user-groups/{group_id}/members", headers=headers).json()
    assert {m["user_id"] for m in members} == {user.id, second.id}
    assert members[0]["added_by"] == admin.id


def test_add_member_from_another_institution(client, admin, other_user, auth_headers):
    headers = auth_headers(admin)
    group_id = _create(client, headers).json()["id"]

    response = client.post(f"/api/user-groups/{group_id}/members", json={"user_ids": [other_user.id]},
                           headers=headers)

    assert response.status_code == 403
    assert response.json()["code"] == "INSTITUTION_ACCESS_DENIED"


def test_add_unknown_member(client, admin, auth_headers):
    headers = auth_headers(admin)
    group_id = _create(client, headers).json()["id"]

    response = client.post(f"/api/user-groups/{group_id}/members", json={"user_ids": [999]}, headers=headers)

    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"


def test_empty_member_list_is_invalid(client, admin, auth_headers):
    headers = auth_headers(admin)
    group_id = _create(client, headers).json()["id"]

    response = client.post(f"/api/user-groups/{group_id}/members", json={"user_ids": []}, headers=headers)

    assert response.status_code == 400


def test_remove_member_then_add_again(client, admin, user, auth_headers):
    headers = auth_headers(admin)
    group_id = _create(client, headers).json()["id"]
    client.post(f"/api/user-groups/{group_id}/members", json={"user_ids": [user.id]}, headers=headers)

    removed = client.delete(f"/api/user-groups/{group_id}/members/{user.id}", headers=headers)
    assert removed.status_code == 200
    assert removed.json()["member_count"] == 0
    assert client.get(f"/api/user-groups/{group_id}/members", headers=headers).json() == []

    missing = client.delete(f"/api/user-groups/{group_id}/members/{user.id}", headers=headers)
    assert missing.status_code == 404

    readded = client.post(f"/api/user-groups/{group_id}/members", json={"user_ids": [user.id]}, headers=headers)
    assert readded.json()["member_count"] == 1


def test_update_and_soft_delete(client, admin, auth_headers):
    headers = auth_headers(admin)
    group_id = _create(client, headers, description="Old").json()["id"]

    updated = client.put(f"/api/user-groups/{group_id}", json={"name": "Evening Program"}, headers=headers)
    assert updated.json()["name"] == "Evening Program"
    assert updated.json()["description"] == "Old"
    assert [g["id"] for g in client.get("/api/user-groups/active", headers=headers).json()] == [group_id]

    assert client.delete(f"/api/user-groups/{group_id}", headers=headers).status_code == 204
    assert client.get("/api/user-groups/active", headers=headers).json() == []
    assert client.get("/api/user-groups", headers=headers).json() == []
    inactive = client.get("/api/user-groups", params={"active_only": False}, headers=headers).json()
    assert inactive[0]["is_active"] is False


def test_other_institution_group_is_hidden(client, admin, other_admin, auth_headers):
    group_id = _create(client, auth_headers(other_admin)).json()["id"]
    headers = auth_headers(admin)

    assert client.get(f"/api/user-groups/{group_id}", headers=headers).status_code == 403
    assert client.get(f"/api/user-groups/{group_id}/members", headers=headers).status_code == 403
    assert client.get("/api/user-groups", headers=headers).json() == []


def test_unknown_group(client, admin, auth_headers):
    response = client.get("/api/user-groups/999", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["code"] == "USER_GROUP_NOT_FOUND"
