"""Cross-institution access checks across every admin resource."""
import pytest


@pytest.fixture
def foreign(other_institution, other_user, make_group, make_category, make_question, make_assignment,
            make_response):
    """One of everything, owned by the other institution."""
    group = make_group(other_institution, members=[other_user])
    category = make_category(other_institution)
    question = make_question(other_institution, category_id=category.id)
    assignment = make_assignment(question, user=other_user)
    make_response(assignment, other_user, "good")
    return {
        "user": other_user.id,
        "group": group.id,
        "category": category.id,
        "question": question.id,
        "assignment": assignment.id,
    }


@pytest.mark.parametrize("path", [
    "/api/user/{user}/profile",
    "/api/user-groups/{group}",
    "/api/user-groups/{group}/members",
    "/api/categories/{category}",
    "/api/questions/{question}",
    "/api/question-assignments/{assignment}",
    "/api/question-assignments/user/{user}",
    "/api/question-assignments/group/{group}",
    "/api/responses/user/{user}",
    "/api/responses/assignment/{assignment}",
    "/api/responses/question/{question}/user/{user}/history",
])
def test_foreign_resources_are_denied(client, admin, foreign, auth_headers, path):
    response = client.get(path.format(**foreign), headers=auth_headers(admin))

    assert response.status_code == 403
    assert response.json()["code"] == "INSTITUTION_ACCESS_DENIED"


@pytest.mark.parametrize("path", [
    "/api/user",
    "/api/user-groups",
    "/api/categories",
    "/api/questions",
    "/api/question-assignments",
    "/api/responses/recent",
    "/api/admin/uploads",
])
def test_listings_exclude_other_institutions(client, admin, foreign, auth_headers, path):
    response = client.get(path, headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json() == []


def test_foreign_resources_cannot_be_changed(client, admin, foreign, auth_headers):
    headers = auth_headers(admin)

    responses = [
        client.put(f"/api/user-groups/{foreign['group']}", json={"name": "Mine"}, headers=headers),
        client.delete(f"/api/user-groups/{foreign['group']}/members/{foreign['user']}", headers=headers),
        client.put(f"/api/categories/{foreign['category']}", json={"name": "Mine"}, headers=headers),
        client.delete(f"/api/questions/{foreign['question']}", headers=headers),
        client.put(f"/api/question-assignments/{foreign['assignment']}", json={"priority": 1}, headers=headers),
        client.delete(f"/api/user/{foreign['user']}", headers=headers),
    ]

    assert [r.status_code for r in responses] == [403] * len(responses)


def test_statistics_are_scoped(client, admin, foreign, auth_headers):
    headers = auth_headers(admin)

    questions = client.get("/api/questions/statistics", headers=headers).json()
    assignments = client.get("/api/question-assignments/statistics", headers=headers).json()
    stats = client.get("/api/dashboard/stats", headers=headers).json()
    groups = client.get("/api/dashboard/user-groups", headers=headers).json()

    assert questions["total_questions"] == 0
    assert assignments["total_assignments"] == 0
    assert stats["total_users"] == 0
    assert stats["today_responses"]["total"] == 0
    assert groups == {"groups": [], "total_members": 0, "ungrouped_members": 0}


def test_foreign_user_cannot_answer_local_assignment(client, user, other_user, institution, make_question,
                                                     make_assignment, auth_headers):
    assignment = make_assignment(make_question(institution), user=user)

    response = client.post(f"/api/user/questions/{assignment.id}/response",
                           json={"response_data": {"answer": "good"}}, headers=auth_headers(other_user))

    assert response.status_code == 403
