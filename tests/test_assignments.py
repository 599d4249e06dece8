"""Question assignment tests."""
import pytest

from app.models import QuestionResponse


def _assign(client, headers, **body):
    return client.post("/api/question-assignments", json=body, headers=headers)


def test_assign_to_user(client, admin, user, institution, make_question, auth_headers):
    question = make_question(institution)

    response = _assign(client, auth_headers(admin), question_id=question.id, user_id=user.id)

    assert response.status_code == 201
    body = response.json()
    assert body["user_name"] == user.name
    assert body["group_id"] is None
    assert body["priority"] == 5
    assert body["assigned_by_name"] == admin.name
    assert body["question_title"] == question.title


def test_assign_to_group(client, admin, user, institution, make_group, make_question, auth_headers):
    group = make_group(institution, members=[user])
    question = make_question(institution)

    response = _assign(client, auth_headers(admin), question_id=question.id, group_id=group.id, priority=1)

    assert response.status_code == 201
    assert response.json()["group_name"] == group.name
    assert response.json()["priority"] == 1


@pytest.mark.parametrize("targets", [{}, {"user_id": 1, "group_id": 1}])
def test_exactly_one_target(client, admin, institution, make_question, auth_headers, targets):
    question = make_question(institution)

    response = _assign(client, auth_headers(admin), question_id=question.id, **targets)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ASSIGNMENT_TARGET"


def test_priority_must_be_positive(client, admin, user, institution, make_question, auth_headers):
    question = make_question(institution)

    response = _assign(client, auth_headers(admin), question_id=question.id, user_id=user.id, priority=0)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "priority"


def test_duplicate_assignment(client, admin, user, institution, make_question, make_assignment, auth_headers):
    question = make_question(institution)
    make_assignment(question, user=user)

    response = _assign(client, auth_headers(admin), question_id=question.id, user_id=user.id)

    assert response.status_code == 409
    assert response.json()["code"] == "QUESTION_ALREADY_ASSIGNED"


def test_cannot_assign_across_institutions(client, admin, other_user, institution, other_institution,
                                           make_question, auth_headers):
    question = make_question(institution)
    foreign_question = make_question(other_institution)
    headers = auth_headers(admin)

    to_foreign_user = _assign(client, headers, question_id=question.id, user_id=other_user.id)
    foreign_question_response = _assign(client, headers, question_id=foreign_question.id, user_id=other_user.id)

    assert to_foreign_user.status_code == 403
    assert foreign_question_response.status_code == 403


def test_unknown_targets(client, admin, institution, make_question, auth_headers):
    question = make_question(institution)
    headers = auth_headers(admin)

    assert _assign(client, headers, question_id=question.id, user_id=999).json()["code"] == "USER_NOT_FOUND"
    assert _assign(client, headers, question_id=question.id, group_id=999).json()["code"] == "USER_GROUP_NOT_FOUND"
    assert _assign(client, headers, question_id=999, user_id=999).json()["code"] == "QUESTION_NOT_FOUND"


def test_listings_and_statistics(client, admin, user, institution, make_group, make_question, make_assignment,
                                 auth_headers):
    group = make_group(institution)
    mood = make_question(institution, "Mood")
    sleep = make_question(institution, "Sleep")
    direct = make_assignment(mood, user=user, priority=2)
    second = make_assignment(sleep, user=user, priority=1)
    shared = make_assignment(mood, group=group)
    headers = auth_headers(admin)

    everything = client.get("/api/question-assignments", headers=headers).json()
    by_user = client.get(f"/api/question-assignments/user/{user.id}", headers=headers).json()
    by_group = client.get(f"/api/question-assignments/group/{group.id}", headers=headers).json()
    stats = client.get("/api/question-assignments/statistics", headers=headers).json()

    assert {item["id"] for item in everything} == {direct.id, second.id, shared.id}
    assert [item["id"] for item in by_user] == [second.id, direct.id]
    assert [item["id"] for item in by_group] == [shared.id]
    assert stats == {"total_assignments": 3, "user_assignments": 2, "group_assignments": 1}
    assert client.get(f"/api/question-assignments/by-user/{user.id}", headers=headers).json() == by_user
    assert client.get(f"/api/question-assignments/by-group/{group.id}", headers=headers).json() == by_group


def test_update_priority(client, admin, user, institution, make_question, make_assignment, auth_headers):
    assignment = make_assignment(make_question(institution), user=user)

    response = client.put(f"/api/question-assignments/{assignment.id}", json={"priority": 2},
                          headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["priority"] == 2


def test_delete_removes_responses(client, db, admin, user, institution, make_question, make_assignment,
                                  make_response, auth_headers):
    assignment = make_assignment(make_question(institution), user=user)
    make_response(assignment, user, "good")
    headers = auth_headers(admin)
    assert client.get(f"/api/question-assignments/{assignment.id}", headers=headers).json()["response_count"] == 1

    response = client.delete(f"/api/question-assignments/{assignment.id}", headers=headers)

    assert response.status_code == 204
    assert client.get(f"/api/question-assignments/{assignment.id}", headers=headers).status_code == 404
    assert db.query(QuestionResponse).count() == 0


def test_other_institution_assignment(client, admin, other_user, other_institution, make_question,
                                      make_assignment, auth_headers):
    assignment = make_assignment(make_question(other_institution), user=other_user)
    headers = auth_headers(admin)

    assert client.get(f"/api/question-assignments/{assignment.id}", headers=headers).status_code == 403
    assert client.delete(f"/api/question-assignments/{assignment.id}", headers=headers).status_code == 403
    assert client.get(f"/api/question-assignments/user/{other_user.id}", headers=headers).status_code == 403
    assert client.get("/api/question-assignments", headers=headers).json() == []
