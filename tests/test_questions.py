"""Category and question tests."""
import pytest

from app.core.exceptions import InvalidResponseData, ValidationFailed
from app.models.question import Question, QuestionType
from app.services.question_rules import choice_values, validate_answer, validate_options


def _question(question_type, options=None, is_required=True, allow_other_option=False):
    return Question(
        title="Q",
        content="Q?",
        question_type=question_type,
        options=options,
        is_required=is_required,
        allow_other_option=allow_other_option,
    )


def test_choice_values_accept_labelled_choices():
    options = {"choices": ["a", {"value": "b", "label": "Bee"}]}

    assert choice_values(options) == ["a", "b"]
    assert choice_values(None) == []


@pytest.mark.parametrize("question_type, options", [
    (QuestionType.SINGLE_CHOICE, None),
    (QuestionType.SINGLE_CHOICE, {"choices": []}),
    (QuestionType.MULTIPLE_CHOICE, {"choices": "a,b"}),
    (QuestionType.SCALE, {"min": 5, "max": 1}),
    (QuestionType.SCALE, {"min": 1}),
])
def test_invalid_options(question_type, options):
    with pytest.raises(ValidationFailed):
        validate_options(question_type, options)


@pytest.mark.parametrize("question_type, options", [
    (QuestionType.SINGLE_CHOICE, {"choices": ["yes"]}),
    (QuestionType.SCALE, None),
    (QuestionType.SCALE, {"min": 1, "max": 10}),
    (QuestionType.TEXT, None),
    (QuestionType.YES_NO, {"anything": True}),
])
def test_valid_options(question_type, options):
    validate_options(question_type, options)


@pytest.mark.parametrize("question, answer, other", [
    (_question(QuestionType.SINGLE_CHOICE, {"choices": ["good", "bad"]}), "good", None),
    (_question(QuestionType.SINGLE_CHOICE, {"choices": ["good"]}, allow_other_option=True), "meh", "meh"),
    (_question(QuestionType.MULTIPLE_CHOICE, {"choices": ["a", "b", "c"]}), ["a", "c"], None),
    (_question(QuestionType.YES_NO), False, None),
    (_question(QuestionType.SCALE, {"min": 1, "max": 5}), 5, None),
    (_question(QuestionType.SCALE), 3.5, None),
    (_question(QuestionType.DATE), "2024-03-01", None),
    (_question(QuestionType.TIME), "08:30", None),
    (_question(QuestionType.TEXT), "Slept well", None),
    (_question(QuestionType.TEXT, is_required=False), None, None),
])
def test_valid_answers(question, answer, other):
    validate_answer(question, {"answer": answer}, other)


@pytest.mark.parametrize("question, answer, other", [
    (_question(QuestionType.SINGLE_CHOICE, {"choices": ["good"]}), "meh", None),
    (_question(QuestionType.SINGLE_CHOICE, {"choices": ["good"]}), "meh", "meh"),
    (_question(QuestionType.MULTIPLE_CHOICE, {"choices": ["a"]}), "a", None),
    (_question(QuestionType.YES_NO), "yes", None),
    (_question(QuestionType.SCALE, {"min": 1, "max": 5}), 6, None),
    (_question(QuestionType.SCALE), True, None),
    (_question(QuestionType.DATE), "01/03/2024", None),
    (_question(QuestionType.TIME), 830, None),
    (_question(QuestionType.TEXT), 42, None),
    (_question(QuestionType.TEXT), None, None),
])
def test_invalid_answers(question, answer, other):
    with pytest.raises(InvalidResponseData):
        validate_answer(question, {"answer": answer}, other)


def test_required_answer_may_come_from_other_response():
    question = _question(QuestionType.SINGLE_CHOICE, {"choices": ["good"]}, allow_other_option=True)

    validate_answer(question, {}, "Something else")


def test_category_crud(client, admin, institution, auth_headers):
    headers = auth_headers(admin)

    created = client.post("/api/categories", json={"name": "Daily Health", "description": "Vitals"},
                          headers=headers)
    assert created.status_code == 201
    category = created.json()
    assert category["institution_name"] == institution.name
    assert category["created_by_name"] == admin.name
    assert category["question_count"] == 0

    duplicate = client.post("/api/categories", json={"name": "Daily Health"}, headers=headers)
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "CATEGORY_ALREADY_EXISTS"

    updated = client.put(f"/api/categories/{category['id']}", json={"name": "Health"}, headers=headers)
    assert updated.json()["name"] == "Health"
    assert updated.json()["description"] == "Vitals"

    assert client.delete(f"/api/categories/{category['id']}", headers=headers).status_code == 204
    assert client.get("/api/categories/active", headers=headers).json() == []
    assert client.get("/api/categories", headers=headers).json()[0]["is_active"] is False


def test_unknown_category(client, admin, auth_headers):
    response = client.get("/api/categories/999", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["code"] == "CATEGORY_NOT_FOUND"


def test_create_question_in_category(client, admin, institution, make_category, auth_headers):
    category = make_category(institution)
    headers = auth_headers(admin)

    response = client.post("/api/questions", json={
        "title": "Mood",
        "content": "How do you feel today?",
        "question_type": "SINGLE_CHOICE",
        "category_id": category.id,
        "options": {"choices": [{"value": "good", "label": "Good"}, {"value": "bad", "label": "Bad"}]},
        "allow_other_option": True,
    }, headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["category_name"] == category.name
    assert body["created_by_name"] == admin.name
    assert body["other_option_label"] == "Other"
    assert body["is_active"] is True
    assert client.get(f"/api/categories/{category.id}", headers=headers).json()["question_count"] == 1


def test_create_question_with_bad_options(client, admin, auth_headers):
    response = client.post("/api/questions", json={
        "title": "Mood", "content": "How?", "question_type": "MULTIPLE_CHOICE", "options": {"choices": []},
    }, headers=auth_headers(admin))

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PARAMETER"


def test_create_question_in_foreign_category(client, admin, other_institution, make_category, auth_headers):
    foreign = make_category(other_institution)

    response = client.post("/api/questions", json={
        "title": "Sleep", "content": "Slept well?", "question_type": "YES_NO", "category_id": foreign.id,
    }, headers=auth_headers(admin))

    assert response.status_code == 403


def test_question_filters(client, admin, institution, make_category, make_question, auth_headers):
    category = make_category(institution)
    mood = make_question(institution, "Mood", category_id=category.id)
    sleep = make_question(institution, "Sleep", QuestionType.YES_NO)
    retired = make_question(institution, "Old", QuestionType.TEXT, is_active=False)
    headers = auth_headers(admin)

    def ids(path, **params):
        return {item["id"] for item in client.get(path, params=params, headers=headers).json()}

    assert ids("/api/questions") == {mood.id, sleep.id, retired.id}
    assert ids("/api/questions", category_id=category.id) == {mood.id}
    assert ids("/api/questions", uncategorized=True) == {sleep.id, retired.id}
    assert ids("/api/questions", is_active=False) == {retired.id}
    assert ids("/api/questions/active") == {mood.id, sleep.id}
    assert ids("/api/questions/type/YES_NO") == {sleep.id}
    assert ids("/api/questions/by-type/YES_NO") == {sleep.id}

    stats = client.get("/api/questions/statistics", headers=headers).json()
    assert stats == {"total_questions": 3, "active_questions": 2, "inactive_questions": 1}


def test_update_question_revalidates_options(client, admin, institution, make_question, auth_headers):
    question = make_question(institution)
    headers = auth_headers(admin)

    bad = client.put(f"/api/questions/{question.id}", json={"options": {"choices": []}}, headers=headers)
    retyped = client.put(f"/api/questions/{question.id}",
                         json={"question_type": "SCALE", "options": {"min": 1, "max": 5}}, headers=headers)

    assert bad.status_code == 400
    assert retyped.status_code == 200
    assert retyped.json()["question_type"] == "SCALE"
    assert retyped.json()["title"] == question.title


def test_delete_question_is_soft(client, admin, institution, make_question, make_assignment, user, auth_headers):
    question = make_question(institution)
    make_assignment(question, user=user)
    headers = auth_headers(admin)

    assert client.delete(f"/api/questions/{question.id}", headers=headers).status_code == 204

    body = client.get(f"/api/questions/{question.id}", headers=headers).json()
    assert body["is_active"] is False
    assert body["assignment_count"] == 1


def test_other_institution_question(client, admin, other_institution, make_question, auth_headers):
    question = make_question(other_institution)

    response = client.get(f"/api/questions/{question.id}", headers=auth_headers(admin))

    assert response.status_code == 403
    assert response.json()["code"] == "INSTITUTION_ACCESS_DENIED"


def test_users_cannot_manage_questions(client, user, auth_headers):
    response = client.get("/api/questions", headers=auth_headers(user))

    assert response.status_code == 403
