"""Response reporting tests."""
from datetime import datetime, timedelta

from app.models import QuestionResponse
from app.services.response_service import latest_per_day, with_group_counts

MORNING = datetime(2024, 3, 1, 9, 0)


def _row(response_id, submitted_at, question_id=1, user_id=1, answer="good"):
    return QuestionResponse(
        id=response_id,
        assignment_id=1,
        user_id=user_id,
        question_id=question_id,
        institution_id=1,
        response_data={"answer": answer},
        submitted_at=submitted_at,
    )


def test_latest_per_day_keeps_newest_of_each_group():
    rows = [
        _row(1, MORNING, answer="bad"),
        _row(3, MORNING + timedelta(hours=5), answer="good"),
        _row(2, MORNING + timedelta(hours=2), answer="okay"),
        _row(4, MORNING + timedelta(days=1)),
        _row(5, MORNING, question_id=2),
        _row(6, MORNING, user_id=2),
    ]

    items = latest_per_day(rows)

    by_id = {item.id: item for item in items}
    assert set(by_id) == {3, 4, 5, 6}
    assert by_id[3].response_data == {"answer": "good"}
    assert by_id[3].modification_count == 3
    assert by_id[3].is_modified is True
    assert by_id[4].is_modified is False
    assert items[0].id == 4


def test_latest_per_day_breaks_timestamp_ties_by_id():
    items = latest_per_day([_row(8, MORNING), _row(7, MORNING)])

    assert [item.id for item in items] == [8]


def test_with_group_counts_keeps_every_row():
    rows = [_row(1, MORNING), _row(2, MORNING + timedelta(hours=1)), _row(3, MORNING + timedelta(days=1))]

    items = with_group_counts(rows)

    assert [item.id for item in items] == [3, 2, 1]
    assert [item.modification_count for item in items] == [1, 2, 2]


def test_same_day_submissions_collapse_in_reports(client, admin, user, institution, make_question,
                                                  make_assignment, auth_headers):
    assignment = make_assignment(make_question(institution), user=user)
    user_headers = auth_headers(user)
    for answer in ("bad", "okay", "good"):
        submitted = client.post(f"/api/user/questions/{assignment.id}/response",
                                json={"response_data": {"answer": answer}}, headers=user_headers)
        assert submitted.status_code == 201
    headers = auth_headers(admin)

    summary = client.get(f"/api/responses/user/{user.id}", headers=headers).json()
    history = client.get(f"/api/responses/question/{assignment.question_id}/user/{user.id}/history",
                         headers=headers).json()

    assert summary["user_name"] == user.name
    assert summary["total_responses"] == 1
    latest = summary["responses"][0]
    assert latest["response_data"] == {"answer": "good"}
    assert latest["modification_count"] == 3
    assert latest["is_modified"] is True
    assert history["total_responses"] == 3
    assert [item["response_data"]["answer"] for item in history["responses"]] == ["good", "okay", "bad"]


def test_history_for_one_day(client, admin, user, institution, make_question, make_assignment, make_response,
                             auth_headers):
    assignment = make_assignment(make_question(institution), user=user)
    make_response(assignment, user, "bad", submitted_at=MORNING)
    make_response(assignment, user, "good", submitted_at=MORNING + timedelta(days=1))

    response = client.get(
        f"/api/responses/question/{assignment.question_id}/user/{user.id}/history",
        params={"date": "2024-03-01"},
        headers=auth_headers(admin),
    )

    body = response.json()
    assert body["on_date"] == "2024-03-01"
    assert [item["response_data"]["answer"] for item in body["responses"]] == ["bad"]


def test_date_range_is_inclusive(client, admin, user, institution, make_question, make_assignment,
                                 make_response, auth_headers):
    assignment = make_assignment(make_question(institution), user=user)
    make_response(assignment, user, "bad", submitted_at=MORNING - timedelta(days=1))
    first = make_response(assignment, user, "okay", submitted_at=MORNING)
    last = make_response(assignment, user, "good", submitted_at=MORNING + timedelta(days=1, hours=14))
    headers = auth_headers(admin)

    response = client.get(f"/api/responses/user/{user.id}/date-range",
                          params={"start_date": "2024-03-01", "end_date": "2024-03-02"}, headers=headers)
    inverted = client.get(f"/api/responses/user/{user.id}/date-range",
                          params={"start_date": "2024-03-02", "end_date": "2024-03-01"}, headers=headers)

    assert [item["id"] for item in response.json()] == [last.id, first.id]
    assert inverted.status_code == 400


def test_assignment_responses(client, admin, user, institution, make_question, make_assignment, make_response,
                              auth_headers):
    assignment = make_assignment(make_question(institution), user=user)
    headers = auth_headers(admin)

    empty = client.get(f"/api/responses/assignment/{assignment.id}", headers=headers)
    assert empty.status_code == 404
    assert empty.json()["code"] == "RESPONSE_NOT_FOUND"

    make_response(assignment, user, "okay", submitted_at=MORNING)
    make_response(assignment, user, "good", submitted_at=MORNING + timedelta(minutes=5))

    body = client.get(f"/api/responses/assignment/{assignment.id}", headers=headers).json()
    assert body["question_title"] == assignment.question.title
    assert body["total_responses"] == 1
    assert body["responses"][0]["modification_count"] == 2


def test_recent_responses_collapse_per_day(client, admin, user, other_user, institution, other_institution,
                                           make_question, make_assignment, make_response, auth_headers):
    mood = make_assignment(make_question(institution, "Mood"), user=user)
    sleep = make_assignment(make_question(institution, "Sleep"), user=user)
    foreign = make_assignment(make_question(other_institution), user=other_user)
    for minutes, answer in enumerate(("bad", "okay", "good")):
        make_response(mood, user, answer, submitted_at=MORNING + timedelta(minutes=minutes))
    make_response(sleep, user, "good", submitted_at=MORNING - timedelta(hours=1))
    make_response(foreign, other_user, "good")
    headers = auth_headers(admin)

    everything = client.get("/api/responses/recent", headers=headers).json()
    limited = client.get("/api/responses/recent", params={"limit": 1}, headers=headers).json()

    assert [item["question_id"] for item in everything] == [mood.question_id, sleep.question_id]
    latest = everything[0]
    assert latest["response_data"] == {"answer": "good"}
    assert latest["is_modified"] is True
    assert latest["modification_count"] == 3
    assert everything[1]["is_modified"] is False
    assert len(limited) == 1


def test_reports_are_tenant_scoped(client, admin, other_user, other_institution, make_question,
                                   make_assignment, auth_headers):
    assignment = make_assignment(make_question(other_institution), user=other_user)
    headers = auth_headers(admin)

    assert client.get(f"/api/responses/user/{other_user.id}", headers=headers).status_code == 403
    assert client.get(f"/api/responses/assignment/{assignment.id}", headers=headers).status_code == 403
    history = client.get(f"/api/responses/question/{assignment.question_id}/user/{other_user.id}/history",
                         headers=headers)
    assert history.status_code == 403
