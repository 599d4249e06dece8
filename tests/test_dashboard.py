"""Dashboard tests."""
from datetime import timedelta

from app.core.clock import today, utcnow
from app.models import AdminStatus, QuestionType


def test_stats(client, db, admin, user, other_user, make_user, make_admin, institution, other_institution,
               make_question, make_assignment, make_response, auth_headers):
    retired = make_user(institution, "retired")
    retired.is_active = False
    db.commit()
    make_admin(institution, email="wait@example.com", status=AdminStatus.PENDING)
    make_admin(other_institution, email="elsewhere@example.com", status=AdminStatus.PENDING)
    mood = make_assignment(make_question(institution, "Mood"), user=user)
    make_assignment(make_question(institution, "Sleep", QuestionType.YES_NO), user=user)
    make_response(mood, user, "good")
    make_response(mood, user, "okay")
    make_response(mood, user, "bad", submitted_at=utcnow() - timedelta(days=1))
    foreign = make_assignment(make_question(other_institution), user=other_user)
    make_response(foreign, other_user, "good")
    client.post("/api/user/uploads", data={"content": "Need help"}, headers=auth_headers(user))

    stats = client.get("/api/dashboard/stats", headers=auth_headers(admin)).json()

    assert stats["total_users"] == 2
    assert stats["active_users"] == 1
    assert stats["total_users_change"] == {"value": 2, "period": "this week"}
    assert stats["today_responses"] == {"total": 2, "assigned": 2, "rate": 100, "change": 1}
    assert stats["pending_uploads"]["count"] == 1
    assert stats["pending_admin_approvals"] == 1


def test_response_trends(client, admin, user, make_user, institution, make_category, make_question,
                         make_assignment, make_response, auth_headers):
    make_user(institution, "user2")
    category = make_category(institution)
    mood = make_assignment(make_question(institution, "Mood", category_id=category.id), user=user)
    note = make_assignment(make_question(institution, "Note", QuestionType.TEXT), user=user)
    make_response(mood, user, "good")
    make_response(note, user, "fine")
    make_response(mood, user, "bad", submitted_at=utcnow() - timedelta(days=3))

    trends = client.get("/api/dashboard/response-trends", headers=auth_headers(admin)).json()

    assert trends["period"] == "7d"
    assert len(trends["data"]) == 7
    last_day = trends["data"][-1]
    assert last_day["day"] == today().isoformat()
    assert last_day["total_responses"] == 2
    assert last_day["responding_users"] == 1
    assert last_day["response_rate"] == 50.0
    assert last_day["by_category"] == {"Daily Health": 1, "Uncategorized": 1}
    assert trends["data"][-4]["total_responses"] == 1
    assert trends["summary"]["total_responses"] == 3
    assert trends["summary"]["trend"] == "up"


def test_response_trends_period(client, admin, auth_headers):
    headers = auth_headers(admin)

    month = client.get("/api/dashboard/response-trends", params={"period": "30d"}, headers=headers).json()
    invalid = client.get("/api/dashboard/response-trends", params={"period": "1y"}, headers=headers)

    assert len(month["data"]) == 30
    assert month["summary"] == {"avg_response_rate": 0.0, "total_responses": 0, "trend": "stable"}
    assert invalid.status_code == 400


def test_user_groups(client, admin, user, make_user, institution, make_group, make_question, make_assignment,
                     make_response, auth_headers):
    make_user(institution, "loner")
    group = make_group(institution, members=[user])
    assignment = make_assignment(make_question(institution), group=group)
    make_assignment(make_question(institution, "Sleep", QuestionType.YES_NO), group=group)
    make_response(assignment, user, "good")

    overview = client.get("/api/dashboard/user-groups", headers=auth_headers(admin)).json()

    assert overview["total_members"] == 2
    assert overview["ungrouped_members"] == 1
    info = overview["groups"][0]
    assert info["group_name"] == group.name
    assert info["member_count"] == 1
    assert info["assigned_questions"] == 2
    assert info["completed_responses"] == 1
    assert info["response_rate"] == 50.0
    assert info["color"].startswith("#")


def test_recent_activities(client, admin, user, institution, make_question, make_assignment, make_response,
                           auth_headers):
    assignment = make_assignment(make_question(institution), user=user)
    response = make_response(assignment, user, "good")
    upload_id = client.post("/api/user/uploads", data={"title": "Question", "content": "When is lunch?"},
                            headers=auth_headers(user)).json()["id"]
    headers = auth_headers(admin)

    everything = client.get("/api/dashboard/recent-activities", headers=headers).json()
    uploads = client.get("/api/dashboard/recent-activities", params={"type": "uploads"}, headers=headers).json()
    responses = client.get("/api/dashboard/recent-activities", params={"type": "responses"},
                           headers=headers).json()

    assert everything["total"] == 2
    assert everything["limit"] == 10
    assert {a["id"] for a in everything["activities"]} == {f"resp_{response.id}", f"upload_{upload_id}"}
    [upload] = uploads["activities"]
    assert upload["upload_title"] == "Question"
    assert upload["status"] == "pending"
    assert upload["priority"] == "high"
    assert upload["user"]["username"] == user.username
    [answer] = responses["activities"]
    assert answer["type"] == "response"
    assert answer["status"] == "completed"
    assert answer["question_title"] == assignment.question.title


def test_answered_upload_is_completed(client, admin, user, auth_headers):
    upload_id = client.post("/api/user/uploads", data={"content": "Hello"}, headers=auth_headers(user)).json()["id"]
    headers = auth_headers(admin)
    client.put(f"/api/admin/uploads/{upload_id}/response", json={"response": "Hi"}, headers=headers)

    activity = client.get("/api/dashboard/recent-activities", params={"type": "uploads"},
                          headers=headers).json()["activities"][0]

    assert activity["status"] == "completed"
    assert activity["priority"] == "normal"


def test_unknown_activity_type(client, admin, auth_headers):
    response = client.get("/api/dashboard/recent-activities", params={"type": "logins"}, headers=auth_headers(admin))

    assert response.status_code == 400


def test_users_cannot_read_dashboard(client, user, auth_headers):
    assert client.get("/api/dashboard/stats", headers=auth_headers(user)).status_code == 403
