"""Reporting day tests."""
from datetime import date, datetime, timedelta, timezone

import pytest

from app.core import clock
from app.models import QuestionResponse
from app.services.response_service import latest_per_day

KST = timezone(timedelta(hours=9))


@pytest.fixture
def seoul(monkeypatch):
    monkeypatch.setattr(clock, "report_zone", lambda: KST)


def test_utcnow_is_aware():
    assert clock.utcnow().tzinfo == timezone.utc


def test_local_date_follows_report_zone(seoul):
    evening_utc = datetime(2024, 3, 1, 16, 0, tzinfo=timezone.utc)

    assert clock.local_date(evening_utc) == date(2024, 3, 2)
    # SQLite hands back naive values; they are UTC
    assert clock.local_date(evening_utc.replace(tzinfo=None)) == date(2024, 3, 2)
    assert clock.local_date(datetime(2024, 3, 2, 1, 0, tzinfo=KST)) == date(2024, 3, 2)


def test_day_bounds_are_utc(seoul):
    start, end = clock.day_bounds(date(2024, 3, 2))

    assert start == datetime(2024, 3, 1, 15, 0, tzinfo=timezone.utc)
    assert end == datetime(2024, 3, 2, 15, 0, tzinfo=timezone.utc)
    assert start.tzinfo == timezone.utc


def test_same_utc_date_can_be_two_report_days(seoul):
    rows = [
        QuestionResponse(id=1, assignment_id=1, user_id=1, question_id=1, institution_id=1,
                         response_data={"answer": "bad"}, submitted_at=datetime(2024, 3, 1, 14, 0)),
        QuestionResponse(id=2, assignment_id=1, user_id=1, question_id=1, institution_id=1,
                         response_data={"answer": "good"}, submitted_at=datetime(2024, 3, 1, 16, 0)),
    ]

    items = latest_per_day(rows)

    assert [item.id for item in items] == [2, 1]
    assert [item.modification_count for item in items] == [1, 1]
