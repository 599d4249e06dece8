"""Dashboard figures for admins of one institution."""
import logging
from datetime import timedelta
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.clock import day_bounds, local_date, today, utcnow
from app.core.exceptions import ValidationFailed
from app.models.admin import AdminStatus
from app.repositories.admin_repository import AdminRepository
from app.repositories.assignment_repository import AssignmentRepository
from app.repositories.group_repository import GroupRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.upload_repository import UploadRepository
from app.repositories.user_repository import UserRepository
from app.schemas.dashboard import (
    Activity,
    ActivityUser,
    ChangeInfo,
    DailyResponseData,
    DashboardStats,
    GroupInfo,
    PendingInfo,
    RecentActivities,
    ResponseTrends,
    TodayResponseInfo,
    TrendSummary,
    UserGroupsOverview,
)

logger = logging.getLogger(__name__)

PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90}
ACTIVITY_TYPES = ("all", "responses", "uploads")
GROUP_COLORS = ["#FF6B6B", "#4ECDC4", "#95E1D3", "#FFD93D", "#6BCB77", "#4D96FF", "#FF8DCE"]
UNCATEGORIZED = "Uncategorized"


def percentage(part: int, whole: int) -> float:
    return round(part * 100 / whole, 1) if whole else 0.0


class DashboardService:
    """Read-only aggregates; every figure is scoped to one institution."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.admin_repo = AdminRepository(db)
        self.group_repo = GroupRepository(db)
        self.assignment_repo = AssignmentRepository(db)
        self.response_repo = ResponseRepository(db)
        self.upload_repo = UploadRepository(db)

    def get_stats(self, institution_id: int) -> DashboardStats:
        week_ago = utcnow() - timedelta(weeks=1)
        today_start, today_end = day_bounds(today())
        yesterday_start = today_start - timedelta(days=1)

        total_users = self.user_repo.count_by_institution(institution_id)
        active_users = self.user_repo.count_by_institution(institution_id, is_active=True)
        users_last_week = self.user_repo.count_by_institution(institution_id, created_before=week_ago)

        today_responses = self.response_repo.count_by_institution_between(institution_id, today_start, today_end)
        yesterday_responses = self.response_repo.count_by_institution_between(
            institution_id, yesterday_start, today_start
        )
        assigned = self.assignment_repo.count_by_institution(institution_id)

        pending_uploads = self.upload_repo.count_unanswered(institution_id)
        pending_yesterday = self.upload_repo.count_unanswered(institution_id, created_before=yesterday_start)

        return DashboardStats(
            total_users=total_users,
            active_users=active_users,
            total_users_change=ChangeInfo(value=total_users - users_last_week, period="this week"),
            active_users_change=ChangeInfo(
                value=self.user_repo.count_logged_in_since(institution_id, week_ago),
                period="this week",
            ),
            today_responses=TodayResponseInfo(
                total=today_responses,
                assigned=assigned,
                rate=round(percentage(today_responses, assigned)),
                change=today_responses - yesterday_responses,
            ),
            pending_uploads=PendingInfo(count=pending_uploads, change=pending_uploads - pending_yesterday),
            pending_admin_approvals=self.admin_repo.count_by_institution_and_status(
                institution_id, AdminStatus.PENDING
            ),
        )

    def get_response_trends(self, institution_id: int, period: str = "7d") -> ResponseTrends:
        """
        Daily response figures over the period, oldest day first.

        Raises:
            ValidationFailed: If the period is not one of 7d, 30d, 90d
        """
        days = PERIOD_DAYS.get(period)
        if days is None:
            raise ValidationFailed(f"period must be one of {', '.join(PERIOD_DAYS)}")

        last_day = today()
        first_day = last_day - timedelta(days=days - 1)
        start, _ = day_bounds(first_day)
        _, end = day_bounds(last_day)
        active_users = self.user_repo.count_by_institution(institution_id, is_active=True)

        by_day: Dict = {first_day + timedelta(days=i): [] for i in range(days)}
        for response in self.response_repo.get_by_institution_between(institution_id, start, end):
            by_day.setdefault(local_date(response.submitted_at), []).append(response)

        data = []
        for day, responses in sorted(by_day.items()):
            by_category: Dict[str, int] = {}
            for response in responses:
                category = response.question.category if response.question else None
                name = category.name if category else UNCATEGORIZED
                by_category[name] = by_category.get(name, 0) + 1
            responding = len({response.user_id for response in responses})
            data.append(DailyResponseData(
                day=day,
                total_responses=len(responses),
                responding_users=responding,
                response_rate=percentage(responding, active_users),
                by_category=by_category,
            ))

        trend = "stable"
        if len(data) >= 2:
            if data[-1].response_rate > data[0].response_rate:
                trend = "up"
            elif data[-1].response_rate < data[0].response_rate:
                trend = "down"

        return ResponseTrends(
            period=period,
            data=data,
            summary=TrendSummary(
                avg_response_rate=round(sum(d.response_rate for d in data) / len(data), 1),
                total_responses=sum(d.total_responses for d in data),
                trend=trend,
            ),
        )

    def get_user_groups(self, institution_id: int) -> UserGroupsOverview:
        groups = self.group_repo.get_by_institution(institution_id, is_active=True)
        infos = []
        for index, group in enumerate(groups):
            assignments = self.assignment_repo.get_by_group(group.id)
            completed = self.response_repo.count_by_assignments([a.id for a in assignments])
            infos.append(GroupInfo(
                group_id=group.id,
                group_name=group.name,
                member_count=self.group_repo.count_active_members(group.id),
                assigned_questions=len(assignments),
                completed_responses=completed,
                response_rate=percentage(completed, len(assignments)),
                color=GROUP_COLORS[index % len(GROUP_COLORS)],
            ))

        users = self.user_repo.get_by_institution(institution_id, is_active=True)
        memberships = self.user_repo.active_group_ids([user.id for user in users])
        return UserGroupsOverview(
            groups=infos,
            total_members=len(users),
            ungrouped_members=sum(1 for user in users if not memberships.get(user.id)),
        )

    def get_recent_activities(self, institution_id: int, limit: int = 10,
                              activity_type: Optional[str] = "all") -> RecentActivities:
        """
        Latest responses and uploads merged, newest first.

        Raises:
            ValidationFailed: If activity_type is unknown
        """
        activity_type = activity_type or "all"
        if activity_type not in ACTIVITY_TYPES:
            raise ValidationFailed(f"type must be one of {', '.join(ACTIVITY_TYPES)}")

        activities: List[Activity] = []
        if activity_type in ("all", "responses"):
            for response in self.response_repo.get_recent(institution_id, limit):
                activities.append(Activity(
                    id=f"resp_{response.id}",
                    type="response",
                    user=self._activity_user(response.user),
                    question_id=response.question_id,
                    question_title=response.question.title if response.question else None,
                    timestamp=response.submitted_at,
                    status="completed" if response.response_data else "incomplete",
                    priority="normal",
                ))

        if activity_type in ("all", "uploads"):
            for upload in self.upload_repo.get_by_institution(institution_id, limit=limit):
                answered = upload.admin_response_date is not None
                activities.append(Activity(
                    id=f"upload_{upload.id}",
                    type="upload",
                    user=self._activity_user(upload.user),
                    upload_id=upload.id,
                    upload_title=upload.title or (upload.files[0].original_name if upload.files else None),
                    timestamp=upload.created_at,
                    status="completed" if answered else "pending",
                    priority="normal" if answered else "high",
                ))

        activities.sort(key=lambda activity: activity.timestamp, reverse=True)
        return RecentActivities(activities=activities[:limit], total=len(activities), limit=limit)

    @staticmethod
    def _activity_user(user) -> ActivityUser:
        if user is None:
            return ActivityUser(id=None, name="Unknown", username="")
        return ActivityUser(id=user.id, name=user.name, username=user.username)
