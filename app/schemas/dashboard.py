"""Dashboard schemas."""
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class ChangeInfo(BaseModel):
    value: int
    period: str


class TodayResponseInfo(BaseModel):
    total: int
    assigned: int
    rate: float
    change: int


class PendingInfo(BaseModel):
    count: int
    change: int


class DashboardStats(BaseModel):
    total_users: int
    active_users: int
    total_users_change: ChangeInfo
    active_users_change: ChangeInfo
    today_responses: TodayResponseInfo
    pending_uploads: PendingInfo
    pending_admin_approvals: int


class DailyResponseData(BaseModel):
    day: date
    total_responses: int
    responding_users: int
    response_rate: float
    by_category: Dict[str, int]


class TrendSummary(BaseModel):
    avg_response_rate: float
    total_responses: int
    trend: str


class ResponseTrends(BaseModel):
    period: str
    data: List[DailyResponseData]
    summary: TrendSummary


class GroupInfo(BaseModel):
    group_id: int
    group_name: str
    member_count: int
    assigned_questions: int
    completed_responses: int
    response_rate: float
    color: str


class UserGroupsOverview(BaseModel):
    groups: List[GroupInfo]
    total_members: int
    ungrouped_members: int


class ActivityUser(BaseModel):
    id: Optional[int] = None
    name: str
    username: str


class Activity(BaseModel):
    id: str
    type: str
    user: ActivityUser
    question_id: Optional[int] = None
    question_title: Optional[str] = None
    upload_id: Optional[int] = None
    upload_title: Optional[str] = None
    timestamp: datetime
    status: str
    priority: str


class RecentActivities(BaseModel):
    activities: List[Activity]
    total: int
    limit: int
