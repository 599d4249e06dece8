"""Dashboard router (Admin/Staff)."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.dependencies import AdminPrincipal
from app.core.database import get_db
from app.schemas.dashboard import DashboardStats, RecentActivities, ResponseTrends, UserGroupsOverview
from app.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return DashboardService(db).get_stats(current_admin.institution_id)


@router.get("/response-trends", response_model=ResponseTrends)
def get_response_trends(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    period: str = Query("7d", pattern="^(7d|30d|90d)$"),
):
    return DashboardService(db).get_response_trends(current_admin.institution_id, period)


@router.get("/user-groups", response_model=UserGroupsOverview)
def get_user_groups(db: Annotated[Session, Depends(get_db)], current_admin: AdminPrincipal):
    return DashboardService(db).get_user_groups(current_admin.institution_id)


@router.get("/recent-activities", response_model=RecentActivities)
def get_recent_activities(
    db: Annotated[Session, Depends(get_db)],
    current_admin: AdminPrincipal,
    limit: int = Query(10, ge=1, le=100),
    type: str = Query("all", pattern="^(all|responses|uploads)$"),
):
    return DashboardService(db).get_recent_activities(current_admin.institution_id, limit, type)
