"""Service layer for business logic."""
from app.services.auth_service import AuthService
from app.services.system_service import SystemService
from app.services.institution_service import InstitutionService
from app.services.admin_service import AdminService
from app.services.user_service import UserService
from app.services.group_service import GroupService
from app.services.category_service import CategoryService
from app.services.question_service import QuestionService
from app.services.assignment_service import AssignmentService
from app.services.user_question_service import UserQuestionService
from app.services.response_service import ResponseService
from app.services.upload_service import UploadService
from app.services.dashboard_service import DashboardService

__all__ = [
    "AuthService",
    "SystemService",
    "InstitutionService",
    "AdminService",
    "UserService",
    "GroupService",
    "CategoryService",
    "QuestionService",
    "AssignmentService",
    "UserQuestionService",
    "ResponseService",
    "UploadService",
    "DashboardService",
]
