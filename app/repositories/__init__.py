"""Repository layer for data access."""
from app.repositories.institution_repository import InstitutionRepository
from app.repositories.admin_repository import AdminRepository, SystemAdminRepository
from app.repositories.user_repository import UserRepository
from app.repositories.group_repository import GroupRepository
from app.repositories.question_repository import CategoryRepository, QuestionRepository
from app.repositories.assignment_repository import AssignmentRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.upload_repository import UploadRepository

__all__ = [
    "InstitutionRepository",
    "AdminRepository",
    "SystemAdminRepository",
    "UserRepository",
    "GroupRepository",
    "CategoryRepository",
    "QuestionRepository",
    "AssignmentRepository",
    "ResponseRepository",
    "UploadRepository",
]
