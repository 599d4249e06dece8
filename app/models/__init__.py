"""Database models."""
from app.models.institution import Institution, InstitutionState, InstitutionAction
from app.models.system_admin import SystemAdmin
from app.models.admin import Admin, AdminRole, AdminStatus, AdminAction
from app.models.user import User, SeverityLevel
from app.models.group import UserGroup, UserGroupMember
from app.models.category import Category
from app.models.question import Question, QuestionType
from app.models.assignment import QuestionAssignment
from app.models.response import QuestionResponse
from app.models.upload import Upload, UploadFile, FileType

__all__ = [
    "Institution",
    "InstitutionState",
    "InstitutionAction",
    "SystemAdmin",
    "Admin",
    "AdminRole",
    "AdminStatus",
    "AdminAction",
    "User",
    "SeverityLevel",
    "UserGroup",
    "UserGroupMember",
    "Category",
    "Question",
    "QuestionType",
    "QuestionAssignment",
    "QuestionResponse",
    "Upload",
    "UploadFile",
    "FileType",
]
