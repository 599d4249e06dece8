"""
Domain exceptions and the boundary handlers that serialize them.

Every error leaving the API has the envelope ``{message, code, timestamp}``.
Validation failures add an ``errors`` list of ``{field, rejectedValue, message}``.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class AppException(HTTPException):
    """Base exception for all business errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    message = "Bad request"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None,
                 headers: Optional[Dict[str, str]] = None):
        self.message = message or self.message
        self.code = code or self.code
        super().__init__(status_code=self.status_code, detail=self.message, headers=headers)


# ---------------------------------------------------------------------------
# Taxonomy
# ---------------------------------------------------------------------------

class ValidationFailed(AppException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_PARAMETER"
    message = "Invalid request parameter"


class AuthenticationFailed(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "Authentication required"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message, code, headers={"WWW-Authenticate": "Bearer"})


class AccessDenied(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    message = "Access denied"


class NotFound(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    code = "ENTITY_NOT_FOUND"
    message = "Entity not found"


class Conflict(AppException):
    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_RESOURCE"
    message = "Resource already exists"


class InternalError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_SERVER_ERROR"
    message = "An unexpected error occurred"


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

class InvalidCredentials(AuthenticationFailed):
    code = "INVALID_CREDENTIALS"
    message = "Invalid credentials"


class InvalidToken(AuthenticationFailed):
    code = "INVALID_TOKEN"
    message = "Invalid token"


class AccountDisabled(AccessDenied):
    code = "ACCOUNT_DISABLED"
    message = "Account is disabled"


class AdminApprovalPending(AccessDenied):
    code = "ADMIN_APPROVAL_PENDING"
    message = "Admin account is waiting for approval"


class AdminApprovalRejected(AccessDenied):
    code = "ADMIN_APPROVAL_REJECTED"
    message = "Admin account registration was rejected"


class AdminSuspended(AccessDenied):
    code = "ADMIN_SUSPENDED"
    message = "Admin account is suspended"


# ---------------------------------------------------------------------------
# Institutions
# ---------------------------------------------------------------------------

class InstitutionNotFound(NotFound):
    code = "INSTITUTION_NOT_FOUND"
    message = "Institution not found"


class InstitutionAlreadyExists(Conflict):
    code = "INSTITUTION_ALREADY_EXISTS"
    message = "Institution already exists"


class InstitutionAccessDenied(AccessDenied):
    code = "INSTITUTION_ACCESS_DENIED"
    message = "Resource belongs to another institution"


class InstitutionHasDependencies(Conflict):
    code = "INSTITUTION_HAS_DEPENDENCIES"
    message = "Institution still has admins or users"


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------

class AdminNotFound(NotFound):
    code = "ADMIN_NOT_FOUND"
    message = "Admin not found"


class AdminAlreadyExists(Conflict):
    code = "ADMIN_ALREADY_EXISTS"
    message = "Admin with this email already exists"


class InvalidStatus(ValidationFailed):
    code = "INVALID_STATUS"
    message = "Status transition not allowed"


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"
    message = "User not found"


class UserAlreadyExists(Conflict):
    code = "USER_ALREADY_EXISTS"
    message = "Username already exists in this institution"


class UserGroupNotFound(NotFound):
    code = "USER_GROUP_NOT_FOUND"
    message = "User group not found"


class UserGroupAlreadyExists(Conflict):
    code = "USER_GROUP_ALREADY_EXISTS"
    message = "User group with this name already exists"


# ---------------------------------------------------------------------------
# Questions, assignments and responses
# ---------------------------------------------------------------------------

class CategoryNotFound(NotFound):
    code = "CATEGORY_NOT_FOUND"
    message = "Category not found"


class CategoryAlreadyExists(Conflict):
    code = "CATEGORY_ALREADY_EXISTS"
    message = "Category with this name already exists"


class QuestionNotFound(NotFound):
    code = "QUESTION_NOT_FOUND"
    message = "Question not found"


class QuestionAssignmentNotFound(NotFound):
    code = "QUESTION_ASSIGNMENT_NOT_FOUND"
    message = "Question assignment not found"


class QuestionAlreadyAssigned(Conflict):
    code = "QUESTION_ALREADY_ASSIGNED"
    message = "Question is already assigned to this target"


class InvalidAssignmentTarget(ValidationFailed):
    code = "INVALID_ASSIGNMENT_TARGET"
    message = "Exactly one of user_id or group_id must be provided"


class NotAssignmentTarget(AccessDenied):
    code = "NOT_ASSIGNMENT_TARGET"
    message = "You are not a target of this assignment"


class InvalidResponseData(ValidationFailed):
    code = "INVALID_RESPONSE_DATA"
    message = "Invalid response data"


class ResponseNotFound(NotFound):
    code = "RESPONSE_NOT_FOUND"
    message = "No responses found"


# ---------------------------------------------------------------------------
# Uploads and files
# ---------------------------------------------------------------------------

class UploadNotFound(NotFound):
    code = "UPLOAD_NOT_FOUND"
    message = "Upload not found"


class FileNotFound(NotFound):
    code = "FILE_NOT_FOUND"
    message = "File not found"


class InvalidFileType(ValidationFailed):
    code = "INVALID_FILE_TYPE"
    message = "Invalid file type"


class FileSizeExceeded(ValidationFailed):
    code = "FILE_SIZE_EXCEEDED"
    message = "File size exceeded"


class FileStorageError(InternalError):
    code = "FILE_STORAGE_ERROR"
    message = "File storage error"


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def error_body(message: str, code: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Build the error envelope."""
    body: Dict[str, Any] = {
        "message": message,
        "code": code,
        "timestamp": datetime.now().isoformat(),
    }
    if errors is not None:
        body["errors"] = errors
    return body


def _field_name(loc) -> str:
    # Drop the "body"/"query"/"path" prefix FastAPI puts in front of the field path
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    else:
        logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.message, exc.code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Framework-raised errors (unknown route, method not allowed)
    code = {
        status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
        status.HTTP_403_FORBIDDEN: "FORBIDDEN",
        status.HTTP_404_NOT_FOUND: "NOT_FOUND",
        status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    }.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": _field_name(error.get("loc", ())),
            "rejectedValue": error.get("input"),
            "message": error.get("msg"),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(error_body("Request validation failed", "VALIDATION_FAILED", errors)),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("Resource already exists", "DUPLICATE_RESOURCE"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("An unexpected error occurred", "INTERNAL_SERVER_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error envelope handlers on the application."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
