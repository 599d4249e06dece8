"""User upload service."""
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.exceptions import AccessDenied, FileNotFound, FileStorageError, UploadNotFound, ValidationFailed
from app.models.admin import Admin
from app.models.upload import Upload, UploadFile
from app.models.user import User
from app.repositories.upload_repository import UploadRepository
from app.schemas.upload import AdminUploadReply, UploadFileResponse, UploadListItem, UploadResponse
from app.services.file_storage import FileStorage, IncomingFile, guess_content_type
from app.services.tenant import ensure_same_institution

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 100


def content_preview(content: Optional[str]) -> Optional[str]:
    if content is None or len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH] + "..."


def file_url(upload_file: UploadFile) -> str:
    return f"/api/files/{upload_file.id}"


class UploadService:
    """Uploads posted by users and answered by admins."""

    def __init__(self, db: Session, storage: Optional[FileStorage] = None):
        self.db = db
        self.storage = storage or FileStorage()
        self.upload_repo = UploadRepository(db)

    def create_upload(self, user: User, title: Optional[str], content: Optional[str],
                      files: List[IncomingFile]) -> UploadResponse:
        """
        Store an upload with its files.

        Raises:
            ValidationFailed: If neither content nor files are given
            InvalidFileType, FileSizeExceeded, FileStorageError: If a file is rejected
        """
        content = content.strip() if content else None
        if not content and not files:
            raise ValidationFailed("Either content or at least one file is required")

        # Reject the whole request before anything touches the disk
        for incoming in files:
            self.storage.validate(incoming)

        stored = []
        try:
            for incoming in files:
                stored.append(self.storage.save(incoming))

            upload = Upload(
                institution_id=user.institution_id,
                user_id=user.id,
                title=title.strip() if title and title.strip() else None,
                content=content,
            )
            for order, item in enumerate(stored, start=1):
                upload.files.append(UploadFile(
                    file_type=item.file_type,
                    file_name=item.file_name,
                    original_name=item.original_name,
                    file_path=item.file_path,
                    file_size=item.file_size,
                    mime_type=item.mime_type,
                    upload_order=order,
                ))
            upload = self.upload_repo.create(upload)
        except (SQLAlchemyError, FileStorageError):
            self.db.rollback()
            for item in stored:
                self.storage.delete(item.file_path)
            raise

        logger.info("Upload %s created by user %s with %s files", upload.id, user.id, len(stored))
        return self.to_response(upload)

    def get_my_uploads(self, user: User) -> List[UploadListItem]:
        return [self.to_list_item(upload) for upload in self.upload_repo.get_by_user(user.id)]

    def get_my_upload(self, upload_id: int, user: User) -> UploadResponse:
        """
        Raises:
            UploadNotFound: If upload not found
            AccessDenied: If the upload belongs to another user
        """
        upload = self.upload_repo.get_by_id(upload_id)
        if not upload:
            raise UploadNotFound()
        if upload.user_id != user.id:
            raise AccessDenied("You can only view your own uploads")
        return self.to_response(upload)

    def get_institution_uploads(self, institution_id: int, limit: Optional[int] = None,
                                offset: Optional[int] = None) -> List[UploadListItem]:
        uploads = self.upload_repo.get_by_institution(institution_id, limit=limit, offset=offset)
        return [self.to_list_item(upload) for upload in uploads]

    def get_upload(self, upload_id: int, institution_id: int) -> Upload:
        """
        Raises:
            UploadNotFound: If upload not found
            InstitutionAccessDenied: If upload belongs to another institution
        """
        upload = self.upload_repo.get_by_id(upload_id)
        if not upload:
            raise UploadNotFound()
        ensure_same_institution(upload.institution_id, institution_id, "upload")
        return upload

    def reply(self, upload_id: int, data: AdminUploadReply, admin: Admin) -> UploadResponse:
        """
        Record the admin's answer; a later answer replaces the earlier one.

        Raises:
            UploadNotFound, InstitutionAccessDenied
        """
        upload = self.get_upload(upload_id, admin.institution_id)
        upload.admin_read = True
        upload.admin_response = data.response
        upload.admin_response_date = utcnow()
        upload.admin_id = admin.id
        upload = self.upload_repo.save(upload)
        logger.info("Admin %s answered upload %s", admin.id, upload.id)
        return self.to_response(upload)

    def open_file(self, file_id: int) -> Tuple[UploadFile, Path, str]:
        """
        Locate a stored file for download.

        Raises:
            FileNotFound: If the row or the file on disk is missing
        """
        upload_file = self.upload_repo.get_file(file_id)
        if not upload_file:
            raise FileNotFound()
        path = self.storage.resolve(upload_file.file_path)
        return upload_file, path, guess_content_type(upload_file.file_name, upload_file.mime_type)

    def to_response(self, upload: Upload) -> UploadResponse:
        return UploadResponse(
            id=upload.id,
            title=upload.title,
            content=upload.content,
            user_id=upload.user_id,
            user_name=upload.user.name if upload.user else None,
            institution_id=upload.institution_id,
            institution_name=upload.institution.name if upload.institution else "Unknown institution",
            admin_read=upload.admin_read,
            admin_response=upload.admin_response,
            admin_response_date=upload.admin_response_date,
            admin_id=upload.admin_id,
            admin_name=upload.admin.name if upload.admin else None,
            files=[
                UploadFileResponse(
                    id=f.id,
                    file_type=f.file_type,
                    file_name=f.file_name,
                    original_name=f.original_name,
                    file_size=f.file_size,
                    mime_type=f.mime_type,
                    upload_order=f.upload_order,
                    url=file_url(f),
                    created_at=f.created_at,
                )
                for f in upload.files
            ],
            created_at=upload.created_at,
            updated_at=upload.updated_at,
        )

    def to_list_item(self, upload: Upload) -> UploadListItem:
        return UploadListItem(
            id=upload.id,
            title=upload.title,
            content_preview=content_preview(upload.content),
            user_id=upload.user_id,
            user_name=upload.user.name if upload.user else None,
            institution_id=upload.institution_id,
            admin_read=upload.admin_read,
            admin_response_date=upload.admin_response_date,
            file_count=len(upload.files),
            first_file_type=upload.files[0].file_type if upload.files else None,
            created_at=upload.created_at,
        )
