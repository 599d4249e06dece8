"""Upload data access."""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.models.upload import Upload, UploadFile


class UploadRepository:
    """Upload and upload file queries."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Upload).options(
            selectinload(Upload.files),
            selectinload(Upload.user),
            selectinload(Upload.admin),
            selectinload(Upload.institution),
        )

    def get_by_id(self, upload_id: int) -> Optional[Upload]:
        return self._query().filter(Upload.id == upload_id).first()

    def get_by_user(self, user_id: int) -> List[Upload]:
        return (
            self._query()
            .filter(Upload.user_id == user_id)
            .order_by(Upload.created_at.desc(), Upload.id.desc())
            .all()
        )

    def get_by_institution(self, institution_id: int, limit: Optional[int] = None,
                           offset: Optional[int] = None) -> List[Upload]:
        query = (
            self._query()
            .filter(Upload.institution_id == institution_id)
            .order_by(Upload.created_at.desc(), Upload.id.desc())
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def count_unanswered(self, institution_id: int, created_before: Optional[datetime] = None) -> int:
        query = self.db.query(func.count(Upload.id)).filter(
            Upload.institution_id == institution_id,
            Upload.admin_response_date.is_(None),
        )
        if created_before is not None:
            query = query.filter(Upload.created_at < created_before)
        return query.scalar() or 0

    def get_file(self, file_id: int) -> Optional[UploadFile]:
        return self.db.query(UploadFile).filter(UploadFile.id == file_id).first()

    def create(self, upload: Upload) -> Upload:
        self.db.add(upload)
        self.db.commit()
        return self.get_by_id(upload.id)

    def save(self, upload: Upload) -> Upload:
        self.db.commit()
        return self.get_by_id(upload.id)
