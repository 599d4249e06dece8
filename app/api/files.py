"""Stored file download router."""
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.api.dependencies import Storage
from app.core.database import get_db
from app.services.upload_service import UploadService

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/{file_id}")
def download_file(file_id: int, db: Annotated[Session, Depends(get_db)], storage: Storage):
    """Serve an uploaded file inline."""
    upload_file, path, media_type = UploadService(db, storage).open_file(file_id)
    return FileResponse(
        path=str(path),
        media_type=media_type,
        filename=upload_file.original_name or upload_file.file_name,
        content_disposition_type="inline",
    )
