"""Local disk storage for uploaded files."""
import logging
import mimetypes
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from app.core.config import settings
from app.core.exceptions import FileNotFound, FileSizeExceeded, FileStorageError, InvalidFileType
from app.models.upload import FileType

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS: Dict[FileType, frozenset] = {
    FileType.IMAGE: frozenset({"jpg", "jpeg", "png", "gif", "webp"}),
    FileType.AUDIO: frozenset({"mp3", "wav", "m4a", "aac"}),
    FileType.VIDEO: frozenset({"mp4", "avi", "mov", "mkv"}),
    FileType.DOCUMENT: frozenset({"pdf", "doc", "docx", "xls", "xlsx"}),
    FileType.TEXT: frozenset({"txt", "md"}),
}


@dataclass
class IncomingFile:
    """A file received in a multipart request."""
    filename: str
    content_type: Optional[str]
    data: bytes


@dataclass
class StoredFile:
    file_type: FileType
    file_name: str
    original_name: str
    file_path: str
    file_size: int
    mime_type: Optional[str]


def extension_of(filename: str) -> str:
    return Path(filename or "").suffix.lstrip(".").lower()


def detect_file_type(filename: str) -> FileType:
    """
    Raises:
        InvalidFileType: If the extension is not accepted
    """
    extension = extension_of(filename)
    for file_type, extensions in ALLOWED_EXTENSIONS.items():
        if extension in extensions:
            return file_type
    raise InvalidFileType(f"File type '.{extension}' is not supported" if extension else "File has no extension")


def guess_content_type(filename: str, stored: Optional[str] = None) -> str:
    if stored:
        return stored
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


class FileStorage:
    """Writes files under one directory with generated, collision-free names."""

    def __init__(self, upload_dir: Optional[str] = None, max_size: Optional[int] = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.max_size = max_size if max_size is not None else settings.MAX_UPLOAD_SIZE_BYTES

    def validate(self, incoming: IncomingFile) -> FileType:
        """
        Raises:
            InvalidFileType: If the extension is not accepted
            FileSizeExceeded: If the file is empty or larger than the limit
        """
        file_type = detect_file_type(incoming.filename)
        if not incoming.data:
            raise FileSizeExceeded(f"File '{incoming.filename}' is empty")
        if len(incoming.data) > self.max_size:
            raise FileSizeExceeded(f"File '{incoming.filename}' exceeds {self.max_size} bytes")
        return file_type

    def save(self, incoming: IncomingFile) -> StoredFile:
        """
        Validate and write a file.

        Raises:
            InvalidFileType, FileSizeExceeded
            FileStorageError: If the file cannot be written
        """
        file_type = self.validate(incoming)
        extension = extension_of(incoming.filename)
        file_name = f"{datetime.now().strftime('%Y%m%d%H%M%S')}_{uuid.uuid4().hex}.{extension}"
        path = self.upload_dir / file_name
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(incoming.data)
        except OSError as e:
            logger.error("Failed to store %s: %s", incoming.filename, e)
            raise FileStorageError("Could not store file")

        logger.info("Stored %s as %s (%s bytes)", incoming.filename, file_name, len(incoming.data))
        return StoredFile(
            file_type=file_type,
            file_name=file_name,
            original_name=incoming.filename,
            file_path=str(path),
            file_size=len(incoming.data),
            mime_type=incoming.content_type or guess_content_type(incoming.filename),
        )

    def delete(self, file_path: str) -> None:
        try:
            Path(file_path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to delete %s: %s", file_path, e)

    def resolve(self, file_path: str) -> Path:
        """
        Raises:
            FileNotFound: If the file is gone from disk
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFound("Stored file is missing")
        return path


def get_file_storage() -> FileStorage:
    return FileStorage()
