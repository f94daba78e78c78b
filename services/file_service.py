# services/file_service.py

import logging
import mimetypes
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from flask import current_app

from extensions import db
from models.file import File
from services.access_control import authorize, scope_to_owner
from services.file_storage_service import FileStorageService
from services.file_validation_service import FileValidationService
from utils.access_logger import log_action
from utils.constants import MANAGE_FILES
from utils.errors import ValidationError, ResourceNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Per-item outcome of a batch upload"""
    uploaded: List[File] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return not self.uploaded

    @property
    def partial(self) -> bool:
        return bool(self.uploaded) and bool(self.errors)


class FileService:
    """Owned-file management; every access goes through the access decision engine"""

    def __init__(self, storage: FileStorageService = None, validator: FileValidationService = None):
        self.storage = storage or FileStorageService()
        self.validator = validator or FileValidationService()

    @property
    def override_role(self) -> str:
        return current_app.config["OVERRIDE_ROLE"]

    def upload(self, user, uploads) -> BatchResult:
        """
        Store each upload independently.

        Successful items are committed one by one and never rolled back
        because a sibling failed.

        Raises:
            ValidationError: no file was sent at all
        """
        uploads = [u for u in (uploads or []) if u is not None]
        if not uploads:
            raise ValidationError.for_field("files", "At least one file is required.")

        result = BatchResult()
        for upload in uploads:
            filename = getattr(upload, 'filename', None) or '(unnamed)'

            check = self.validator.validate_upload(upload)
            if not check['valid']:
                result.errors.append({'file': filename, 'error': ' '.join(check['errors'])})
                continue

            path = None
            try:
                path = self.storage.put(upload.stream, filename)
                mime = upload.mimetype or mimetypes.guess_type(filename)[0]
                record = File(
                    name=filename,
                    path=path,
                    mime=mime,
                    size=check['size'],
                    user_id=user.id,
                )
                db.session.add(record)
                db.session.flush()
                log_action(user.id, 'UPLOAD_FILE', f"file:{filename}")
                db.session.commit()
                result.uploaded.append(record)
            except Exception as e:
                db.session.rollback()
                if path and self.storage.exists(path):
                    self.storage.delete(path)
                logger.error("Upload failed for %s: %s", filename, e)
                result.errors.append({'file': filename, 'error': str(e)})

        logger.info("Batch upload by user_id=%s: %s stored, %s failed",
                    user.id, len(result.uploaded), len(result.errors))
        return result

    def list_files(self, user, search: str = None, mime: str = None, page: int = 1, per_page: int = 15):
        query = scope_to_owner(File.query, user, File.user_id, override_role=self.override_role)
        if search:
            query = query.filter(File.name.contains(search, autoescape=True))
        if mime:
            query = query.filter(File.mime == mime)
        return (query
                .order_by(File.created_at.desc(), File.id.desc())
                .paginate(page=page, per_page=per_page, error_out=False))

    def get_file(self, user, file_id: int) -> File:
        """
        Load a file the user is allowed to see.

        Raises:
            ResourceNotFoundError: no such file
            NotOwnerError: the file belongs to someone else and the user is not an override holder
        """
        record = db.session.get(File, file_id)
        if record is None:
            raise ResourceNotFoundError("File not found.")
        authorize(user, MANAGE_FILES, resource=record,
                  override_role=self.override_role).raise_for_denial(MANAGE_FILES)
        return record

    def download(self, user, file_id: int) -> Tuple[File, bytes]:
        record = self.get_file(user, file_id)
        if not self.storage.exists(record.path):
            raise ResourceNotFoundError("File not found.")
        return record, self.storage.get(record.path)

    def delete_file(self, user, file_id: int) -> None:
        record = self.get_file(user, file_id)
        name, path = record.name, record.path
        try:
            db.session.delete(record)
            log_action(user.id, 'DELETE_FILE', f"file:{name}")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        if self.storage.exists(path):
            self.storage.delete(path)
        logger.info("File deleted: %s by user_id=%s", name, user.id)
