# services/file_storage_service.py
import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import BinaryIO

from flask import current_app
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


class FileStorageService:
    UPLOAD_DIR = "uploads"

    def __init__(self, base_path: str = None):
        """
        Service de stockage des fichiers sur disque local

        Args:
            base_path: Chemin racine pour stocker les fichiers
        """
        self.base_path = Path(base_path or current_app.config.get('UPLOAD_FOLDER', 'storage')).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve(self, path: str) -> Path:
        """Retourne le chemin absolu, en refusant tout chemin hors de la racine"""
        full_path = (self.base_path / path).resolve()
        if full_path != self.base_path and self.base_path not in full_path.parents:
            raise ValueError(f"Path escapes storage root: {path}")
        return full_path

    def put(self, stream: BinaryIO, original_filename: str) -> str:
        """
        Sauvegarde un flux sur le disque sous un nom unique

        Returns:
            str: chemin relatif, ex: "uploads/1700000000_ab12cd34.png"
        """
        ext = Path(secure_filename(original_filename or "")).suffix.lower()
        filename = f"{int(time.time())}_{uuid.uuid4().hex}{ext}"
        relative_path = f"{self.UPLOAD_DIR}/{filename}"

        target = self._resolve(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as out:
            shutil.copyfileobj(stream, out)

        logger.debug("Stored %s as %s", original_filename, relative_path)
        return relative_path

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except ValueError:
            return False

    def get(self, path: str) -> bytes:
        return self._resolve(path).read_bytes()

    def delete(self, path: str) -> None:
        full_path = self._resolve(path)
        if full_path.exists():
            full_path.unlink()
            logger.debug("Deleted stored file %s", path)
