"""
Upload validation service

Checks each uploaded item independently so that a batch can report
per-file errors without rejecting the valid files.
"""

import os
import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

from flask import current_app

logger = logging.getLogger(__name__)


class FileValidationService:
    """Service for validating uploaded files"""

    def __init__(self, allowed_extensions: Optional[Iterable[str]] = None, max_size: Optional[int] = None):
        config = current_app.config
        self.allowed_extensions = {
            ext.lower().lstrip('.')
            for ext in (allowed_extensions or config.get('ALLOWED_UPLOAD_EXTENSIONS', ['jpg', 'jpeg', 'png', 'mp4']))
        }
        self.max_size = max_size or config.get('MAX_UPLOAD_SIZE', 100 * 1024 * 1024)

    @staticmethod
    def get_stream_size(stream) -> int:
        """Size in bytes of a seekable stream, leaving the cursor at the start"""
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return size

    def validate_upload(self, upload) -> Dict[str, any]:
        """
        Validate a single uploaded file (werkzeug FileStorage)

        Returns:
            Dict with 'valid', 'errors', and 'size' (bytes) when readable
        """
        result = {
            'valid': False,
            'errors': [],
            'size': None,
        }

        filename = getattr(upload, 'filename', None)
        if not filename:
            result['errors'].append('Each item must be a valid file.')
            return result

        ext = Path(filename).suffix.lower().lstrip('.')
        if ext not in self.allowed_extensions:
            allowed = ', '.join(sorted(self.allowed_extensions))
            result['errors'].append(f'Each file must be one of: {allowed}.')

        size = self.get_stream_size(upload.stream)
        result['size'] = size
        if size == 0:
            result['errors'].append('Each file must not be empty.')
        elif size > self.max_size:
            max_mb = self.max_size // (1024 * 1024)
            result['errors'].append(f'Each file must not be larger than {max_mb} MB.')

        result['valid'] = not result['errors']
        if not result['valid']:
            logger.info("Upload rejected for %s: %s", filename, result['errors'])
        return result
