"""
Local storage for uploaded files.

Files are written once under the configured upload directory with a
generated name (millisecond timestamp plus a random suffix, original
extension kept) and exposed by the application under ``/uploads``.
No content type or size checks are made.
"""

import logging
import os
import random
import shutil
import time
from pathlib import Path
from typing import Optional

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)


class UploadStorage:
    """Persist multipart file parts and hand back their reference paths."""

    def __init__(self, directory: str, url_prefix: str = "/uploads") -> None:
        self.directory = Path(directory).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_name(original_name: str) -> str:
        suffix = random.randint(0, 10**9)
        millis = int(time.time() * 1000)
        return f"{millis}-{suffix}{os.path.splitext(original_name)[1]}"

    def save(self, upload: Optional[UploadFile]) -> Optional[str]:
        """Store ``upload`` and return ``/uploads/<name>``.

        Returns ``None`` when no file was chosen (browsers still send an
        empty part with a blank filename).  I/O errors propagate.
        """
        if upload is None or not upload.filename:
            return None
        # Created at startup, but the directory may have been removed since.
        self.directory.mkdir(parents=True, exist_ok=True)
        name = self.generate_name(upload.filename)
        upload.file.seek(0)
        with open(self.directory / name, "wb") as out:
            shutil.copyfileobj(upload.file, out)
        logger.info("Stored upload '%s' as %s", upload.filename, name)
        return f"{self.url_prefix}/{name}"
