"""
Local file storage for uploaded article drafts.

Files live under ``UPLOAD_DIR/<user_id>/<timestamp>_<filename>``.
"""
from __future__ import annotations

import logging
import os
import re
import time
from pathlib import Path
from typing import Tuple

import aiofiles
from fastapi import UploadFile

from escriba.config import settings

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


class FileTooLargeError(Exception):
    """Upload exceeded MAX_FILE_SIZE."""


def _safe_name(filename: str) -> str:
    name = Path(filename).name
    return re.sub(r"[^\w.\-]+", "_", name) or "document"


async def save_upload(user_id: str, upload: UploadFile) -> Tuple[str, int]:
    """
    Stream *upload* to disk, enforcing MAX_FILE_SIZE.

    Returns:
        (file_path, size_in_bytes)

    Raises:
        FileTooLargeError: the upload exceeded the limit (partial file removed).
    """
    user_dir = os.path.join(settings.UPLOAD_DIR, _safe_name(user_id))
    os.makedirs(user_dir, exist_ok=True)

    stored_name = f"{int(time.time() * 1000)}_{_safe_name(upload.filename or '')}"
    file_path = os.path.join(user_dir, stored_name)
    size = 0

    async with aiofiles.open(file_path, "wb") as out:
        while True:
            chunk = await upload.read(_CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > settings.MAX_FILE_SIZE:
                break
            await out.write(chunk)

    if size > settings.MAX_FILE_SIZE:
        safe_remove(file_path)
        raise FileTooLargeError(
            f"O arquivo excede o limite de {settings.MAX_FILE_SIZE // (1024 * 1024)} MB."
        )

    logger.info("Stored upload %r for user=%s (%d bytes)", stored_name, user_id, size)
    return file_path, size


def safe_remove(path: str) -> None:
    try:
        if path and os.path.exists(path):
            os.remove(path)
    except OSError as exc:
        logger.warning("Could not remove file %r: %s", path, exc)
