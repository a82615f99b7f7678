"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

import logging

from fastapi import File, HTTPException, UploadFile, status

from app.config import get_price_import_settings
from app.domain.errors import TransportError

logger = logging.getLogger(__name__)


def read_upload_payload(file: UploadFile, *, max_bytes: int) -> bytes:
    """
    Buffer the whole upload in memory, enforcing the configured size limit.
    """

    try:
        payload = file.file.read(max_bytes + 1)
    except OSError as exc:
        raise TransportError("Failed to read uploaded file.") from exc
    finally:
        file.file.close()

    if not payload:
        raise TransportError("Uploaded file is empty.")
    if len(payload) > max_bytes:
        raise TransportError("Uploaded file exceeds configured size limit.")
    return payload


def get_archive_payload(file: UploadFile = File(...)) -> bytes:
    """
    Return the raw bytes of the uploaded archive form field ``file``.
    """

    settings = get_price_import_settings()
    try:
        return read_upload_payload(file, max_bytes=settings.max_upload_bytes)
    except TransportError as exc:
        logger.warning("Rejected price upload filename=%r: %s", file.filename, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to retrieve file",
        ) from exc
