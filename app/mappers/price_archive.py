"""
app/mappers/price_archive.py

ZIP container helpers for the price archive format.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from pathlib import PurePosixPath

from app.domain.errors import ArchiveBuildError, ArchiveFormatError

logger = logging.getLogger(__name__)

ARCHIVE_ENTRY_NAME = "data.csv"
EXPORT_FILE_NAME = "data.zip"

# General purpose flag bit 0 of a ZIP entry header.
_ENCRYPTED_FLAG = 0x1


def _entry_base_name(info: zipfile.ZipInfo) -> str:
    return PurePosixPath(info.filename.replace("\\", "/")).name


def read_entry(payload: bytes, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes | None:
    """
    Return the content of the first entry whose base name equals *entry_name*.

    Returns None when the archive holds no such entry. Raises
    ArchiveFormatError when *payload* is not a readable ZIP archive.
    """

    try:
        with zipfile.ZipFile(io.BytesIO(payload)) as archive:
            matches = [
                info
                for info in archive.infolist()
                if not info.is_dir() and _entry_base_name(info) == entry_name
            ]
            if not matches:
                logger.info("Archive has no %r entry; entries=%d", entry_name, len(archive.infolist()))
                return None
            if len(matches) > 1:
                logger.warning(
                    "Archive has %d %r entries; using %r",
                    len(matches),
                    entry_name,
                    matches[0].filename,
                )
            if matches[0].flag_bits & _ENCRYPTED_FLAG:
                raise ArchiveFormatError(f"Entry {matches[0].filename!r} is encrypted")
            return archive.read(matches[0])
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        NotImplementedError,
        EOFError,
        RuntimeError,
        ValueError,
        OSError,
    ) as exc:
        raise ArchiveFormatError(f"Unreadable ZIP archive: {exc}") from exc


def build_archive(content: bytes, entry_name: str = ARCHIVE_ENTRY_NAME) -> bytes:
    """
    Wrap *content* as the single DEFLATE-compressed entry of a new ZIP archive.
    """

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(entry_name, content)
    except (OSError, ValueError, zipfile.LargeZipFile) as exc:
        raise ArchiveBuildError(f"Failed to build ZIP archive: {exc}") from exc
    return buffer.getvalue()
