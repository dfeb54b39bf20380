"""
Local document storage.

Work permits and progress evidence are stored under ``STORAGE_DIR`` and
referenced from the database by a relative ``storage_path``.  Files are
never served by path directly: callers obtain a time-limited signed URL
(``create_signed_url``) whose token is checked again on access.
"""

from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime
from pathlib import Path

from marine_ops.config import get_settings
from marine_ops.utils.security import create_document_token

logger = logging.getLogger(__name__)


def _sanitize_filename(filename: str) -> str:
    """Return filename with spaces replaced by underscores and special chars removed.

    Args:
        filename: Original filename string.

    Returns:
        Sanitized filename safe for filesystem storage.
    """
    name = filename.replace(" ", "_")
    name = re.sub(r"[^\w.\-]", "", name)
    return name


def save_upload(
    raw_bytes: bytes,
    filename: str,
    storage_dir: Path,
    folder: str,
) -> Path:
    """Save raw bytes to a folder-and-month partitioned subdirectory.

    The destination path follows the pattern::

        storage_dir/{folder}/{year}/{month:02d}/{uuid4}_{sanitized_filename}

    Args:
        raw_bytes: File contents to persist.
        filename: Original filename supplied by the uploader.
        storage_dir: Root directory for all stored documents.
        folder: Document family, e.g. ``"work_permit"`` or ``"evidence"``.

    Returns:
        Absolute Path to the saved file.
    """
    now = datetime.now()
    dest_dir = storage_dir / folder / str(now.year) / f"{now.month:02d}"
    dest_dir.mkdir(parents=True, exist_ok=True)

    safe_name = _sanitize_filename(filename) or "document"
    dest_path = dest_dir / f"{uuid.uuid4()}_{safe_name}"
    dest_path.write_bytes(raw_bytes)
    logger.info("save_upload: stored %d bytes at %s", len(raw_bytes), dest_path)
    return dest_path


def get_upload_relative_path(full_path: Path, storage_dir: Path) -> str:
    """Return the path of full_path relative to storage_dir as a forward-slash string.

    Returns:
        Relative path string suitable for storing in the database,
        e.g. ``"work_permit/2026/02/abc123_permit.pdf"``.
    """
    return full_path.relative_to(storage_dir).as_posix()


def resolve_storage_path(storage_path: str, storage_dir: Path | None = None) -> Path:
    """Map a stored relative path back to a file inside ``storage_dir``.

    Raises:
        ValueError: If the path escapes ``storage_dir``.
        FileNotFoundError: If no file exists at that path.
    """
    root = (storage_dir or get_settings().STORAGE_DIR).resolve()
    candidate = (root / storage_path).resolve()
    if not candidate.is_relative_to(root):
        raise ValueError(f"Storage path '{storage_path}' is outside the storage root")
    if not candidate.is_file():
        raise FileNotFoundError(storage_path)
    return candidate


def create_signed_url(storage_path: str, expires_in: int | None = None) -> tuple[str, int]:
    """Return ``(url, expires_in)`` for a stored document.

    ``expires_in`` defaults to ``SIGNED_URL_EXPIRATION_SECONDS``.
    """
    settings = get_settings()
    lifetime = expires_in or settings.SIGNED_URL_EXPIRATION_SECONDS
    token = create_document_token(storage_path, lifetime)
    return f"{settings.API_PREFIX}/documents/file?token={token}", lifetime
