"""
Document service layer.

Uploads work permits (per work detail) and progress evidence (per progress
report) into local storage and hands out signed URLs for them.  Link
lifetimes follow the dashboard's usage: 300 s for a download, 1800 s for
viewing in a new tab, ``SIGNED_URL_EXPIRATION_SECONDS`` otherwise.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from marine_ops.config import get_settings
from marine_ops.models.profile import Profile
from marine_ops.models.work_details import WorkDetails
from marine_ops.models.work_progress import WorkProgress
from marine_ops.schemas.document import DocumentUploadResponse, SignedUrlResponse
from marine_ops.services.activity_log_service import ACTION_UPDATE, log_activity
from marine_ops.services.file_storage import (
    create_signed_url,
    get_upload_relative_path,
    save_upload,
)
from marine_ops.services.progress_service import get_work_progress
from marine_ops.services.work_details_service import get_work_details_row
from marine_ops.utils.constants import SIGNED_URL_DOWNLOAD_SECONDS, SIGNED_URL_VIEW_SECONDS

logger = logging.getLogger(__name__)

_MODE_LIFETIMES: dict[str, int] = {
    "download": SIGNED_URL_DOWNLOAD_SECONDS,
    "view": SIGNED_URL_VIEW_SECONDS,
}

PERMIT_FOLDER = "work_permit"
EVIDENCE_FOLDER = "evidence"


def _lifetime(mode: str | None) -> int | None:
    if mode is None:
        return None
    if mode not in _MODE_LIFETIMES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown mode '{mode}'. Valid values: download, view.",
        )
    return _MODE_LIFETIMES[mode]


async def _store(file: UploadFile, folder: str) -> str:
    raw = await file.read()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The uploaded file is empty.",
        )
    settings = get_settings()
    saved = save_upload(raw, file.filename or "document", settings.STORAGE_DIR, folder)
    return get_upload_relative_path(saved, settings.STORAGE_DIR)


def _signed(storage_path: str | None, mode: str | None, label: str) -> SignedUrlResponse:
    if not storage_path:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No document stored for {label}.",
        )
    url, expires_in = create_signed_url(storage_path, _lifetime(mode))
    return SignedUrlResponse(url=url, expires_in=expires_in, storage_path=storage_path)


# ---------------------------------------------------------------------------
# Work permits
# ---------------------------------------------------------------------------


async def attach_work_permit(
    db: Session,
    work_details_id: int,
    file: UploadFile,
    user: Profile,
) -> DocumentUploadResponse:
    detail: WorkDetails = get_work_details_row(db, work_details_id)
    detail.storage_path = await _store(file, PERMIT_FOLDER)
    detail.work_permit_url = (
        f"{get_settings().API_PREFIX}/documents/work-details/{detail.id}/permit"
    )
    log_activity(db, user, ACTION_UPDATE, WorkDetails.__tablename__, detail.id, "Work permit uploaded")
    db.commit()

    logger.info("attach_work_permit: work_details_id=%d path=%s", detail.id, detail.storage_path)
    return DocumentUploadResponse(storage_path=detail.storage_path, url=detail.work_permit_url)


def work_permit_url(db: Session, work_details_id: int, mode: str | None = None) -> SignedUrlResponse:
    detail = get_work_details_row(db, work_details_id)
    return _signed(detail.storage_path, mode, f"work details {work_details_id}")


# ---------------------------------------------------------------------------
# Progress evidence
# ---------------------------------------------------------------------------


async def attach_progress_evidence(
    db: Session,
    progress_id: int,
    file: UploadFile,
    user: Profile,
) -> DocumentUploadResponse:
    report: WorkProgress = get_work_progress(db, progress_id)
    report.storage_path = await _store(file, EVIDENCE_FOLDER)
    report.evidence_url = (
        f"{get_settings().API_PREFIX}/documents/work-progress/{report.id}/evidence"
    )
    log_activity(db, user, ACTION_UPDATE, WorkProgress.__tablename__, report.id, "Evidence uploaded")
    db.commit()

    logger.info("attach_progress_evidence: progress_id=%d path=%s", report.id, report.storage_path)
    return DocumentUploadResponse(storage_path=report.storage_path, url=report.evidence_url)


def progress_evidence_url(db: Session, progress_id: int, mode: str | None = None) -> SignedUrlResponse:
    report = get_work_progress(db, progress_id)
    return _signed(report.storage_path, mode, f"progress report {progress_id}")
