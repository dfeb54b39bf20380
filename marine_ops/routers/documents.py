"""
Documents router.

Mounts under ``/api/documents``.

Endpoints
---------
POST /work-details/{id}/permit       — Upload a work permit.
GET  /work-details/{id}/permit       — Signed URL for the permit.
POST /work-progress/{id}/evidence    — Upload progress evidence.
GET  /work-progress/{id}/evidence    — Signed URL for the evidence.
GET  /file?token=...                 — Serve a document; the signed token
                                       replaces the bearer token.

``mode=download`` gives a 300 s link, ``mode=view`` a 1800 s link, no mode
the configured default (3600 s).
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.document import DocumentUploadResponse, SignedUrlResponse
from marine_ops.services import document_service
from marine_ops.services.auth_service import get_current_user, require_capability
from marine_ops.services.file_storage import resolve_storage_path
from marine_ops.utils.constants import CAP_MANAGE_WORK_ORDERS, CAP_MANAGE_WORK_PROGRESS
from marine_ops.utils.security import verify_document_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])

_Mode = Annotated[Literal["download", "view"] | None, Query(description="download | view")]


@router.post(
    "/work-details/{work_details_id}/permit",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_work_permit(
    work_details_id: int,
    file: Annotated[UploadFile, File(description="Work permit document")],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_capability(CAP_MANAGE_WORK_ORDERS))],
) -> DocumentUploadResponse:
    return await document_service.attach_work_permit(db, work_details_id, file, current_user)


@router.get("/work-details/{work_details_id}/permit", response_model=SignedUrlResponse)
def work_permit_url(
    work_details_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
    mode: _Mode = None,
) -> SignedUrlResponse:
    return document_service.work_permit_url(db, work_details_id, mode)


@router.post(
    "/work-progress/{progress_id}/evidence",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_progress_evidence(
    progress_id: int,
    file: Annotated[UploadFile, File(description="Evidence photo or document")],
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_capability(CAP_MANAGE_WORK_PROGRESS))],
) -> DocumentUploadResponse:
    return await document_service.attach_progress_evidence(db, progress_id, file, current_user)


@router.get("/work-progress/{progress_id}/evidence", response_model=SignedUrlResponse)
def progress_evidence_url(
    progress_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
    mode: _Mode = None,
) -> SignedUrlResponse:
    return document_service.progress_evidence_url(db, progress_id, mode)


@router.get(
    "/file",
    response_class=FileResponse,
    summary="Fetch a document through a signed link",
    responses={
        403: {"description": "Invalid or expired link."},
        404: {"description": "Document no longer exists."},
    },
)
def get_document(
    token: Annotated[str, Query(min_length=1)],
    download: bool = False,
) -> FileResponse:
    """Serve the file referenced by a signed document token.

    Raises:
        HTTPException 403: If the token is invalid, expired, or points
                           outside the storage root.
        HTTPException 404: If the file is gone.
    """
    try:
        storage_path = verify_document_token(token)
        path = resolve_storage_path(storage_path)
    except FileNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found.",
        ) from exc
    except ValueError as exc:
        logger.warning("Rejected document link: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired document link.",
        ) from exc

    # Stored names are "<uuid>_<original>"
    filename = path.name.split("_", 1)[-1]
    return FileResponse(
        path,
        filename=filename,
        content_disposition_type="attachment" if download else "inline",
    )
