"""
Work progress router.

Mounts under ``/api/work-progress``.

``POST /`` rejects a report that would lower the work detail's progress
(422) or that repeats an existing report date (409); nothing is written
in either case.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import MessageResponse
from marine_ops.schemas.progress import WorkProgressCreate, WorkProgressResponse
from marine_ops.services import progress_service
from marine_ops.services.auth_service import get_current_user, require_capability
from marine_ops.utils.constants import CAP_MANAGE_WORK_PROGRESS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Work progress"])

_Reporter = Annotated[Profile, Depends(require_capability(CAP_MANAGE_WORK_PROGRESS))]


@router.get(
    "/",
    response_model=list[WorkProgressResponse],
    summary="Progress reports of a work detail (newest first)",
)
def list_work_progress(
    work_details_id: Annotated[int, Query(ge=1)],
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> list[WorkProgressResponse]:
    reports = progress_service.list_work_progress(db, work_details_id)
    return [progress_service.work_progress_response(r) for r in reports]


@router.post(
    "/",
    response_model=WorkProgressResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add progress report",
    responses={
        404: {"description": "Work detail not found."},
        409: {"description": "A report for this date already exists."},
        422: {"description": "Percentage out of range or lower than current progress."},
    },
)
def add_work_progress(
    data: WorkProgressCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Reporter,
) -> WorkProgressResponse:
    report = progress_service.add_work_progress(db, data, current_user)
    return progress_service.work_progress_response(report)


@router.delete("/{progress_id}", response_model=MessageResponse, summary="Delete progress report")
def delete_work_progress(
    progress_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Reporter,
) -> MessageResponse:
    progress_service.delete_work_progress(db, progress_id, current_user)
    return MessageResponse(message=f"Progress report {progress_id} deleted.")
