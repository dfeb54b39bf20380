"""
Project progress router (work-order level).

Mounts under ``/api/project-progress``.

Endpoints
---------
GET    /summaries            — Latest progress + history per work order.
GET    /chart/{work_order_id} — Progress series in ascending date order.
POST   /                     — Add a report (same rules as work progress).
DELETE /{id}                 — Soft delete a report.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import MessageResponse
from marine_ops.schemas.progress import (
    ProgressChartPoint,
    ProgressSummaryResponse,
    ProjectProgressCreate,
    ProjectProgressResponse,
)
from marine_ops.services import progress_service
from marine_ops.services.auth_service import get_current_user, require_capability
from marine_ops.utils.constants import CAP_MANAGE_WORK_PROGRESS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Project progress"])

_Reporter = Annotated[Profile, Depends(require_capability(CAP_MANAGE_WORK_PROGRESS))]


@router.get("/summaries", response_model=list[ProgressSummaryResponse])
def get_summaries(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> list[ProgressSummaryResponse]:
    return progress_service.get_progress_summaries(db)


@router.get("/chart/{work_order_id}", response_model=list[ProgressChartPoint])
def get_chart(
    work_order_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> list[ProgressChartPoint]:
    return progress_service.get_progress_chart(db, work_order_id)


@router.post(
    "/",
    response_model=ProjectProgressResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add project progress report",
    responses={
        409: {"description": "A report for this date already exists."},
        422: {"description": "Percentage out of range or lower than current progress."},
    },
)
def add_project_progress(
    data: ProjectProgressCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Reporter,
) -> ProjectProgressResponse:
    report = progress_service.add_project_progress(db, data, current_user)
    return progress_service.project_progress_response(report)


@router.delete("/{progress_id}", response_model=MessageResponse)
def delete_project_progress(
    progress_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Reporter,
) -> MessageResponse:
    progress_service.delete_project_progress(db, progress_id, current_user)
    return MessageResponse(message=f"Project progress {progress_id} deleted.")
