"""
Dashboard router.

Mounts under ``/api/dashboard``.  Read-only statistics for the landing
page; any authenticated user may call it.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.progress import ProgressStatsResponse
from marine_ops.services import progress_service
from marine_ops.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Dashboard"])


@router.get(
    "/stats",
    response_model=ProgressStatsResponse,
    summary="Progress statistics",
    description=(
        "Project-level and work-detail level progress statistics. A project "
        "is behind schedule when it is below 100 % and its latest report is "
        "more than 3 days old."
    ),
)
def get_stats(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> ProgressStatsResponse:
    stats = progress_service.get_progress_stats(db)
    logger.debug("GET /dashboard/stats total_projects=%d", stats.total_projects)
    return stats
