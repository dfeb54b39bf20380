"""Activity log router (``/api/activity-log``), MASTER and ADMIN only."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.activity_log import ActivityLogResponse
from marine_ops.schemas.common import PaginationParams
from marine_ops.services import activity_log_service
from marine_ops.services.auth_service import require_capability
from marine_ops.utils.constants import CAP_VIEW_ACTIVITY_LOG

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Activity log"])


@router.get("/", response_model=list[ActivityLogResponse], summary="Recent write actions")
def list_activity(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(require_capability(CAP_VIEW_ACTIVITY_LOG))],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=200)] = 50,
    table_name: Annotated[str | None, Query(max_length=100)] = None,
) -> list[ActivityLogResponse]:
    pagination = PaginationParams(page=page, page_size=page_size)
    return activity_log_service.list_activity(db, pagination, table_name)
