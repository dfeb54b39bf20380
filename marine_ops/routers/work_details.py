"""
Work details router.

Mounts under ``/api/work-details``.

Endpoints
---------
GET    /{id}               — Work detail with current progress.
POST   /                   — Create (``manage-work-orders``).
PUT    /{id}               — Update (``manage-work-orders``).
DELETE /{id}               — Soft delete (``manage-work-orders``).
GET    /{id}/verification  — Live verification record, if any.
POST   /{id}/verification  — Record a verification (``verify-work``);
                             replaces the previous record.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import MessageResponse
from marine_ops.schemas.progress import VerificationCreate, VerificationResponse
from marine_ops.schemas.work_order import (
    WorkDetailsCreate,
    WorkDetailsResponse,
    WorkDetailsUpdate,
)
from marine_ops.services import work_details_service
from marine_ops.services.auth_service import get_current_user, require_capability
from marine_ops.utils.constants import CAP_MANAGE_WORK_ORDERS, CAP_VERIFY_WORK

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Work details"])

_Manager = Annotated[Profile, Depends(require_capability(CAP_MANAGE_WORK_ORDERS))]


@router.get("/{work_details_id}", response_model=WorkDetailsResponse, summary="Work detail")
def get_work_details(
    work_details_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> WorkDetailsResponse:
    return work_details_service.get_work_details(db, work_details_id)


@router.post(
    "/",
    response_model=WorkDetailsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create work detail",
)
def create_work_details(
    data: WorkDetailsCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> WorkDetailsResponse:
    return work_details_service.create_work_details(db, data, current_user)


@router.put("/{work_details_id}", response_model=WorkDetailsResponse, summary="Update work detail")
def update_work_details(
    work_details_id: int,
    data: WorkDetailsUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> WorkDetailsResponse:
    return work_details_service.update_work_details(db, work_details_id, data, current_user)


@router.delete("/{work_details_id}", response_model=MessageResponse, summary="Delete work detail")
def delete_work_details(
    work_details_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> MessageResponse:
    work_details_service.delete_work_details(db, work_details_id, current_user)
    return MessageResponse(message=f"Work details {work_details_id} deleted.")


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


@router.get(
    "/{work_details_id}/verification",
    response_model=VerificationResponse | None,
    summary="Current verification",
)
def get_verification(
    work_details_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> VerificationResponse | None:
    return work_details_service.get_verification(db, work_details_id)


@router.post(
    "/{work_details_id}/verification",
    response_model=VerificationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Verify work detail",
)
def verify_work_details(
    work_details_id: int,
    data: VerificationCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[Profile, Depends(require_capability(CAP_VERIFY_WORK))],
) -> VerificationResponse:
    return work_details_service.verify_work_details(db, work_details_id, data, current_user)
