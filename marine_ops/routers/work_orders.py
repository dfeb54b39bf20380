"""
Work orders router.

Mounts under ``/api/work-orders``.

Every response carries the aggregated progress of the order's live work
details (``overall_progress``, ``is_fully_completed``,
``verification_status``).
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import MessageResponse
from marine_ops.schemas.work_order import (
    WorkDetailsResponse,
    WorkOrderCreate,
    WorkOrderDetailResponse,
    WorkOrderResponse,
    WorkOrderUpdate,
)
from marine_ops.services import work_details_service, work_order_service
from marine_ops.services.auth_service import get_current_user, require_capability
from marine_ops.utils.constants import CAP_MANAGE_WORK_ORDERS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Work orders"])

_Manager = Annotated[Profile, Depends(require_capability(CAP_MANAGE_WORK_ORDERS))]


@router.get("/", response_model=list[WorkOrderResponse], summary="List work orders")
def list_work_orders(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
    vessel_id: Annotated[int | None, Query(ge=1, description="Only this vessel.")] = None,
) -> list[WorkOrderResponse]:
    return work_order_service.list_work_orders(db, vessel_id)


@router.get(
    "/{work_order_id}",
    response_model=WorkOrderDetailResponse,
    summary="Work order with its work details",
    responses={404: {"description": "Work order not found."}},
)
def get_work_order(
    work_order_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> WorkOrderDetailResponse:
    return work_order_service.get_work_order(db, work_order_id)


@router.get(
    "/{work_order_id}/work-details",
    response_model=list[WorkDetailsResponse],
    summary="Work details of a work order",
)
def list_work_details(
    work_order_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> list[WorkDetailsResponse]:
    return work_details_service.list_work_details(db, work_order_id)


@router.post(
    "/",
    response_model=WorkOrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create work order",
    responses={422: {"description": "Unknown vessel or invalid body."}},
)
def create_work_order(
    data: WorkOrderCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> WorkOrderResponse:
    return work_order_service.create_work_order(db, data, current_user)


@router.put("/{work_order_id}", response_model=WorkOrderResponse, summary="Update work order")
def update_work_order(
    work_order_id: int,
    data: WorkOrderUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> WorkOrderResponse:
    return work_order_service.update_work_order(db, work_order_id, data, current_user)


@router.delete("/{work_order_id}", response_model=MessageResponse, summary="Delete work order")
def delete_work_order(
    work_order_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> MessageResponse:
    work_order_service.delete_work_order(db, work_order_id, current_user)
    return MessageResponse(message=f"Work order {work_order_id} deleted.")
