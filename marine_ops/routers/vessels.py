"""
Vessels router.

Mounts under ``/api/vessels``.  Reads need any authenticated user; writes
need the ``manage-vessels`` capability.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from marine_ops.database import get_db
from marine_ops.models.profile import Profile
from marine_ops.schemas.common import MessageResponse
from marine_ops.schemas.vessel import VesselCreate, VesselResponse, VesselUpdate
from marine_ops.services import vessel_service
from marine_ops.services.auth_service import get_current_user, require_capability
from marine_ops.utils.constants import CAP_MANAGE_VESSELS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Vessels"])

_Manager = Annotated[Profile, Depends(require_capability(CAP_MANAGE_VESSELS))]


@router.get("/", response_model=list[VesselResponse], summary="List vessels")
def list_vessels(
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
    search: Annotated[str | None, Query(max_length=200, description="Name contains.")] = None,
) -> list[VesselResponse]:
    return vessel_service.list_vessels(db, search)


@router.get(
    "/{vessel_id}",
    response_model=VesselResponse,
    summary="Vessel detail",
    responses={404: {"description": "Vessel not found."}},
)
def get_vessel(
    vessel_id: int,
    db: Annotated[Session, Depends(get_db)],
    _current_user: Annotated[Profile, Depends(get_current_user)],
) -> VesselResponse:
    return vessel_service.get_vessel(db, vessel_id)


@router.post(
    "/",
    response_model=VesselResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create vessel",
)
def create_vessel(
    data: VesselCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> VesselResponse:
    return vessel_service.create_vessel(db, data, current_user)


@router.put("/{vessel_id}", response_model=VesselResponse, summary="Update vessel")
def update_vessel(
    vessel_id: int,
    data: VesselUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> VesselResponse:
    return vessel_service.update_vessel(db, vessel_id, data, current_user)


@router.delete("/{vessel_id}", response_model=MessageResponse, summary="Delete vessel")
def delete_vessel(
    vessel_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: _Manager,
) -> MessageResponse:
    vessel_service.delete_vessel(db, vessel_id, current_user)
    return MessageResponse(message=f"Vessel {vessel_id} deleted.")
