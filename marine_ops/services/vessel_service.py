"""
Vessel service layer.

CRUD for ``Vessel`` rows.  Deletion is soft: the row keeps its history and
disappears from every list and from the export.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from marine_ops.models.profile import Profile
from marine_ops.models.vessel import Vessel
from marine_ops.schemas.vessel import VesselCreate, VesselUpdate
from marine_ops.services.activity_log_service import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    log_activity,
)

logger = logging.getLogger(__name__)


def list_vessels(db: Session, search: str | None = None) -> list[Vessel]:
    query = db.query(Vessel).filter(Vessel.active())
    if search:
        query = query.filter(Vessel.name.ilike(f"%{search}%"))
    return query.order_by(Vessel.name, Vessel.id).all()


def get_vessel(db: Session, vessel_id: int) -> Vessel:
    """Return a live vessel.

    Raises:
        HTTPException 404: If the vessel does not exist or was deleted.
    """
    vessel = db.query(Vessel).filter(Vessel.id == vessel_id, Vessel.active()).first()
    if vessel is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Vessel with id {vessel_id} not found.",
        )
    return vessel


def create_vessel(db: Session, data: VesselCreate, user: Profile) -> Vessel:
    vessel = Vessel(**data.model_dump())
    db.add(vessel)
    db.flush()
    log_activity(db, user, ACTION_CREATE, Vessel.__tablename__, vessel.id, f"Vessel {vessel.name}")
    db.commit()
    db.refresh(vessel)

    logger.info("create_vessel: created '%s' (id=%d)", vessel.name, vessel.id)
    return vessel


def update_vessel(db: Session, vessel_id: int, data: VesselUpdate, user: Profile) -> Vessel:
    vessel = get_vessel(db, vessel_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(vessel, field_name, value)
    log_activity(db, user, ACTION_UPDATE, Vessel.__tablename__, vessel.id, f"Vessel {vessel.name}")
    db.commit()
    db.refresh(vessel)

    logger.info("update_vessel: id=%d", vessel.id)
    return vessel


def delete_vessel(db: Session, vessel_id: int, user: Profile) -> None:
    vessel = get_vessel(db, vessel_id)
    vessel.soft_delete()
    log_activity(db, user, ACTION_DELETE, Vessel.__tablename__, vessel.id, f"Vessel {vessel.name}")
    db.commit()
    logger.info("delete_vessel: id=%d", vessel_id)
