"""
Work details service layer.

CRUD for the tasks inside a work order, plus verification.  A work detail
has at most one live ``WorkVerification``: recording a new one soft-deletes
the previous record so the history is kept.
"""

from __future__ import annotations

import datetime
import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from marine_ops.models.profile import Profile
from marine_ops.models.work_details import WorkDetails
from marine_ops.models.work_order import WorkOrder
from marine_ops.models.work_verification import WorkVerification
from marine_ops.schemas.progress import VerificationCreate
from marine_ops.schemas.work_order import (
    WorkDetailsCreate,
    WorkDetailsResponse,
    WorkDetailsUpdate,
)
from marine_ops.services.activity_log_service import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    log_activity,
)
from marine_ops.services.work_order_service import build_work_details_response

logger = logging.getLogger(__name__)


def _query(db: Session):
    return db.query(WorkDetails).options(
        selectinload(WorkDetails.progress_reports),
        selectinload(WorkDetails.verifications),
    )


def get_work_details_row(db: Session, work_details_id: int) -> WorkDetails:
    """Return a live ``WorkDetails`` row.

    Raises:
        HTTPException 404: If it does not exist or was deleted.
    """
    detail = (
        _query(db)
        .filter(WorkDetails.id == work_details_id, WorkDetails.active())
        .first()
    )
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work details with id {work_details_id} not found.",
        )
    return detail


def list_work_details(db: Session, work_order_id: int) -> list[WorkDetailsResponse]:
    rows = (
        _query(db)
        .filter(WorkDetails.work_order_id == work_order_id, WorkDetails.active())
        .order_by(WorkDetails.id)
        .all()
    )
    return [build_work_details_response(d) for d in rows]


def get_work_details(db: Session, work_details_id: int) -> WorkDetailsResponse:
    return build_work_details_response(get_work_details_row(db, work_details_id))


def create_work_details(db: Session, data: WorkDetailsCreate, user: Profile) -> WorkDetailsResponse:
    """Create a work detail under a live work order.

    Raises:
        HTTPException 422: If ``work_order_id`` does not reference a live
                           work order.
    """
    work_order = (
        db.query(WorkOrder)
        .filter(WorkOrder.id == data.work_order_id, WorkOrder.active())
        .first()
    )
    if work_order is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Work order with id {data.work_order_id} does not exist.",
        )

    detail = WorkDetails(**data.model_dump(), user_id=user.id)
    db.add(detail)
    db.flush()
    log_activity(db, user, ACTION_CREATE, WorkDetails.__tablename__, detail.id, detail.description)
    db.commit()

    logger.info("create_work_details: id=%d work_order_id=%d", detail.id, work_order.id)
    return get_work_details(db, detail.id)


def update_work_details(
    db: Session,
    work_details_id: int,
    data: WorkDetailsUpdate,
    user: Profile,
) -> WorkDetailsResponse:
    detail = get_work_details_row(db, work_details_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(detail, field_name, value)
    log_activity(db, user, ACTION_UPDATE, WorkDetails.__tablename__, detail.id)
    db.commit()
    return get_work_details(db, work_details_id)


def delete_work_details(db: Session, work_details_id: int, user: Profile) -> None:
    detail = get_work_details_row(db, work_details_id)
    detail.soft_delete()
    log_activity(db, user, ACTION_DELETE, WorkDetails.__tablename__, detail.id)
    db.commit()
    logger.info("delete_work_details: id=%d", work_details_id)


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------


def get_verification(db: Session, work_details_id: int) -> WorkVerification | None:
    get_work_details_row(db, work_details_id)
    return (
        db.query(WorkVerification)
        .filter(
            WorkVerification.work_details_id == work_details_id,
            WorkVerification.active(),
        )
        .order_by(WorkVerification.id.desc())
        .first()
    )


def verify_work_details(
    db: Session,
    work_details_id: int,
    data: VerificationCreate,
    user: Profile,
) -> WorkVerification:
    """Record a verification, replacing any previous live one.

    ``verification_date`` defaults to today when omitted.
    """
    detail = get_work_details_row(db, work_details_id)

    replaced = 0
    for previous in detail.verifications:
        if previous.deleted_at is None:
            previous.soft_delete()
            replaced += 1

    verification = WorkVerification(
        work_details_id=detail.id,
        work_verification=data.work_verification,
        verification_date=data.verification_date or datetime.date.today(),
        user_id=user.id,
    )
    db.add(verification)
    db.flush()
    log_activity(
        db,
        user,
        ACTION_CREATE,
        WorkVerification.__tablename__,
        verification.id,
        f"work details {detail.id} verified={data.work_verification}",
    )
    db.commit()
    db.refresh(verification)

    logger.info(
        "verify_work_details: work_details_id=%d verified=%s replaced=%d",
        detail.id,
        data.work_verification,
        replaced,
    )
    return verification
