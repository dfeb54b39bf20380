"""
Work order service layer.

CRUD for ``WorkOrder`` rows and the read models that carry aggregated
progress: every list and detail response recomputes ``overall_progress``,
``is_fully_completed`` and ``verification_status`` from the live work
details, so nothing derived is ever stored.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from marine_ops.models.profile import Profile
from marine_ops.models.vessel import Vessel
from marine_ops.models.work_details import WorkDetails
from marine_ops.models.work_order import WorkOrder
from marine_ops.schemas.work_order import (
    WorkDetailsResponse,
    WorkOrderCreate,
    WorkOrderDetailResponse,
    WorkOrderResponse,
    WorkOrderUpdate,
)
from marine_ops.services.activity_log_service import (
    ACTION_CREATE,
    ACTION_DELETE,
    ACTION_UPDATE,
    log_activity,
)
from marine_ops.services.progress_aggregator import ProgressSummary, aggregate_work_order
from marine_ops.services.progress_service import summarize_detail

logger = logging.getLogger(__name__)

_WORK_ORDER_FIELDS = (
    "id",
    "vessel_id",
    "customer_wo_number",
    "customer_wo_date",
    "shipyard_wo_number",
    "shipyard_wo_date",
    "wo_document_delivery_date",
    "wo_location",
    "wo_description",
    "created_at",
    "updated_at",
)


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------


def _detail_response(
    detail: WorkDetails,
    summary: ProgressSummary,
    verified: bool,
) -> WorkDetailsResponse:
    response = WorkDetailsResponse.model_validate(detail)
    return response.model_copy(
        update={
            "current_progress": summary.current_progress,
            "latest_progress_date": summary.latest_progress_date,
            "progress_count": summary.progress_count,
            "is_verified": verified,
        }
    )


def build_work_details_response(detail: WorkDetails) -> WorkDetailsResponse:
    """Serialise a work detail together with its current progress."""
    summary, verified = summarize_detail(detail)
    return _detail_response(detail, summary, verified)


def _build_response(work_order: WorkOrder, with_details: bool = False) -> WorkOrderResponse:
    summaries = []
    verified_flags = []
    detail_responses = []
    for detail in work_order.work_details:
        if detail.deleted_at is not None:
            continue
        summary, verified = summarize_detail(detail)
        summaries.append(summary)
        verified_flags.append(verified)
        detail_responses.append(_detail_response(detail, summary, verified))
    aggregate = aggregate_work_order(summaries, verified_flags)

    payload = {name: getattr(work_order, name) for name in _WORK_ORDER_FIELDS}
    payload.update(
        vessel_name=work_order.vessel.name if work_order.vessel else None,
        overall_progress=aggregate.overall_progress,
        is_fully_completed=aggregate.is_fully_completed,
        verification_status=aggregate.verification_status,
        work_details_count=aggregate.detail_count,
        has_invoice=any(i.deleted_at is None for i in work_order.invoices),
    )
    if with_details:
        return WorkOrderDetailResponse(**payload, work_details=detail_responses)
    return WorkOrderResponse(**payload)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def _query(db: Session):
    return db.query(WorkOrder).options(
        selectinload(WorkOrder.vessel),
        selectinload(WorkOrder.invoices),
        selectinload(WorkOrder.work_details).selectinload(WorkDetails.progress_reports),
        selectinload(WorkOrder.work_details).selectinload(WorkDetails.verifications),
    )


def get_work_order_row(db: Session, work_order_id: int) -> WorkOrder:
    """Return a live ``WorkOrder`` ORM row.

    Raises:
        HTTPException 404: If the work order does not exist or was deleted.
    """
    work_order = (
        _query(db)
        .filter(WorkOrder.id == work_order_id, WorkOrder.active())
        .first()
    )
    if work_order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work order with id {work_order_id} not found.",
        )
    return work_order


def list_work_orders(db: Session, vessel_id: int | None = None) -> list[WorkOrderResponse]:
    query = _query(db).filter(WorkOrder.active())
    if vessel_id is not None:
        query = query.filter(WorkOrder.vessel_id == vessel_id)
    rows = query.order_by(WorkOrder.id.desc()).all()
    logger.debug("list_work_orders: vessel_id=%s rows=%d", vessel_id, len(rows))
    return [_build_response(wo) for wo in rows]


def get_work_order(db: Session, work_order_id: int) -> WorkOrderDetailResponse:
    return _build_response(get_work_order_row(db, work_order_id), with_details=True)


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def create_work_order(db: Session, data: WorkOrderCreate, user: Profile) -> WorkOrderResponse:
    """Create a work order under a live vessel.

    Raises:
        HTTPException 422: If ``vessel_id`` does not reference a live vessel.
    """
    vessel = db.query(Vessel).filter(Vessel.id == data.vessel_id, Vessel.active()).first()
    if vessel is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Vessel with id {data.vessel_id} does not exist.",
        )

    work_order = WorkOrder(**data.model_dump(), user_id=user.id)
    db.add(work_order)
    db.flush()
    log_activity(
        db,
        user,
        ACTION_CREATE,
        WorkOrder.__tablename__,
        work_order.id,
        f"Work order {work_order.shipyard_wo_number or work_order.id} for {vessel.name}",
    )
    db.commit()

    logger.info("create_work_order: id=%d vessel_id=%d", work_order.id, vessel.id)
    return _build_response(get_work_order_row(db, work_order.id))


def update_work_order(
    db: Session,
    work_order_id: int,
    data: WorkOrderUpdate,
    user: Profile,
) -> WorkOrderResponse:
    work_order = get_work_order_row(db, work_order_id)
    for field_name, value in data.model_dump(exclude_unset=True).items():
        setattr(work_order, field_name, value)
    log_activity(db, user, ACTION_UPDATE, WorkOrder.__tablename__, work_order.id)
    db.commit()

    logger.info("update_work_order: id=%d", work_order_id)
    return _build_response(get_work_order_row(db, work_order_id))


def delete_work_order(db: Session, work_order_id: int, user: Profile) -> None:
    work_order = get_work_order_row(db, work_order_id)
    work_order.soft_delete()
    log_activity(db, user, ACTION_DELETE, WorkOrder.__tablename__, work_order.id)
    db.commit()
    logger.info("delete_work_order: id=%d", work_order_id)
