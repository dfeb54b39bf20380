"""
Progress service layer.

Database access for work-detail progress reports (``WorkProgress``) and
work-order level project progress (``ProjectProgress``), plus the
dashboard statistics built on top of them.

Write rules
-----------
A new report is checked before anything is written:

1. The percentage lies in [0, 100].
2. No live report exists for the same parent and ``report_date``
   (``DuplicateProgressError`` → HTTP 409).
3. The percentage is not lower than the parent's current progress
   (``ProgressValidationError`` → HTTP 422).

The checks live in ``validate_new_progress`` so the importer applies
exactly the same rules as the API.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from marine_ops.models.profile import Profile
from marine_ops.models.work_details import WorkDetails
from marine_ops.models.work_order import WorkOrder
from marine_ops.models.work_progress import ProjectProgress, WorkProgress
from marine_ops.schemas.progress import (
    ProgressChartPoint,
    ProgressHistoryItem,
    ProgressStatsResponse,
    ProgressSummaryResponse,
    ProjectProgressCreate,
    ProjectProgressResponse,
    WorkProgressCreate,
    WorkProgressResponse,
)
from marine_ops.services.activity_log_service import (
    ACTION_CREATE,
    ACTION_DELETE,
    log_activity,
)
from marine_ops.services.progress_aggregator import (
    ProgressEntry,
    ProgressSummary,
    compute_progress_stats,
    summarize_progress,
)
from marine_ops.utils.constants import PROGRESS_MAX, PROGRESS_MIN

logger = logging.getLogger(__name__)


class ProgressValidationError(ValueError):
    """A new report breaks the range or monotonic-progress rule."""


class DuplicateProgressError(ValueError):
    """A live report already exists for the same parent and date."""


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_new_progress(
    existing: Sequence[ProgressEntry],
    percentage: float,
    report_date: datetime.date,
) -> None:
    """Check a new report against the parent's live reports.

    Raises:
        ProgressValidationError: Out-of-range or decreasing percentage.
        DuplicateProgressError: A report for ``report_date`` already exists.
    """
    if not PROGRESS_MIN <= percentage <= PROGRESS_MAX:
        raise ProgressValidationError(
            f"Progress must be between {PROGRESS_MIN} and {PROGRESS_MAX}, got {percentage}."
        )

    if any(e.report_date == report_date for e in existing):
        raise DuplicateProgressError(
            f"A progress report for {report_date.isoformat()} already exists."
        )

    current = summarize_progress(existing).current_progress
    if percentage < current:
        raise ProgressValidationError(
            f"Progress cannot go down: current progress is {current}%, got {percentage}%."
        )


def _check_or_raise(
    existing: Sequence[ProgressEntry],
    percentage: float,
    report_date: datetime.date,
) -> None:
    try:
        validate_new_progress(existing, percentage, report_date)
    except DuplicateProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except ProgressValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )


# ---------------------------------------------------------------------------
# Shared summaries
# ---------------------------------------------------------------------------


def summarize_detail(
    detail: WorkDetails,
    entries: Sequence[ProgressEntry] | None = None,
) -> tuple[ProgressSummary, bool]:
    """Return the progress summary and verified flag of one work detail.

    Only live progress reports and verifications are considered.  Callers
    that already converted the live reports pass them as ``entries``.
    """
    if entries is None:
        entries = [
            ProgressEntry.from_record(r)
            for r in detail.progress_reports
            if r.deleted_at is None
        ]
    verified = any(
        v.work_verification for v in detail.verifications if v.deleted_at is None
    )
    return summarize_progress(entries), verified


def _project_entries(work_order: WorkOrder) -> list[ProgressEntry]:
    return [
        ProgressEntry.from_record(r, percentage_attr="progress")
        for r in work_order.project_progress
        if r.deleted_at is None
    ]


# ---------------------------------------------------------------------------
# Work progress (per work detail)
# ---------------------------------------------------------------------------


def _get_live_detail(db: Session, work_details_id: int) -> WorkDetails:
    detail = (
        db.query(WorkDetails)
        .filter(WorkDetails.id == work_details_id, WorkDetails.active())
        .first()
    )
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work details with id {work_details_id} not found.",
        )
    return detail


def list_work_progress(db: Session, work_details_id: int) -> list[WorkProgress]:
    """Return live reports of a work detail, newest first."""
    _get_live_detail(db, work_details_id)
    return (
        db.query(WorkProgress)
        .options(selectinload(WorkProgress.reporter))
        .filter(WorkProgress.work_details_id == work_details_id, WorkProgress.active())
        .order_by(WorkProgress.report_date.desc(), WorkProgress.id.asc())
        .all()
    )


def get_work_progress(db: Session, progress_id: int) -> WorkProgress:
    report = (
        db.query(WorkProgress)
        .filter(WorkProgress.id == progress_id, WorkProgress.active())
        .first()
    )
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Progress report with id {progress_id} not found.",
        )
    return report


def add_work_progress(db: Session, data: WorkProgressCreate, user: Profile) -> WorkProgress:
    """Validate and persist a progress report for a work detail.

    Raises:
        HTTPException 404: Unknown or deleted work detail.
        HTTPException 409: A report for the same date already exists.
        HTTPException 422: Out-of-range or decreasing percentage.
    """
    detail = _get_live_detail(db, data.work_details_id)
    existing = [
        ProgressEntry.from_record(r) for r in detail.progress_reports if r.deleted_at is None
    ]
    _check_or_raise(existing, data.progress_percentage, data.report_date)

    report = WorkProgress(
        work_details_id=detail.id,
        progress_percentage=data.progress_percentage,
        report_date=data.report_date,
        notes=data.notes,
        user_id=user.id,
    )
    db.add(report)
    db.flush()
    log_activity(
        db,
        user,
        ACTION_CREATE,
        WorkProgress.__tablename__,
        report.id,
        f"{data.progress_percentage}% on {data.report_date.isoformat()} for work details {detail.id}",
    )
    db.commit()
    db.refresh(report)

    logger.info(
        "add_work_progress: work_details_id=%d progress=%s date=%s",
        detail.id,
        data.progress_percentage,
        data.report_date,
    )
    return report


def delete_work_progress(db: Session, progress_id: int, user: Profile) -> None:
    report = get_work_progress(db, progress_id)
    report.soft_delete()
    log_activity(db, user, ACTION_DELETE, WorkProgress.__tablename__, report.id)
    db.commit()
    logger.info("delete_work_progress: id=%d", progress_id)


# ---------------------------------------------------------------------------
# Project progress (per work order)
# ---------------------------------------------------------------------------


def _get_live_work_order(db: Session, work_order_id: int) -> WorkOrder:
    work_order = (
        db.query(WorkOrder)
        .filter(WorkOrder.id == work_order_id, WorkOrder.active())
        .first()
    )
    if work_order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Work order with id {work_order_id} not found.",
        )
    return work_order


def add_project_progress(
    db: Session,
    data: ProjectProgressCreate,
    user: Profile,
) -> ProjectProgress:
    """Validate and persist a work-order level progress report.

    Same rules and HTTP errors as ``add_work_progress``.
    """
    work_order = _get_live_work_order(db, data.work_order_id)
    _check_or_raise(_project_entries(work_order), data.progress, data.report_date)

    report = ProjectProgress(
        work_order_id=work_order.id,
        progress=data.progress,
        report_date=data.report_date,
        notes=data.notes,
        user_id=user.id,
    )
    db.add(report)
    db.flush()
    log_activity(db, user, ACTION_CREATE, ProjectProgress.__tablename__, report.id)
    db.commit()
    db.refresh(report)

    logger.info(
        "add_project_progress: work_order_id=%d progress=%s date=%s",
        work_order.id,
        data.progress,
        data.report_date,
    )
    return report


def delete_project_progress(db: Session, progress_id: int, user: Profile) -> None:
    report = (
        db.query(ProjectProgress)
        .filter(ProjectProgress.id == progress_id, ProjectProgress.active())
        .first()
    )
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Project progress with id {progress_id} not found.",
        )
    report.soft_delete()
    log_activity(db, user, ACTION_DELETE, ProjectProgress.__tablename__, report.id)
    db.commit()


def _live_work_orders(db: Session) -> list[WorkOrder]:
    return (
        db.query(WorkOrder)
        .options(
            selectinload(WorkOrder.vessel),
            selectinload(WorkOrder.project_progress).selectinload(ProjectProgress.reporter),
        )
        .filter(WorkOrder.active())
        .order_by(WorkOrder.id)
        .all()
    )


def get_progress_summaries(db: Session) -> list[ProgressSummaryResponse]:
    """Latest project progress per work order, only for orders with reports."""
    summaries = []
    for work_order in _live_work_orders(db):
        summary = summarize_progress(_project_entries(work_order))
        if not summary.progress_count:
            continue
        summaries.append(
            ProgressSummaryResponse(
                work_order_id=work_order.id,
                shipyard_wo_number=work_order.shipyard_wo_number,
                customer_wo_number=work_order.customer_wo_number,
                vessel_name=work_order.vessel.name if work_order.vessel else None,
                current_progress=summary.current_progress,
                latest_report_date=summary.latest_progress_date,
                total_reports=summary.progress_count,
                progress_history=[
                    ProgressHistoryItem(date=h.date, progress=h.progress, reporter=h.reporter)
                    for h in summary.progress_history
                ],
            )
        )
    logger.debug("get_progress_summaries: %d work orders with reports", len(summaries))
    return summaries


def get_progress_chart(db: Session, work_order_id: int) -> list[ProgressChartPoint]:
    """Project progress of one work order in ascending date order."""
    work_order = _get_live_work_order(db, work_order_id)
    history = summarize_progress(_project_entries(work_order)).progress_history
    return [
        ProgressChartPoint(date=h.date, progress=h.progress, reporter=h.reporter)
        for h in reversed(history)
    ]


def get_progress_stats(
    db: Session,
    today: datetime.date | None = None,
) -> ProgressStatsResponse:
    """Dashboard statistics over live work orders and work details."""
    project_summaries = [
        summarize_progress(_project_entries(wo)) for wo in _live_work_orders(db)
    ]
    details = (
        db.query(WorkDetails)
        .options(
            selectinload(WorkDetails.progress_reports),
            selectinload(WorkDetails.verifications),
        )
        .join(WorkOrder, WorkDetails.work_order_id == WorkOrder.id)
        .filter(WorkDetails.active(), WorkOrder.active())
        .all()
    )
    detail_summaries = [summarize_detail(d)[0] for d in details]

    stats = compute_progress_stats(project_summaries, detail_summaries, today=today)
    return ProgressStatsResponse.model_validate(stats)


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------


def work_progress_response(report: WorkProgress) -> WorkProgressResponse:
    response = WorkProgressResponse.model_validate(report)
    reporter = report.reporter.name if report.reporter is not None else None
    return response.model_copy(update={"reporter_name": reporter})


def project_progress_response(report: ProjectProgress) -> ProjectProgressResponse:
    response = ProjectProgressResponse.model_validate(report)
    reporter = report.reporter.name if report.reporter is not None else None
    return response.model_copy(update={"reporter_name": reporter})
