"""
Vessel export service.

Builds the denormalised CSV export in four steps:

1. ``load_vessels`` reads live vessels (optionally filtered by id) with
   their work orders, invoices, work details, verifications and progress
   reports eagerly loaded.
2. ``build_export_nodes`` turns the ORM graph into ``ExportNode`` trees and
   annotates work details and work orders with the aggregated progress.
3. ``flatten_tree`` emits one row per progress report (or per childless
   node), dropping ``FINANCIAL_COLUMNS`` for callers without the
   ``view-financial-data`` capability.
4. ``generate_csv`` renders the rows and ``make_export_filename`` names the
   file.

Soft-deleted rows are skipped at every level.
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session, selectinload

from marine_ops.exporters.csv_exporter import (
    generate_csv,
    make_export_filename,
    sanitize_scope,
)
from marine_ops.exporters.tree import ExportNode, flatten_tree
from marine_ops.exporters.vessel_export import FINANCIAL_COLUMNS, VESSEL_EXPORT_LEVELS
from marine_ops.models.profile import Profile
from marine_ops.models.vessel import Vessel
from marine_ops.models.work_details import WorkDetails
from marine_ops.models.work_order import WorkOrder
from marine_ops.services.auth_service import can_view_financial_data
from marine_ops.services.progress_aggregator import (
    ProgressEntry,
    ProgressSummary,
    aggregate_work_order,
)
from marine_ops.services.progress_service import summarize_detail

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """Rendered export ready to be streamed to the client.

    Attributes:
        content: CSV text (``""`` when there is nothing to export).
        filename: Suggested download file name.
        total_records: Number of data rows (header excluded).
        include_financial: Whether financial columns were kept.
    """

    content: str
    filename: str
    total_records: int
    include_financial: bool


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_vessels(db: Session, vessel_ids: Sequence[int] | None = None) -> list[Vessel]:
    """Return live vessels ordered by name with the whole export graph loaded."""
    query = (
        db.query(Vessel)
        .options(
            selectinload(Vessel.work_orders).selectinload(WorkOrder.invoices),
            selectinload(Vessel.work_orders)
            .selectinload(WorkOrder.work_details)
            .selectinload(WorkDetails.verifications),
            selectinload(Vessel.work_orders)
            .selectinload(WorkOrder.work_details)
            .selectinload(WorkDetails.progress_reports),
        )
        .filter(Vessel.active())
    )
    if vessel_ids:
        query = query.filter(Vessel.id.in_(list(vessel_ids)))
    return query.order_by(Vessel.name, Vessel.id).all()


def _live(records: Sequence[Any]) -> list[Any]:
    return [r for r in records if r.deleted_at is None]


def _fields(record: Any) -> dict[str, Any]:
    """Column values of an ORM row keyed by attribute name."""
    return {column.key: getattr(record, column.key) for column in record.__table__.columns}


# ---------------------------------------------------------------------------
# Tree construction
# ---------------------------------------------------------------------------


def _work_detail_node(detail: WorkDetails) -> tuple[ExportNode, ProgressSummary, bool]:
    reports = _live(detail.progress_reports)
    verifications = _live(detail.verifications)
    entries = [ProgressEntry.from_record(r) for r in reports]
    summary, verified = summarize_detail(detail, entries)

    fields = _fields(detail)
    fields.update(
        current_progress=summary.current_progress,
        latest_progress_date=summary.latest_progress_date,
        progress_count=summary.progress_count,
    )

    children = []
    for report, entry in zip(reports, entries):
        report_fields = _fields(report)
        # Numeric column comes back as Decimal("80.00"); export the plain number
        report_fields["progress_percentage"] = entry.percentage
        children.append(ExportNode(fields=report_fields))

    node = ExportNode(
        fields=fields,
        attached={"verification": [_fields(v) for v in verifications]},
        children=children,
    )
    return node, summary, verified


def _work_order_node(work_order: WorkOrder) -> ExportNode:
    detail_nodes = []
    summaries = []
    verified_flags = []
    for detail in _live(work_order.work_details):
        node, summary, verified = _work_detail_node(detail)
        detail_nodes.append(node)
        summaries.append(summary)
        verified_flags.append(verified)

    aggregate = aggregate_work_order(summaries, verified_flags)

    fields = _fields(work_order)
    fields.update(
        overall_progress=aggregate.overall_progress,
        is_fully_completed=aggregate.is_fully_completed,
        verification_status=aggregate.verification_status,
    )
    return ExportNode(
        fields=fields,
        attached={"invoice": [_fields(i) for i in _live(work_order.invoices)]},
        children=detail_nodes,
    )


def build_export_nodes(vessels: Sequence[Vessel]) -> list[ExportNode]:
    """Convert loaded vessels into labelled export trees.

    Raises:
        MalformedProgressError: If a stored progress report has no usable
            date or percentage.
    """
    return [
        ExportNode(
            fields=_fields(vessel),
            children=[_work_order_node(wo) for wo in _live(vessel.work_orders)],
        )
        for vessel in vessels
    ]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def export_scope(vessel_ids: Sequence[int] | None, vessels: Sequence[Vessel]) -> str:
    """Return the filename scope for the requested vessel selection.

    ``all_vessels`` without a filter, the sanitised vessel name for a single
    id (``vessel_<id>`` when it has no usable name), ``<N>_vessels`` otherwise.
    """
    if not vessel_ids:
        return "all_vessels"
    if len(vessel_ids) == 1:
        vessel_id = vessel_ids[0]
        name = next((v.name for v in vessels if v.id == vessel_id), None)
        return sanitize_scope(name, f"vessel_{vessel_id}")
    return f"{len(vessel_ids)}_vessels"


def export_vessels(
    db: Session,
    user: Profile,
    vessel_ids: Sequence[int] | None = None,
    today: datetime.date | None = None,
) -> ExportResult:
    """Produce the vessel CSV export for ``user``.

    Args:
        db: Active SQLAlchemy session.
        user: Caller; decides whether financial columns are included.
        vessel_ids: Optional vessel filter; empty or ``None`` exports all.
        today: Date stamped into the filename; defaults to ``date.today()``.

    Returns:
        An ``ExportResult``.  Zero matching vessels gives an empty body and
        ``total_records == 0``.
    """
    today = today or datetime.date.today()
    include_financial = can_view_financial_data(user)
    exclude = () if include_financial else FINANCIAL_COLUMNS

    vessels = load_vessels(db, vessel_ids)
    rows = flatten_tree(build_export_nodes(vessels), VESSEL_EXPORT_LEVELS, exclude)
    content = generate_csv(rows)
    filename = make_export_filename(export_scope(vessel_ids, vessels), today, include_financial)

    logger.info(
        "Vessel export by user %s: %d vessels, %d rows, financial=%s",
        user.id,
        len(vessels),
        len(rows),
        include_financial,
    )
    return ExportResult(
        content=content,
        filename=filename,
        total_records=len(rows),
        include_financial=include_financial,
    )
