"""
Column layout of the denormalised vessel export.

Levels run vessel → work order (+ invoice) → work detail (+ verification)
→ progress report.  Output column names are part of the file format that
downstream spreadsheets rely on; source keys are the ORM attribute names
plus the derived progress values computed at load time.
"""

from __future__ import annotations

from typing import Final

from marine_ops.exporters.tree import ColumnGroup, ExportLevel

VESSEL_COLUMNS = ColumnGroup(
    name="vessel",
    columns=(
        ("vessel_id", "id"),
        ("vessel_name", "name"),
        ("vessel_type", "type"),
        ("vessel_company", "company"),
    ),
)

WORK_ORDER_COLUMNS = ColumnGroup(
    name="work_order",
    columns=(
        ("work_order_id", "id"),
        ("wo_created_at", "created_at"),
        ("wo_updated_at", "updated_at"),
        ("customer_wo_number", "customer_wo_number"),
        ("customer_wo_date", "customer_wo_date"),
        ("shipyard_wo_number", "shipyard_wo_number"),
        ("shipyard_wo_date", "shipyard_wo_date"),
        ("wo_document_delivery_date", "wo_document_delivery_date"),
        ("wo_location", "wo_location"),
        ("wo_description", "wo_description"),
        ("wo_user_id", "user_id"),
        ("wo_vessel_id", "vessel_id"),
        ("wo_overall_progress", "overall_progress"),
        ("wo_is_fully_completed", "is_fully_completed"),
        ("wo_verification_status", "verification_status"),
    ),
)

INVOICE_COLUMNS = ColumnGroup(
    name="invoice",
    columns=(
        ("invoice_id", "id"),
        ("invoice_created_at", "created_at"),
        ("invoice_updated_at", "updated_at"),
        ("wo_document_collection_date", "wo_document_collection_date"),
        ("invoice_number", "invoice_number"),
        ("faktur_number", "faktur_number"),
        ("invoice_due_date", "due_date"),
        ("delivery_date", "delivery_date"),
        ("collection_date", "collection_date"),
        ("receiver_name", "receiver_name"),
        ("payment_price", "payment_price"),
        ("payment_status", "payment_status"),
        ("payment_date", "payment_date"),
        ("invoice_remarks", "remarks"),
        ("invoice_work_order_id", "work_order_id"),
        ("invoice_user_id", "user_id"),
    ),
)

WORK_DETAIL_COLUMNS = ColumnGroup(
    name="work_detail",
    columns=(
        ("work_detail_id", "id"),
        ("wd_created_at", "created_at"),
        ("wd_updated_at", "updated_at"),
        ("work_description", "description"),
        ("work_location", "location"),
        ("work_pic", "pic"),
        ("wd_planned_start_date", "planned_start_date"),
        ("wd_target_close_date", "target_close_date"),
        ("period_close_target", "period_close_target"),
        ("wd_actual_start_date", "actual_start_date"),
        ("wd_actual_close_date", "actual_close_date"),
        ("work_permit_url", "work_permit_url"),
        ("wd_storage_path", "storage_path"),
        ("wd_user_id", "user_id"),
        ("wd_work_order_id", "work_order_id"),
        ("wd_current_progress", "current_progress"),
        ("wd_latest_progress_date", "latest_progress_date"),
        ("wd_progress_count", "progress_count"),
    ),
)

VERIFICATION_COLUMNS = ColumnGroup(
    name="verification",
    columns=(
        ("verification_id", "id"),
        ("verification_date", "verification_date"),
        ("work_verification", "work_verification"),
        ("verification_user_id", "user_id"),
        ("verification_work_details_id", "work_details_id"),
    ),
)

PROGRESS_COLUMNS = ColumnGroup(
    name="progress",
    columns=(
        ("progress_id", "id"),
        ("progress_percentage", "progress_percentage"),
        ("report_date", "report_date"),
        ("progress_storage_path", "storage_path"),
        ("evidence_url", "evidence_url"),
        ("progress_work_details_id", "work_details_id"),
        ("progress_user_id", "user_id"),
        ("progress_created_at", "created_at"),
    ),
)

VESSEL_EXPORT_LEVELS: Final[tuple[ExportLevel, ...]] = (
    ExportLevel(VESSEL_COLUMNS),
    ExportLevel(WORK_ORDER_COLUMNS, attached=(INVOICE_COLUMNS,)),
    ExportLevel(WORK_DETAIL_COLUMNS, attached=(VERIFICATION_COLUMNS,)),
    ExportLevel(PROGRESS_COLUMNS),
)

# Dropped from every row for callers without the view-financial-data capability
FINANCIAL_COLUMNS: Final[frozenset[str]] = frozenset({"payment_price"})
