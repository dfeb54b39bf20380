"""
Data import service layer.

Handles CSV and Excel uploads end-to-end:

1. Parse the upload with ``EntityParser`` for the requested entity.
2. Apply the write rules the API enforces: every parent row must be live,
   ``work_progress`` follows the progress rules (range, one report per
   date, no decrease) and ``invoice_details`` allows one live invoice per
   work order.
3. Write the records in batches of ``IMPORT_BATCH_SIZE``; each batch
   commits on its own, so a failing batch does not undo earlier ones.
4. Append an ``ActivityLog`` entry and return an ``ImportResult``.

Options
-------
- ``validate_only`` stops after step 2 and writes nothing.
- ``overwrite`` upserts by ``id`` (``Session.merge``).
- ``skip_duplicates`` counts a batch rejected by an integrity constraint
  (e.g. an ``id`` that already exists) as skipped instead of failed.

Any parse or validation error blocks the whole import.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from marine_ops.models.invoice import InvoiceDetails
from marine_ops.models.profile import Profile
from marine_ops.models.vessel import Vessel
from marine_ops.models.work_details import WorkDetails
from marine_ops.models.work_order import WorkOrder
from marine_ops.models.work_progress import WorkProgress
from marine_ops.parsers.entity_parser import ENTITY_COLUMNS, EntityParser
from marine_ops.schemas.import_data import ImportEntity, ImportOptions, ImportResult
from marine_ops.services.activity_log_service import ACTION_IMPORT, log_activity
from marine_ops.services.progress_aggregator import ProgressEntry
from marine_ops.services.progress_service import (
    DuplicateProgressError,
    ProgressValidationError,
    validate_new_progress,
)
from marine_ops.utils.constants import IMPORT_BATCH_SIZE, IMPORTABLE_ENTITIES

logger = logging.getLogger(__name__)

_ENTITY_MODELS: dict[str, Any] = {
    "vessels": Vessel,
    "work_orders": WorkOrder,
    "work_details": WorkDetails,
    "work_progress": WorkProgress,
    "invoice_details": InvoiceDetails,
}

# entity -> (parent model, foreign key column, label used in errors)
_ENTITY_PARENTS: dict[str, tuple[Any, str, str]] = {
    "work_orders": (Vessel, "vessel_id", "vessel"),
    "work_details": (WorkOrder, "work_order_id", "work order"),
    "work_progress": (WorkDetails, "work_details_id", "work details"),
    "invoice_details": (WorkOrder, "work_order_id", "work order"),
}


def list_entities() -> list[ImportEntity]:
    return [
        ImportEntity(
            entity=entity,
            columns=[c.name for c in ENTITY_COLUMNS[entity]],
            required=[c.name for c in ENTITY_COLUMNS[entity] if c.required],
        )
        for entity in IMPORTABLE_ENTITIES
    ]


# ---------------------------------------------------------------------------
# Write rules
# ---------------------------------------------------------------------------


def _check_parents(
    db: Session,
    entity: str,
    records: list[dict[str, Any]],
) -> list[str]:
    """Reject records whose parent row is missing or soft-deleted."""
    if entity not in _ENTITY_PARENTS:
        return []
    parent_model, key, label = _ENTITY_PARENTS[entity]
    wanted = {r[key] for r in records}
    live = {
        row.id
        for row in db.query(parent_model.id)
        .filter(parent_model.id.in_(wanted), parent_model.active())
        .all()
    }
    return [
        f"Record {number}: {label} {record[key]} does not exist."
        for number, record in enumerate(records, start=1)
        if record[key] not in live
    ]


def _check_progress_records(
    db: Session,
    records: list[dict[str, Any]],
    options: ImportOptions,
) -> tuple[list[dict[str, Any]], list[str], int]:
    """Apply the progress write rules to the uploaded reports.

    Records are checked in file order against the live reports of their
    work detail plus the reports accepted earlier in the same file.  With
    ``overwrite``, a record carrying an ``id`` replaces that report, so the
    report it replaces is left out of the comparison.

    Returns:
        ``(accepted, errors, skipped)``.  Duplicate dates count as skipped
        when ``skip_duplicates`` is set, otherwise as errors.
    """
    detail_ids = {r["work_details_id"] for r in records}
    report_ids = {r["id"] for r in records if r.get("id") is not None}
    known: dict[int, list[ProgressEntry]] = defaultdict(list)
    live = (
        db.query(WorkProgress)
        .filter(
            or_(
                WorkProgress.work_details_id.in_(detail_ids),
                WorkProgress.id.in_(report_ids),
            ),
            WorkProgress.active(),
        )
        .all()
    )
    for report in live:
        known[report.work_details_id].append(ProgressEntry.from_record(report))

    accepted: list[dict[str, Any]] = []
    errors: list[str] = []
    skipped = 0
    for number, record in enumerate(records, start=1):
        detail_id = record["work_details_id"]
        percentage = float(record["progress_percentage"])
        replaces = record.get("id") if options.overwrite else None
        existing = [e for e in known[detail_id] if replaces is None or e.sequence != replaces]
        try:
            validate_new_progress(existing, percentage, record["report_date"])
        except DuplicateProgressError as exc:
            if options.skip_duplicates:
                skipped += 1
                continue
            errors.append(f"Record {number} (work details {detail_id}): {exc}")
            continue
        except ProgressValidationError as exc:
            errors.append(f"Record {number} (work details {detail_id}): {exc}")
            continue

        if replaces is not None:
            # The replaced report may currently sit under another detail
            for entries in known.values():
                entries[:] = [e for e in entries if e.sequence != replaces]
        known[detail_id].append(
            ProgressEntry(
                percentage=percentage,
                report_date=record["report_date"],
                sequence=replaces or 0,
            )
        )
        accepted.append(record)
    return accepted, errors, skipped


def _check_invoice_records(
    db: Session,
    records: list[dict[str, Any]],
    options: ImportOptions,
) -> tuple[list[dict[str, Any]], list[str], int]:
    """Keep at most one live invoice per work order.

    A record clashes with a live invoice of its work order, or with an
    earlier record of the same file for that work order.  With
    ``overwrite``, a record whose ``id`` is the work order's own invoice
    does not clash.

    Returns:
        ``(accepted, errors, skipped)``.  Clashes count as skipped when
        ``skip_duplicates`` is set, otherwise as errors.
    """
    work_order_ids = {r["work_order_id"] for r in records}
    invoice_ids = {r["id"] for r in records if r.get("id") is not None}
    owners: dict[int, Any] = {}
    live = (
        db.query(InvoiceDetails)
        .filter(
            or_(
                InvoiceDetails.work_order_id.in_(work_order_ids),
                InvoiceDetails.id.in_(invoice_ids),
            ),
            InvoiceDetails.active(),
        )
        .all()
    )
    for invoice in live:
        owners[invoice.work_order_id] = invoice.id

    accepted: list[dict[str, Any]] = []
    errors: list[str] = []
    skipped = 0
    for number, record in enumerate(records, start=1):
        work_order_id = record["work_order_id"]
        replaces = record.get("id") if options.overwrite else None
        owner = owners.get(work_order_id)
        if owner is not None and (replaces is None or owner != replaces):
            if options.skip_duplicates:
                skipped += 1
                continue
            holder = f"invoice {owner}" if isinstance(owner, int) else owner
            errors.append(
                f"Record {number}: work order {work_order_id} already has {holder}."
            )
            continue

        if replaces is not None:
            owners = {wo: inv for wo, inv in owners.items() if inv != replaces}
        owners[work_order_id] = replaces if replaces is not None else f"an invoice in record {number}"
        accepted.append(record)
    return accepted, errors, skipped


_ENTITY_RULES = {
    "work_progress": _check_progress_records,
    "invoice_details": _check_invoice_records,
}


# ---------------------------------------------------------------------------
# Batch writer
# ---------------------------------------------------------------------------


def _write_batches(
    db: Session,
    model: Any,
    records: list[dict[str, Any]],
    options: ImportOptions,
    user: Profile,
) -> tuple[int, int, list[str]]:
    """Insert or upsert records batch by batch.

    Returns:
        ``(imported, skipped, errors)``.
    """
    stamp_user = hasattr(model, "user_id")
    imported = 0
    skipped = 0
    errors: list[str] = []

    for number, start in enumerate(range(0, len(records), IMPORT_BATCH_SIZE), start=1):
        batch = records[start:start + IMPORT_BATCH_SIZE]
        rows = [
            model(**record, user_id=user.id) if stamp_user else model(**record)
            for record in batch
        ]
        try:
            if options.overwrite:
                for row in rows:
                    db.merge(row)
            else:
                db.add_all(rows)
            db.commit()
            imported += len(batch)
        except IntegrityError as exc:
            db.rollback()
            if options.skip_duplicates and not options.overwrite:
                skipped += len(batch)
                logger.info("import batch %d skipped: %s", number, exc.orig)
            else:
                errors.append(f"Batch {number}: {exc.orig}")
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("import batch %d failed", number)
            errors.append(f"Batch {number}: {exc}")

    return imported, skipped, errors


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def import_upload(
    db: Session,
    file: UploadFile,
    entity: str,
    options: ImportOptions,
    user: Profile,
) -> ImportResult:
    """Import an uploaded CSV/XLSX file into ``entity``.

    Raises:
        HTTPException 422: Unknown entity or empty file.
    """
    if entity not in _ENTITY_MODELS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown entity '{entity}'. Valid values: {', '.join(IMPORTABLE_ENTITIES)}.",
        )

    raw = await file.read()
    filename = file.filename or "upload.csv"
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="The uploaded file is empty.",
        )

    parsed = EntityParser(raw, entity, filename).parse()
    logger.info(
        "import_upload: entity=%s file='%s' user=%s %s",
        entity,
        filename,
        user.username,
        parsed.summary(),
    )

    records = parsed.records
    errors = list(parsed.errors)
    skipped = 0
    if parsed.ok:
        errors.extend(_check_parents(db, entity, records))
    if not errors and entity in _ENTITY_RULES:
        records, rule_errors, skipped = _ENTITY_RULES[entity](db, records, options)
        errors.extend(rule_errors)

    def _result(success: bool, message: str, imported: int = 0) -> ImportResult:
        return ImportResult(
            success=success,
            message=message,
            entity=entity,
            format=parsed.format_name,
            total_records=parsed.record_count,
            imported_count=imported,
            skipped_count=skipped,
            errors=errors,
            warnings=parsed.warnings,
        )

    if errors:
        return _result(False, f"Validation failed with {len(errors)} error(s). Nothing was imported.")

    if options.validate_only:
        return _result(True, f"Validation completed. {len(records)} records ready for import.")

    imported, batch_skipped, batch_errors = _write_batches(
        db, _ENTITY_MODELS[entity], records, options, user
    )
    skipped += batch_skipped
    errors.extend(batch_errors)

    message = f"Import completed. {imported} records imported, {skipped} skipped."
    log_activity(db, user, ACTION_IMPORT, _ENTITY_MODELS[entity].__tablename__, None, message)
    db.commit()

    return _result(not errors or imported > 0, message, imported)
